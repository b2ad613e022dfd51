import anyio
import pytest

from tessera import ActorDestroyed, TesseraError, create_state_actor

pytestmark = pytest.mark.anyio


async def test_rejects_new_messages_after_destroy():
    actor = create_state_actor(0, lambda _, msg: msg)

    actor.destroy()

    with pytest.raises(ActorDestroyed, match="Actor has been destroyed"):
        await actor.send(1)


async def test_destroyed_error_is_a_tessera_error():
    actor = create_state_actor(0, lambda _, msg: msg)
    actor.destroy()

    with pytest.raises(TesseraError):
        await actor.send(1)


async def test_state_stays_readable_after_destroy():
    actor = create_state_actor(0, lambda state, msg: state + 1)

    await actor.send("inc")
    actor.destroy()

    with pytest.raises(ActorDestroyed):
        await actor.send("inc")

    assert actor.get_state() == 1


async def test_clears_subscribers_on_destroy():
    actor = create_state_actor(0, lambda _, msg: msg)

    calls: list[int] = []
    unsubscribe = actor.subscribe(calls.append)

    actor.destroy()

    assert actor.subscriber_count == 0
    assert calls == [0]
    unsubscribe()


async def test_destroy_is_idempotent():
    actor = create_state_actor(0, lambda _, msg: msg)

    actor.destroy()
    actor.destroy()

    assert actor.destroyed is True


async def test_subscribe_after_destroy_emits_once_and_never_again():
    actor = create_state_actor(5, lambda _, msg: msg)
    actor.destroy()

    calls: list[int] = []
    unsubscribe = actor.subscribe(calls.append)
    unsubscribe()

    assert calls == [5]
    assert actor.subscriber_count == 0


async def test_queued_messages_are_dropped_and_in_flight_turn_does_not_write_state():
    gate = anyio.Event()
    handled: list[str] = []

    async def handler(state, msg):
        handled.append(msg)
        if msg == "block":
            await gate.wait()
        return state + 1

    actor = create_state_actor(0, handler)
    states: list[int] = []
    actor.subscribe(states.append)
    results: dict[str, object] = {}

    async def run(msg):
        try:
            results[msg] = await actor.send(msg)
        except ActorDestroyed as exc:
            results[msg] = exc

    async with anyio.create_task_group() as tg:
        tg.start_soon(run, "block")
        tg.start_soon(run, "queued")
        await anyio.sleep(0.01)

        assert actor.processing is True
        assert actor.pending == 1

        actor.destroy()
        gate.set()

    assert handled == ["block"]
    assert results["block"] == 1
    assert isinstance(results["queued"], ActorDestroyed)
    assert actor.get_state() == 0
    assert states == [0]
    assert actor.processing is False
