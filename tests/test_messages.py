from dataclasses import dataclass

import pytest

from tessera import MessageFactory, create_message_factory, define_message


def test_define_message_without_payload():
    increment = define_message("INCREMENT")

    assert increment() == {"type": "INCREMENT"}


def test_define_message_with_payload():
    add = define_message("ADD")

    assert add(5) == {"type": "ADD", "payload": 5}
    assert add({"x": 1}) == {"type": "ADD", "payload": {"x": 1}}


def test_define_message_rejects_empty_kind():
    with pytest.raises(ValueError):
        define_message("")


def test_parse_validates_message_structure():
    factory = create_message_factory()

    assert factory.parse({"type": "INC"}) == {"type": "INC"}
    assert factory.parse({"type": "ADD", "amount": 5})["type"] == "ADD"
    # Unknown kinds still pass: only the discriminator is checked.
    assert factory.parse({"type": "UNKNOWN"}) == {"type": "UNKNOWN"}

    assert factory.parse({"foo": "bar"}) is None
    assert factory.parse("string") is None
    assert factory.parse(None) is None


def test_is_valid():
    factory = MessageFactory()

    assert factory.is_valid({"type": "INC"}) is True
    assert factory.is_valid({"type": ""}) is False
    assert factory.is_valid({"type": 3}) is False
    assert factory.is_valid({"foo": "bar"}) is False
    assert factory.is_valid(None) is False
    assert factory.is_valid(42) is False


def test_attribute_messages_are_valid():
    @dataclass
    class Inc:
        type: str = "INC"

    factory = MessageFactory()

    assert factory.is_valid(Inc()) is True
    assert factory.get_id(Inc()) == "INC"


def test_get_id_extracts_discriminator():
    factory = MessageFactory()

    assert factory.get_id({"type": "DEC"}) == "DEC"

    with pytest.raises(ValueError):
        factory.get_id({"foo": "bar"})


def test_custom_key_and_is_kind():
    factory = MessageFactory(key="op")

    assert factory.is_kind({"op": "PING"}, "PING") is True
    assert factory.is_kind({"op": "PONG"}, "PING") is False
    assert factory.is_valid({"type": "PING"}) is False
