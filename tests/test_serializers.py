import datetime
from collections import OrderedDict

import orjson
import pytest

from structclass import (
    Field,
    SerializationError,
    Struct,
    UndeclaredFieldError,
    serialize,
    to_dict,
    to_json,
)
from structclass.config import settings

from tests.structs import Address, Person


class Event(Struct):
    title = Field()
    starts_at = Field()
    tags = Field(default=("a", "b"))


class Holder(Struct):
    value = Field()


def test_to_dict_keeps_declaration_order(person: Person):
    data = person.to_dict()

    assert isinstance(data, OrderedDict)
    assert list(data) == ["name", "age", "address", "friends"]
    assert to_dict(person) == data


def test_to_dict_does_not_expand_nested_structs(person: Person, address: Address):
    assert person.to_dict()["address"] is address


def test_to_dict_includes_defaults():
    assert Person().to_dict() == {
        "name": None,
        "age": 0,
        "address": None,
        "friends": [],
    }


def test_json_hook_returns_the_mapping(person: Person):
    assert person.__json__() == person.to_dict()


def test_serialize_without_depth_is_to_dict(person: Person):
    assert serialize(person) == person.to_dict()


def test_serialize_expands_nested_structs(person: Person):
    person.friends = [Person(name="Grace", address=Address(city="NYC"))]

    data = serialize(person, depth=1)

    assert data["address"] == {"street": "1 Main Street", "city": "Springfield"}
    assert data["friends"][0]["name"] == "Grace"
    # Only one level is expanded
    assert isinstance(data["friends"][0]["address"], Address)


def test_serialize_keeps_tuples_in_python_format():
    assert serialize(Event())["tags"] == ("a", "b")


def test_serialize_to_json_format():
    event = Event(
        title="Launch",
        starts_at=datetime.datetime(2024, 1, 2, 3, 4, 5),
    )

    assert serialize(event, fmt="json") == {
        "title": "Launch",
        "starts_at": "2024-01-02T03:04:05",
        "tags": ["a", "b"],
    }


def test_serialize_to_json_format_expands_unexpanded_structs(person: Person):
    data = serialize(person, fmt="json")
    assert data["address"] == {"street": "1 Main Street", "city": "Springfield"}


def test_include_and_exclude(person: Person):
    assert list(serialize(person, include=["age", "name"])) == ["name", "age"]
    assert list(serialize(person, exclude=["friends", "address"])) == [
        "name",
        "age",
    ]


def test_include_unknown_field_fails(person: Person):
    with pytest.raises(UndeclaredFieldError):
        serialize(person, include=["nickname"])


def test_unsupported_format(person: Person):
    with pytest.raises(SerializationError):
        serialize(person, fmt="xml")  # type: ignore[arg-type]


def test_unserializable_value_in_json_format():
    with pytest.raises(SerializationError):
        serialize(Holder(value=object()), fmt="json")


def test_to_json_expands_nested_structs(person: Person):
    person.friends = [Person(name="Grace")]

    assert orjson.loads(to_json(person)) == {
        "name": "Ada",
        "age": 36,
        "address": {"street": "1 Main Street", "city": "Springfield"},
        "friends": [
            {"name": "Grace", "age": 0, "address": None, "friends": []},
        ],
    }


def test_to_json_preserves_field_order():
    assert to_json(Address(street="Elm", city="Paris")) == (
        '{"street":"Elm","city":"Paris"}'
    )


def test_to_json_accepts_containers_of_structs():
    assert to_json([Holder(value=1)]) == '[{"value":1}]'


def test_to_json_unserializable_value():
    with pytest.raises(SerializationError):
        to_json(Holder(value=object()))


def test_to_json_uses_configured_fallback():
    settings.configure(JSON_DEFAULT=lambda obj: f"<{type(obj).__name__}>")
    assert to_json(Holder(value=object())) == '{"value":"<object>"}'


def test_to_json_options():
    output = to_json(Holder(value=1), option=orjson.OPT_INDENT_2)
    assert output == '{\n  "value": 1\n}'
