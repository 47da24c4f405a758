import typing
from collections import OrderedDict

import orjson

from .config import settings
from .exceptions import SerializationError, UndeclaredFieldError
from .struct import Struct
from .utils import is_mapping, is_sequence, type_name


def _json_default(obj: typing.Any) -> typing.Any:
    """Fallback for values `orjson` does not serialize natively."""
    if isinstance(obj, Struct) or callable(getattr(type(obj), "__json__", None)):
        return obj.__json__()

    fallback = settings.JSON_DEFAULT
    if fallback is not None:
        return fallback(obj)
    raise TypeError(f"Type is not JSON serializable: {type(obj).__name__}")


def _to_json_compatible(value: typing.Any) -> typing.Any:
    return orjson.loads(
        orjson.dumps(value, default=_json_default, option=settings.JSON_OPTIONS)
    )


def aggregate_field_names(
    cls: typing.Type[Struct],
    include: typing.Optional[typing.Iterable[str]] = None,
    exclude: typing.Optional[typing.Iterable[str]] = None,
) -> typing.List[str]:
    """
    Return the names of the fields to serialize, in declaration order.

    :param cls: The struct type.
    :param include: Only these fields. Defaults to all fields.
    :param exclude: Leave out these fields.
    :raises UndeclaredFieldError: If a name is not a declared field.
    """
    include = set(include) if include else None
    exclude = set(exclude) if exclude else set()
    for name in (include or set()) | exclude:
        if name not in cls.__fields__:
            raise UndeclaredFieldError(type_name(cls), name, "get")

    return [
        name
        for name in cls.__fields__
        if (include is None or name in include) and name not in exclude
    ]


def _serialize_value(value: typing.Any, fmt: str, depth: int) -> typing.Any:
    if isinstance(value, Struct):
        if depth > 0:
            return _serialize_instance(
                fmt, value.__fields__, value, depth=depth - 1
            )
    elif is_sequence(value):
        serialized = [_serialize_value(element, fmt, depth) for element in value]
        if fmt == "python" and isinstance(value, tuple):
            return tuple(serialized)
        return serialized
    elif is_mapping(value):
        return {
            key: _serialize_value(element, fmt, depth)
            for key, element in value.items()
        }

    if fmt == "json":
        return _to_json_compatible(value)
    return value


def _serialize_instance(
    fmt: str,
    fields: typing.Iterable[str],
    instance: Struct,
    depth: int = 0,
) -> typing.OrderedDict[str, typing.Any]:
    """
    Serialize a struct instance to an ordered dictionary.

    :param fmt: The format for serialization ("python" or "json").
    :param fields: The fields to include in the serialization.
    :param instance: The struct instance to serialize.
    :param depth: Levels of nested structs to expand.
    :return: A dictionary representation of the struct instance.
    """
    serialized_data = OrderedDict()
    instance_type = type(instance)
    for name in fields:
        field = instance_type.__fields__[name]
        value = field.__get__(instance, instance_type)
        try:
            serialized_data[name] = _serialize_value(value, fmt, depth)
        except (TypeError, ValueError) as exc:
            raise SerializationError(
                f"Failed to serialize '{type_name(instance)}.{name}'.",
                name,
            ) from exc
    return serialized_data


def serialize(
    obj: Struct,
    *,
    fmt: typing.Literal["python", "json"] = "python",
    depth: int = 0,
    include: typing.Optional[typing.Iterable[str]] = None,
    exclude: typing.Optional[typing.Iterable[str]] = None,
) -> typing.OrderedDict[str, typing.Any]:
    """
    Return a serialized representation of a struct.

    With `fmt="python"` values are kept as they are. With `fmt="json"` they are
    converted to JSON-compatible values, and any struct not expanded by `depth`
    is converted through its `__json__` hook.

    :param obj: The struct to serialize.
    :param fmt: "python" or "json".
    :param depth: Levels of nested structs (held directly, or in lists, tuples
        and mappings) to expand. With 0, the result is the same as `obj.to_dict()`.
    :param include: Only serialize these fields.
    :param exclude: Do not serialize these fields.
    """
    if fmt not in ("python", "json"):
        raise SerializationError(
            f"Unsupported serialization format {fmt!r}. Supported formats are: python, json."
        )

    if not (include or exclude):
        fields = list(type(obj).__fields__)
    else:
        fields = aggregate_field_names(type(obj), include=include, exclude=exclude)
    return _serialize_instance(fmt, fields, obj, depth)


def to_json(
    obj: typing.Any,
    *,
    option: typing.Optional[int] = None,
) -> str:
    """
    Encode a struct, or any value holding structs, as JSON text.

    Structs are encoded through their `__json__` hook, so nested structs are
    expanded at every level.

    :param obj: The value to encode.
    :param option: `orjson` option flags. Defaults to the `JSON_OPTIONS` setting.
    """
    if option is None:
        option = settings.JSON_OPTIONS
    try:
        return orjson.dumps(obj, default=_json_default, option=option).decode("utf-8")
    except orjson.JSONEncodeError as exc:
        raise SerializationError(
            f"Failed to encode '{type(obj).__name__}' as JSON.", exc
        ) from exc


__all__ = ["serialize", "to_json", "aggregate_field_names"]
