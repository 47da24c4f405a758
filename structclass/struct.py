"""Struct base class with a closed field set."""

import logging
import typing
from collections import OrderedDict
from types import MappingProxyType
from typing_extensions import Self

from .config import settings
from .exceptions import UndeclaredFieldError
from .fields import Field, empty
from .utils import type_name

if typing.TYPE_CHECKING:
    from .checkers import ConstraintChecker
    from .validation import ValidationReport


logger = logging.getLogger(__name__)


def _struct_repr(instance: "Struct") -> str:
    """Build a string representation of the struct instance."""
    instance_type = type(instance)
    field_strs = []
    for key, field in instance.__fields__.items():
        value = field.__get__(instance, instance_type)
        field_strs.append(f"{key}={value!r}")
    return f"{instance_type.__name__}({', '.join(field_strs)})"


def _struct_eq(instance: "Struct", other: typing.Any) -> bool:
    """Compare two struct instances field by field."""
    if not isinstance(other, instance.__class__):
        return NotImplemented
    if instance is other:
        return True
    if type(other).__fields__.keys() != instance.__fields__.keys():
        return False

    instance_type = type(instance)
    for field in instance.__fields__.values():
        if field.__get__(instance, instance_type) != field.__get__(
            other, instance_type
        ):
            return False
    return True


def _struct_hash(instance: "Struct") -> int:
    """Compute the hash of the struct instance from its field values."""
    instance_type = type(instance)
    try:
        return hash(
            tuple(
                field.__get__(instance, instance_type)
                for field in instance.__fields__.values()
            )
        )
    except TypeError as exc:
        raise TypeError(f"Unhashable field value in {instance!r}: {exc}") from exc


def _struct_getitem(instance: "Struct", key: str) -> typing.Any:
    field = instance.__fields__.get(key)
    if field is None:
        raise UndeclaredFieldError(type_name(instance), key, "get")
    return field.__get__(instance, type(instance))


def _struct_setitem(instance: "Struct", key: str, value: typing.Any) -> None:
    field = instance.__fields__.get(key)
    if field is None:
        raise UndeclaredFieldError(type_name(instance), key, "set")
    field.__set__(instance, value)


class StructMeta(type):
    """Metaclass for Struct types"""

    def __new__(
        cls,
        name: str,
        bases: typing.Tuple[typing.Type],
        attrs: typing.Dict[str, typing.Any],
        repr: bool = True,
        eq: bool = True,
        hash: typing.Optional[bool] = None,
        getitem: bool = False,
        setitem: bool = False,
    ):
        """
        Create a new Struct type.

        :param name: Name of the new class.
        :param bases: Base classes for the new class.
        :param attrs: Attributes and namespace for the new class.
        :param repr: If True, add a __repr__ listing the field values.
        :param eq: If True, add an __eq__ comparing field values.
        :param hash: If True, add a __hash__ computed from field values.
            If None, keep the field-value hash of a base struct, if any.
        :param getitem: If True, add a __getitem__ reading fields by name.
        :param setitem: If True, add a __setitem__ writing fields by name.
        :return: New Struct type
        """
        if hash is None:
            hash = any(getattr(base, "__hash__", None) is _struct_hash for base in bases)
        fields: typing.Dict[str, Field] = {}

        # Inherited fields come first, in base class order
        for base_ in reversed(bases):
            for cls_ in reversed(base_.mro()[:-1]):
                if not hasattr(cls_, "__fields__"):
                    continue
                cls_ = typing.cast(typing.Type["Struct"], cls_)
                fields.update(cls_.__fields__)

        for key, value in attrs.items():
            if isinstance(value, Field):
                fields.pop(key, None)
                fields[key] = value
            elif key in fields:
                # A plain attribute shadows an inherited field
                fields.pop(key)

        if repr and "__repr__" not in attrs:
            attrs["__repr__"] = _struct_repr
        if eq and "__eq__" not in attrs:
            attrs["__eq__"] = _struct_eq
        if hash and "__hash__" not in attrs:
            attrs["__hash__"] = _struct_hash
        if getitem:
            attrs["__getitem__"] = _struct_getitem
        if setitem:
            attrs["__setitem__"] = _struct_setitem

        # Make read-only to prevent accidental modification
        attrs["__fields__"] = MappingProxyType(fields)
        return super().__new__(cls, name, bases, attrs)


class Struct(metaclass=StructMeta):
    """
    Base class for structs.

    Structs are defined by subclassing `Struct` and declaring fields as class
    attributes. Only declared fields can be read or written on an instance;
    any other name raises `UndeclaredFieldError`.

    Values are stored as given. Constraints declared on fields are checked
    by `validate()`, which also validates any struct held by a field, directly
    or inside a list, tuple or mapping.

    Python retries a failed attribute lookup through `__getattr__`, so an
    `AttributeError` raised inside a property of a struct surfaces as
    `UndeclaredFieldError` for the property's name. Property getters should
    raise some other exception type.

    Example:
    ```python
    from structclass import Struct, Field, validators

    class Address(Struct):
        city = Field(validators=[validators.not_blank])

    class Person(Struct):
        name = Field(validators=[validators.not_null])
        address = Field()

    person = Person.from_dict({"name": "Ada", "address": Address(city="")})
    person.validate()  # raises ValidationError for `Address.city`
    ```

    :param repr: If True (default), add a __repr__ listing the field values.
    :param eq: If True (default), add an __eq__ comparing field values.
    :param hash: If True, add a __hash__ computed from field values. Subclasses
        of such a struct stay hashable unless they pass `hash=False`.
    :param getitem: If True, add a __getitem__ reading fields by name.
    :param setitem: If True, add a __setitem__ writing fields by name.
    """

    __fields__: typing.Mapping[str, Field[typing.Any]] = {}

    def __init__(self, **values: typing.Any) -> None:
        """
        Initialize every field with its default, then assign `values`.

        :param values: Field values. Unknown names raise `UndeclaredFieldError`.
        """
        for field in type(self).__fields__.values():
            field.set_value(self, field.get_default())
        if values:
            load(self, values, discard_invalid_entries=False)

    def __getattr__(self, name: str) -> typing.Any:
        # Only called when normal lookup fails, i.e. for undeclared names
        raise UndeclaredFieldError(type_name(self), name, "get")

    def __setattr__(self, name: str, value: typing.Any) -> None:
        if name not in type(self).__fields__:
            raise UndeclaredFieldError(type_name(self), name, "set")
        object.__setattr__(self, name, value)

    def __delattr__(self, name: str) -> None:
        if name not in type(self).__fields__:
            raise UndeclaredFieldError(type_name(self), name, "delete")
        object.__delattr__(self, name)

    @classmethod
    def from_dict(
        cls,
        properties: typing.Mapping[str, typing.Any],
        discard_invalid_entries: typing.Optional[bool] = None,
    ) -> Self:
        """
        Build an instance of this struct from a mapping of field names to values.

        :param properties: Field values, assigned in iteration order.
        :param discard_invalid_entries: If True, entries with no corresponding
            field are discarded instead of raising `UndeclaredFieldError`.
        """
        return from_dict(cls, properties, discard_invalid_entries)

    def to_dict(self) -> typing.OrderedDict[str, typing.Any]:
        """Return all declared fields and their values, in declaration order."""
        return to_dict(self)

    def __json__(self) -> typing.OrderedDict[str, typing.Any]:
        """Return the JSON-serializable form of the struct, used by `to_json`."""
        return self.to_dict()

    def validate(self, checker: typing.Optional["ConstraintChecker"] = None) -> None:
        """
        Validate this struct and every struct it holds.

        :param checker: Constraint checker to use. Defaults to the registered checker.
        :raises ValidationError: If any violation is found.
        """
        from .validation import validate

        validate(self, checker)

    def collect(
        self, checker: typing.Optional["ConstraintChecker"] = None
    ) -> "ValidationReport":
        """Return the validation report for this struct, without raising."""
        from .validation import collect

        return collect(self, checker)

    def is_valid(self, checker: typing.Optional["ConstraintChecker"] = None) -> bool:
        """Return True if this struct and every struct it holds are valid."""
        return self.collect(checker).ok


_Struct_co = typing.TypeVar("_Struct_co", bound=Struct, covariant=True)


def load(
    instance: _Struct_co,
    properties: typing.Mapping[str, typing.Any],
    discard_invalid_entries: typing.Optional[bool] = None,
) -> _Struct_co:
    """
    Assign values from a mapping to the fields of an existing struct instance.

    Values are assigned as is, in the mapping's iteration order.

    :param instance: The struct instance to populate.
    :param properties: Mapping of field names to values.
    :param discard_invalid_entries: If True, entries with no corresponding field
        are skipped. Otherwise the first such entry raises `UndeclaredFieldError`.
        Defaults to the `DISCARD_INVALID_ENTRIES` setting.
    :return: This same instance with the values loaded.
    """
    if discard_invalid_entries is None:
        discard_invalid_entries = settings.DISCARD_INVALID_ENTRIES

    fields = type(instance).__fields__
    for name, value in properties.items():
        if name not in fields:
            if discard_invalid_entries:
                logger.debug(
                    "Discarding entry %r with no corresponding field in %s",
                    name,
                    type_name(instance),
                )
                continue
            raise UndeclaredFieldError(type_name(instance), name, "set")
        fields[name].__set__(instance, value)
    return instance


def from_dict(
    struct_cls: typing.Type[_Struct_co],
    properties: typing.Mapping[str, typing.Any],
    discard_invalid_entries: typing.Optional[bool] = None,
) -> _Struct_co:
    """
    Build a struct instance from a mapping of field names to values.

    :param struct_cls: The struct type to build.
    :param properties: The mapping to build from.
    :param discard_invalid_entries: If True, entries with no corresponding field
        are discarded instead of raising `UndeclaredFieldError`.
    :return: The struct instance.
    """
    return load(struct_cls(), properties, discard_invalid_entries)


def from_attributes(
    struct_cls: typing.Type[_Struct_co],
    obj: typing.Any,
) -> _Struct_co:
    """
    Build a struct instance from the attributes of an object.

    Declared fields the object has no attribute for keep their default.

    :param struct_cls: The struct type to build.
    :param obj: The object to read attributes from.
    :return: The struct instance.
    """
    instance = struct_cls()
    for name, field in struct_cls.__fields__.items():
        value = getattr(obj, name, empty)
        if value is empty:
            continue
        field.__set__(instance, value)
    return instance


def to_dict(instance: Struct) -> typing.OrderedDict[str, typing.Any]:
    """
    Return all declared fields of a struct instance and their values.

    Fields appear in declaration order. Nested structs are not expanded.
    """
    instance_type = type(instance)
    return OrderedDict(
        (name, field.__get__(instance, instance_type))
        for name, field in instance_type.__fields__.items()
    )


__all__ = [
    "Struct",
    "StructMeta",
    "load",
    "from_dict",
    "from_attributes",
    "to_dict",
]
