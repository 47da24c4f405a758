import collections.abc
import copy
import functools
import typing


def is_mapping(obj: typing.Any) -> typing.TypeGuard[collections.abc.Mapping]:
    """Check if an object is a mapping (like dict)."""
    return isinstance(obj, collections.abc.Mapping)


def is_sequence(obj: typing.Any) -> typing.TypeGuard[typing.Union[list, tuple]]:
    """Check if an object is an ordered sequence (list or tuple)."""
    return isinstance(obj, (list, tuple))


MutableMappingT = typing.TypeVar(
    "MutableMappingT", bound=collections.abc.MutableMapping[typing.Any, typing.Any]
)


def merge_mappings(
    *mappings: MutableMappingT,
    merge_nested: bool = True,
    copier: typing.Optional[
        typing.Callable[[MutableMappingT], MutableMappingT]
    ] = copy.copy,
) -> MutableMappingT:
    """
    Merges two or more mappings into a single mapping.
    Starting from the right to left, each mapping is merged into the penultimate mapping.

    For example, merging `{"a": 1, "b": 2}`, `{"b": 3, "c": 4}`, `{"c": 5, "d": 6}`
    would result in `{"a": 1, "b": 3, "c": 5, "d": 6}`.

    :param mappings: The mappings to merge.
    :param merge_nested: Whether to merge nested mappings. If set to `False`, nested mappings
        will be overridden by the source mapping. Defaults to `True`.
    :param copier: The function to use for copying mappings. Defaults to `copy.copy`.
        Set to `None` to avoid copying.
    :return: A new mapping containing all the keys and values from the provided mappings.
    """
    if not mappings:
        raise ValueError("At least one mapping must be provided")

    if not all(isinstance(mapping, collections.abc.Mapping) for mapping in mappings):
        raise TypeError("All arguments must be mappings")

    copier = copier or (lambda x: x)
    if len(mappings) == 1:
        return copier(mappings[0])

    target = copier(mappings[-2])
    source = mappings[-1]
    for key, source_value in source.items():
        if merge_nested is False or key not in target:
            target[key] = source_value
            continue

        if isinstance(target[key], collections.abc.Mapping) and isinstance(
            source_value, collections.abc.Mapping
        ):
            target[key] = _merge_nested(target[key], source_value)  # type: ignore
        else:
            target[key] = source_value

    return merge_mappings(
        *mappings[:-2],
        target,
        merge_nested=merge_nested,
        copier=copier,
    )


_merge_nested = functools.partial(merge_mappings, copier=dict)


def type_name(obj_or_type: typing.Any) -> str:
    """
    Return the qualified name of a type, or of an object's type.

    The module is left out, so names stay short in error messages and
    validation reports. A type defined inside a function keeps the
    `<locals>` marker of its `__qualname__`, e.g. `build.<locals>.Local`.
    """
    tp = obj_or_type if isinstance(obj_or_type, type) else type(obj_or_type)
    return tp.__qualname__
