"""
Flag codec: pure functions between a packed integer and flag names.

A bit field stores flag *i* of its declaration in bit ``2**i``.  Everything in
this module is stateless; the ORM layer supplies a *resolver* (flag name →
bit mask) so the same functions serve row accessors, the column-store hook and
bulk updates.

Symbolic values:
    A write path may receive a flag name or a collection of flag names instead
    of an integer.  At the boundary those are tagged as :class:`SingleFlag` or
    :class:`FlagList`; :func:`normalize` performs that coercion.

Examples:
    >>> raw = set_bit(0, 0b100, True)
    >>> is_set(raw, 0b100)
    True
    >>> decode_all(5, ["active", "inactive", "foo", "bar"])
    ['active', 'foo']
    >>> encode_name_or_list(["active", "foo"], {"active": 1, "foo": 4}.__getitem__)
    5

Tags:
    bitfield, codec, bitmask, bitcolumn
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any, Union

from bitcolumn.core.errors import InvalidFlagValueError

Resolver = Callable[[str], int]


@dataclass(frozen=True)
class SingleFlag:
    """One flag name used in place of an integer."""

    name: str

    @property
    def names(self) -> tuple[str, ...]:
        return (self.name,)


@dataclass(frozen=True)
class FlagList:
    """A collection of flag names used in place of an integer."""

    names: tuple[str, ...]

    def __init__(self, names: Iterable[str]):
        object.__setattr__(self, "names", tuple(names))


Symbolic = Union[SingleFlag, FlagList]


def is_set(raw: int | None, bit_mask: int) -> bool:
    """Return ``True`` when every bit of *bit_mask* is set in *raw*."""
    raw = raw or 0
    return (raw | bit_mask) == raw


def set_bit(raw: int | None, bit_mask: int, desired: bool) -> int:
    """Return *raw* with *bit_mask* set (``desired``) or cleared."""
    raw = raw or 0
    if desired:
        return raw | bit_mask
    return raw - (raw & bit_mask)


def decode_all(raw: int | None, ordered_flags: Sequence[str]) -> list[str]:
    """Return the names of all set flags, in declaration order."""
    if not raw:
        return []
    return [flag for i, flag in enumerate(ordered_flags) if is_set(raw, 1 << i)]


def normalize(value: Any, *, column: str | None = None) -> Symbolic | int | None:
    """Classify a value written to a bit-field column.

    ``None`` and non-negative integers are returned unchanged; strings become
    :class:`SingleFlag`; lists, tuples, sets and frozensets of strings become
    :class:`FlagList`.  Anything else raises :class:`InvalidFlagValueError`.
    """
    if value is None or isinstance(value, (SingleFlag, FlagList)):
        return value
    if isinstance(value, bool):
        raise InvalidFlagValueError(value, column=column)
    if isinstance(value, int):
        if value < 0:
            raise InvalidFlagValueError(value, column=column)
        return value
    if isinstance(value, str):
        return SingleFlag(value)
    if isinstance(value, (list, tuple, set, frozenset)):
        if not all(isinstance(name, str) for name in value):
            raise InvalidFlagValueError(value, column=column)
        # Sets carry no order; sort so the fold order is deterministic.
        names = sorted(value) if isinstance(value, (set, frozenset)) else value
        return FlagList(names)
    raise InvalidFlagValueError(value, column=column)


def flag_names(value: Symbolic | str | Iterable[str]) -> tuple[str, ...]:
    """Return the flag names carried by a symbolic value."""
    if isinstance(value, (SingleFlag, FlagList)):
        return value.names
    if isinstance(value, str):
        return (value,)
    return tuple(value)


def resolve_all(names: Iterable[str], resolver: Resolver) -> list[int]:
    """Resolve every name to its mask before any of them is applied."""
    return [resolver(name) for name in names]


def apply_flags(raw: int | None, value: Symbolic | str | Iterable[str], resolver: Resolver) -> int:
    """Set every named flag on top of *raw* (flags not named are left alone)."""
    result = raw or 0
    for mask in resolve_all(flag_names(value), resolver):
        result = set_bit(result, mask, True)
    return result


def encode_name_or_list(value: Symbolic | str | Iterable[str], resolver: Resolver) -> int:
    """Encode a flag name or list of names into a packed integer."""
    return apply_flags(0, value, resolver)


__all__ = [
    "SingleFlag",
    "FlagList",
    "Symbolic",
    "Resolver",
    "is_set",
    "set_bit",
    "decode_all",
    "normalize",
    "flag_names",
    "resolve_all",
    "apply_flags",
    "encode_name_or_list",
]
