"""Bit-field column declarations.

A bit-field column is an ordinary integer column whose ``Column.info`` carries
a ``bitfield`` flag list.  :func:`bitfield_column` builds one; on a class that
uses :class:`~bitcolumn.orm.base.BitFieldMixin` the declaration is compiled
into a :class:`BitFieldColumnSpec` and the generated accessors, otherwise it
maps as a plain integer column.

Tags:
    bitcolumn, orm, sqlalchemy, columns, declaration
"""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy import BigInteger, Integer, SmallInteger
from sqlalchemy.orm import MappedColumn, mapped_column
from sqlalchemy.types import TypeEngine

from bitcolumn.core.errors import BitWidthExceededError, InvalidBitFieldSpecError
from bitcolumn.core.settings import get_settings

# Column.info keys
INFO_FLAGS = "bitfield"
INFO_PREFIX = "bitfield_prefix"
INFO_ACCESSOR = "accessor"

_INT_TYPE_RE = re.compile(r"^(tiny|small|medium|big)?int", re.IGNORECASE)

# Usable flag bits per storage type; the sign bit is never used.
_TYPE_WIDTHS: tuple[tuple[type[TypeEngine[Any]], int], ...] = (
    (BigInteger, 63),
    (SmallInteger, 15),
    (Integer, 31),
)
_NAME_WIDTHS = {"tiny": 7, "small": 15, "medium": 23, "big": 63}


def is_integer_type(data_type: Any) -> bool:
    """True for SQLAlchemy integer types (classes or instances) and ``int*`` type names."""
    if isinstance(data_type, str):
        return _INT_TYPE_RE.match(data_type.strip()) is not None
    if isinstance(data_type, type):
        return issubclass(data_type, Integer)
    return isinstance(data_type, Integer)


def is_bitfield(data_type: Any, flags: Any) -> bool:
    """A column is a bit field only if it is integer-typed and declares flags."""
    return is_integer_type(data_type) and isinstance(flags, (list, tuple)) and len(flags) > 0


def bit_width(data_type: Any) -> int:
    """Number of flags the storage type of *data_type* can hold."""
    if isinstance(data_type, str):
        match = _INT_TYPE_RE.match(data_type.strip())
        return _NAME_WIDTHS.get((match.group(1) or "").lower(), 31) if match else 31
    type_cls = data_type if isinstance(data_type, type) else type(data_type)
    for sa_type, width in _TYPE_WIDTHS:
        if issubclass(type_cls, sa_type):
            return width
    return 31


@dataclass(frozen=True)
class BitFieldColumnSpec:
    """Declaration of one bit-field storage column.

    ``flags[i]`` occupies bit ``2**i``.  ``raw_accessor_name`` is the mapped
    attribute holding the packed integer; it defaults to ``"_" + column_name``.
    """

    column_name: str
    flags: tuple[str, ...]
    prefix: str = ""
    raw_accessor_name: str = ""
    nullable: bool = False
    data_type: Any = field(default=Integer, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "flags", tuple(self.flags))
        object.__setattr__(self, "prefix", self.prefix or "")
        if not self.raw_accessor_name:
            object.__setattr__(self, "raw_accessor_name", "_" + self.column_name)

        if not self.flags:
            raise InvalidBitFieldSpecError(
                f"bitfield '{self.column_name}' declares no flags"
            ).with_context(column=self.column_name)
        if not all(isinstance(flag, str) and flag for flag in self.flags):
            raise InvalidBitFieldSpecError(
                f"bitfield '{self.column_name}' flag names must be non-empty strings"
            ).with_context(column=self.column_name)
        if len(set(self.flags)) != len(self.flags):
            dupes = sorted({f for f in self.flags if self.flags.count(f) > 1})
            raise InvalidBitFieldSpecError(
                f"bitfield '{self.column_name}' declares duplicate flags: {', '.join(dupes)}"
            ).with_context(column=self.column_name)
        if self.raw_accessor_name == self.column_name:
            raise InvalidBitFieldSpecError(
                f"bitfield '{self.column_name}' cannot use its own name as raw accessor"
            ).with_context(column=self.column_name)

        limit = self.max_flags
        if len(self.flags) > limit:
            raise BitWidthExceededError(self.column_name, len(self.flags), limit)

    @property
    def max_flags(self) -> int:
        width = bit_width(self.data_type)
        override = get_settings().max_flags
        return min(override, width) if override is not None else width

    def accessor_name(self, flag: str) -> str:
        return self.prefix + flag

    @classmethod
    def from_column_info(
        cls,
        column_name: str,
        info: dict[str, Any],
        *,
        data_type: Any = Integer,
        nullable: bool = False,
    ) -> BitFieldColumnSpec:
        """Build a spec from ``Column.info`` metadata."""
        return cls(
            column_name=column_name,
            flags=tuple(info[INFO_FLAGS]),
            prefix=info.get(INFO_PREFIX) or "",
            raw_accessor_name=info.get(INFO_ACCESSOR) or "",
            nullable=nullable,
            data_type=data_type,
        )


@dataclass(frozen=True)
class AccessorBinding:
    """A compiled per-flag accessor: ``name`` reads/writes ``bit_mask`` of ``owning_column``."""

    name: str
    flag: str
    bit_mask: int
    owning_column: BitFieldColumnSpec = field(repr=False)

    @property
    def raw_accessor_name(self) -> str:
        return self.owning_column.raw_accessor_name


def bitfield_column(
    flags: Sequence[str],
    *,
    prefix: str = "",
    accessor: str | None = None,
    nullable: bool = False,
    type_: Any = Integer,
    **kwargs: Any,
) -> MappedColumn[Any]:
    """Declare a bit-field column.

    Declare it *without* a ``Mapped[...]`` annotation; the attribute name
    becomes the aggregate accessor and the database column name::

        class Item(BitColumnBase):
            __tablename__ = "item"
            id: Mapped[int] = mapped_column(primary_key=True)
            status = bitfield_column(["active", "inactive", "foo", "bar"])

    Parameters
    ----------
    flags:
        Flag names; position defines the bit.
    prefix:
        Prepended to every generated flag accessor name.
    accessor:
        Name of the raw integer attribute (default ``"_" + column name``).
    nullable, type_, **kwargs:
        Forwarded to ``mapped_column``.
    """
    info = dict(kwargs.pop("info", None) or {})
    info[INFO_FLAGS] = list(flags)
    if prefix:
        info[INFO_PREFIX] = prefix
    if accessor:
        info[INFO_ACCESSOR] = accessor
    kwargs.setdefault("default", 0)
    kwargs.setdefault("server_default", "0")
    return mapped_column(type_, nullable=nullable, info=info, **kwargs)


__all__ = [
    "INFO_FLAGS",
    "INFO_PREFIX",
    "INFO_ACCESSOR",
    "AccessorBinding",
    "BitFieldColumnSpec",
    "bit_width",
    "bitfield_column",
    "is_bitfield",
    "is_integer_type",
]
