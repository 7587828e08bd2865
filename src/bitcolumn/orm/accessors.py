"""Row accessors for bit-field columns.

Both descriptors read and write through the raw integer attribute of the row,
so the per-flag view and the aggregate view can never disagree.

* ``FlagAccessor``       -- ``row.active`` → ``bool``; ``row.active = False`` clears the bit
* ``AggregateAccessor``  -- ``row.status`` → ``["active", "foo"]``; assignment replaces
  the whole membership of the column

On the class, ``Item.active`` is the SQL expression ``(status & 1) = 1``, usable
in ``select().where()``; ``Item.status`` returns the aggregate descriptor.
"""

from __future__ import annotations

from typing import Any

from bitcolumn.core import codec
from bitcolumn.core.codec import FlagList, SingleFlag
from bitcolumn.orm.columns import AccessorBinding


def flag_expression(raw_attribute: Any, bit_mask: int, desired: bool = True) -> Any:
    """SQL criterion: the bits of *bit_mask* in *raw_attribute* are all set (or all clear)."""
    return raw_attribute.bitwise_and(bit_mask) == (bit_mask if desired else 0)


class FlagAccessor:
    """Boolean view of one bit of a bit-field column."""

    def __init__(self, binding: AccessorBinding) -> None:
        self.binding = binding
        self.__doc__ = f"Flag '{binding.flag}' of bitfield '{binding.owning_column.column_name}'."

    @property
    def name(self) -> str:
        return self.binding.name

    @property
    def bit_mask(self) -> int:
        return self.binding.bit_mask

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            if owner is None:
                return self
            return flag_expression(getattr(owner, self.binding.raw_accessor_name), self.binding.bit_mask)
        raw = getattr(instance, self.binding.raw_accessor_name)
        return codec.is_set(raw, self.binding.bit_mask)

    def __set__(self, instance: Any, value: Any) -> None:
        raw_name = self.binding.raw_accessor_name
        raw = getattr(instance, raw_name)
        setattr(instance, raw_name, codec.set_bit(raw, self.binding.bit_mask, bool(value)))

    def __repr__(self) -> str:
        return f"<FlagAccessor {self.binding.name!r} mask={self.binding.bit_mask}>"


class AggregateAccessor:
    """List-of-names view of a whole bit-field column."""

    def __init__(self, table: Any) -> None:
        # table is a compiler.FlagTable
        self.table = table
        self.__doc__ = f"Set flags of bitfield '{table.column_name}', in declaration order."

    @property
    def name(self) -> str:
        return self.table.column_name

    def __get__(self, instance: Any, owner: type | None = None) -> Any:
        if instance is None:
            return self
        raw = getattr(instance, self.table.raw_accessor_name)
        return codec.decode_all(raw, self.table.flags)

    def __set__(self, instance: Any, value: Any) -> None:
        raw_name = self.table.raw_accessor_name
        normalized = codec.normalize(value, column=self.table.column_name)
        if isinstance(normalized, (SingleFlag, FlagList)):
            normalized = codec.encode_name_or_list(normalized, self.table.resolve)
        setattr(instance, raw_name, normalized)

    def __repr__(self) -> str:
        return f"<AggregateAccessor {self.table.column_name!r} flags={list(self.table.flags)!r}>"


__all__ = ["AggregateAccessor", "FlagAccessor", "flag_expression"]
