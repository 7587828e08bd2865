"""Declarative base and mixin that compile bit-field columns.

``BitFieldMixin`` hooks class creation of every mapped subclass:

1. *before* SQLAlchemy maps the class, each recognised bit-field declaration
   ``status = bitfield_column([...])`` is moved to its raw attribute
   (``_status``), keeping ``status`` as the database column name;
2. *after* mapping, :func:`~bitcolumn.orm.compiler.register` installs the flag
   accessors, the aggregate accessor and the column-store hook.

On the declarative base itself the mixin installs
:func:`~bitcolumn.orm.interceptor.bitfield_constructor` as ``__init__``.
"""

from __future__ import annotations

import inspect
from typing import Any

from sqlalchemy.orm import DeclarativeBase, MappedColumn

from bitcolumn.core.errors import InvalidBitFieldSpecError
from bitcolumn.orm.columns import INFO_FLAGS, BitFieldColumnSpec, is_bitfield
from bitcolumn.orm.compiler import compile_column, register, reserve
from bitcolumn.orm.interceptor import bitfield_constructor


def collect_bitfields(cls: type) -> list[BitFieldColumnSpec]:
    """Move bit-field declarations of *cls* to their raw attribute names.

    Must run before the class is mapped.
    """
    annotations = inspect.get_annotations(cls)
    specs: list[BitFieldColumnSpec] = []
    for name, value in list(vars(cls).items()):
        if not isinstance(value, MappedColumn):
            continue
        column = value.column
        if not is_bitfield(column.type, column.info.get(INFO_FLAGS)):
            continue
        if name in annotations:
            raise InvalidBitFieldSpecError(
                f"bitfield '{name}' must be declared without a Mapped[] annotation"
            ).with_context(entity=cls.__name__, column=name)

        spec = compile_column(cls, name, column)
        if spec.raw_accessor_name in vars(cls):
            raise InvalidBitFieldSpecError(
                f"bitfield '{name}' raw accessor '{spec.raw_accessor_name}' is already defined"
            ).with_context(entity=cls.__name__, column=name)

        db_name = column.name or name
        column.name = db_name
        column.key = db_name
        delattr(cls, name)
        setattr(cls, spec.raw_accessor_name, value)
        specs.append(spec)
    return specs


class BitFieldMixin:
    """Compile ``bitfield_column`` declarations of mapped subclasses.

    Place it before the declarative base::

        class Base(BitFieldMixin, DeclarativeBase):
            pass
    """

    def __init_subclass__(cls, **kw: Any) -> None:
        if DeclarativeBase in cls.__bases__:
            has_init = "__init__" in cls.__dict__
            super().__init_subclass__(**kw)
            if not has_init:
                cls.__init__ = bitfield_constructor  # type: ignore[method-assign]
            return

        specs = collect_bitfields(cls) if not cls.__dict__.get("__abstract__") else []
        super().__init_subclass__(**kw)
        if specs:
            reserve(cls, [spec.column_name for spec in specs])
        for spec in specs:
            register(cls, spec)


class BitColumnBase(BitFieldMixin, DeclarativeBase):
    """Shared declarative base for models with bit-field columns."""


__all__ = ["BitColumnBase", "BitFieldMixin", "collect_bitfields"]
