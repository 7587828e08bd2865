"""SQLAlchemy 2.0 integration for bit-field columns.

Modules
-------
columns      bitfield_column() + BitFieldColumnSpec / AccessorBinding
compiler     FlagTable, BitFieldRegistry, register()
accessors    FlagAccessor / AggregateAccessor descriptors
interceptor  column-store hook + two-phase constructor
base         BitFieldMixin + BitColumnBase (declarative base)
bulk         bulk_update(), translate_update_values(), search_bitfield()
session      engine factory + BitColumnSession

Tags:
    bitcolumn, orm, sqlalchemy, declarative
"""

from __future__ import annotations

from bitcolumn.orm.accessors import AggregateAccessor, FlagAccessor, flag_expression
from bitcolumn.orm.base import BitColumnBase, BitFieldMixin
from bitcolumn.orm.bulk import (
    bitfield_update,
    bulk_update,
    flag_criteria,
    search_bitfield,
    translate_update_values,
)
from bitcolumn.orm.columns import (
    AccessorBinding,
    BitFieldColumnSpec,
    bitfield_column,
    is_bitfield,
)
from bitcolumn.orm.compiler import BitFieldRegistry, FlagTable, get_registry, register
from bitcolumn.orm.session import (
    BitColumnSession,
    bitcolumn_session_factory,
    create_bitcolumn_engine,
)

__all__ = [
    "AccessorBinding",
    "AggregateAccessor",
    "BitColumnBase",
    "BitColumnSession",
    "BitFieldColumnSpec",
    "BitFieldMixin",
    "BitFieldRegistry",
    "FlagAccessor",
    "FlagTable",
    "bitcolumn_session_factory",
    "bitfield_column",
    "bitfield_update",
    "bulk_update",
    "create_bitcolumn_engine",
    "flag_criteria",
    "flag_expression",
    "get_registry",
    "is_bitfield",
    "register",
    "search_bitfield",
    "translate_update_values",
]
