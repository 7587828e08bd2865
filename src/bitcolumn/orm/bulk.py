"""Set-based operations on bit-field columns.

* ``translate_update_values`` -- rewrite symbolic bit-field values in an
  ``UPDATE`` value map into packed integers
* ``bitfield_update`` / ``bulk_update`` -- a single ORM-enabled ``UPDATE``
  statement for every matching row
* ``flag_criteria`` / ``search_bitfield`` -- filter rows on flag state

Examples:
    >>> bulk_update(session, Item, {"status": ["active"]}, Item.id > 10)
    >>> session.scalars(search_bitfield(Item, active=True, foo=False)).all()
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from sqlalchemy import Column, ColumnElement, Select, Update, select, update
from sqlalchemy.orm import QueryableAttribute, Session

from bitcolumn.core import codec
from bitcolumn.core.codec import FlagList, SingleFlag
from bitcolumn.core.errors import InvalidBitFieldSpecError, UnknownFlagError
from bitcolumn.core.logging import get_logger
from bitcolumn.orm.accessors import AggregateAccessor, flag_expression
from bitcolumn.orm.compiler import BitFieldRegistry, FlagTable, get_registry

logger = get_logger(__name__)


def _require_registry(entity: type) -> BitFieldRegistry:
    registry = get_registry(entity)
    if registry is None:
        raise InvalidBitFieldSpecError(
            f"{entity.__name__} declares no bitfield columns"
        ).with_context(entity=entity.__name__)
    return registry


def _table_for_key(registry: BitFieldRegistry, key: Any) -> FlagTable | None:
    if isinstance(key, AggregateAccessor):
        return key.table
    if isinstance(key, str):
        return registry.table(key)
    if isinstance(key, QueryableAttribute):
        return registry.table(key.key)
    if isinstance(key, Column):
        for table in registry:
            if getattr(registry.entity, table.raw_accessor_name).property.columns[0] is key:
                return table
    return None


def translate_update_values(entity: type, values: Mapping[Any, Any]) -> dict[Any, Any]:
    """Replace bit-field entries of *values* by their packed integer.

    Keys may be the column name, the raw attribute name, the aggregate
    accessor or the raw attribute itself.  Bit-field entries are re-keyed on
    the raw mapped attribute; every other entry is passed through unchanged.
    """
    registry = _require_registry(entity)
    translated: dict[Any, Any] = {}
    for key, value in values.items():
        table = _table_for_key(registry, key)
        if table is None:
            translated[key] = value
            continue
        normalized = codec.normalize(value, column=table.column_name)
        if isinstance(normalized, (SingleFlag, FlagList)):
            normalized = codec.encode_name_or_list(normalized, table.resolve)
        translated[getattr(entity, table.raw_accessor_name)] = normalized
    return translated


def bitfield_update(entity: type, values: Mapping[Any, Any]) -> Update:
    """ORM-enabled ``UPDATE`` of *entity* with bit-field values translated."""
    return update(entity).values(translate_update_values(entity, values))


def bulk_update(
    session: Session,
    entity: type,
    values: Mapping[Any, Any],
    *criteria: Any,
    synchronize_session: str | bool = "auto",
) -> int:
    """Apply *values* to every row matching *criteria* in one statement.

    Returns the number of matched rows.
    """
    stmt = bitfield_update(entity, values)
    if criteria:
        stmt = stmt.where(*criteria)
    result = session.execute(stmt, execution_options={"synchronize_session": synchronize_session})
    logger.debug("bitfield_bulk_update", entity=entity.__name__, rowcount=result.rowcount)
    return result.rowcount


def flag_criteria(entity: type, **flags: Any) -> list[ColumnElement[bool]]:
    """SQL criteria selecting rows whose named flags have the given state.

    Flag names are accessor names (prefix included).
    """
    registry = _require_registry(entity)
    criteria: list[ColumnElement[bool]] = []
    for name, desired in flags.items():
        binding = registry.binding(name)
        if binding is None:
            raise UnknownFlagError(name).with_context(entity=entity.__name__)
        raw = getattr(entity, binding.raw_accessor_name)
        criteria.append(flag_expression(raw, binding.bit_mask, bool(desired)))
    return criteria


def search_bitfield(entity: type, **flags: Any) -> Select[Any]:
    """``SELECT`` of *entity* rows matching every given flag state."""
    return select(entity).where(*flag_criteria(entity, **flags))


__all__ = [
    "bitfield_update",
    "bulk_update",
    "flag_criteria",
    "search_bitfield",
    "translate_update_values",
]
