"""Write-path hooks for bit-field columns.

Two entry points turn symbolic values into packed integers before anything
reaches the session:

* **Column storage** -- a SQLAlchemy attribute ``set`` listener on each raw
  attribute.  ``row._status = ["active", "foo"]`` sets both flags on top of the
  current value and stores the resulting integer.
* **Row construction** -- :func:`bitfield_constructor` splits the keyword
  arguments into ordinary attributes and flag accessors, builds the row from
  the former and then applies the latter: ``Item(id=1, active=True, foo=True)``.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import event, inspect

from bitcolumn.core import codec
from bitcolumn.core.codec import FlagList, SingleFlag
from bitcolumn.orm.compiler import FlagTable, get_registry


def install_store_hook(entity: type, table: FlagTable) -> None:
    """Encode symbolic values assigned to the raw attribute of *table*."""
    attribute = getattr(entity, table.raw_accessor_name)

    def store_column(target: Any, value: Any, oldvalue: Any, initiator: Any) -> Any:
        normalized = codec.normalize(value, column=table.column_name)
        if not isinstance(normalized, (SingleFlag, FlagList)):
            return normalized
        current = oldvalue if isinstance(oldvalue, int) else 0
        return codec.apply_flags(current, normalized, table.resolve)

    event.listen(attribute, "set", store_column, retval=True, active_history=True, propagate=True)


def partition_kwargs(entity: type, kwargs: dict[str, Any]) -> tuple[dict[str, Any], dict[str, Any]]:
    """Split constructor arguments into ``(ordinary, flags)``.

    A key is a flag key when it is neither a mapped attribute nor a bit-field
    column but names an installed flag accessor.
    """
    registry = get_registry(entity)
    if registry is None:
        return dict(kwargs), {}

    mapper = inspect(entity)
    ordinary: dict[str, Any] = {}
    flags: dict[str, Any] = {}
    for key, value in kwargs.items():
        if mapper.has_property(key) or registry.is_column(key):
            ordinary[key] = value
        elif registry.binding(key) is not None:
            flags[key] = value
        else:
            ordinary[key] = value
    return ordinary, flags


def bitfield_constructor(self: Any, **kwargs: Any) -> None:
    """Declarative constructor that also accepts flag accessor names as keywords."""
    cls = type(self)
    ordinary, flags = partition_kwargs(cls, kwargs)
    cls.registry.constructor(self, **ordinary)
    for key, value in flags.items():
        setattr(self, key, value)


bitfield_constructor.__name__ = "__init__"


__all__ = ["bitfield_constructor", "install_store_hook", "partition_kwargs"]
