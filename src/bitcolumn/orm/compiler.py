"""Flag table compiler.

Turns a :class:`~bitcolumn.orm.columns.BitFieldColumnSpec` into the
accessors installed on a mapped class, and keeps the per-class registry that
every write path consults.

Manifesto:
    Accessor names are checked against an explicit registry of names already
    bound on the class, never by probing arbitrary attributes at runtime.  A
    clash costs that one flag its accessor (with a warning), never the
    declaration.

This module provides:

* ``FlagTable``          -- compiled name → bit mask table for one column
* ``BitFieldRegistry``   -- all bit-field columns and flag accessors of a class
* ``get_registry``       -- the registry of a class (or ``None``)
* ``reserve``            -- claim the bit-field column names of a class
* ``register``           -- compile one column and install its accessors

Tags:
    bitcolumn, orm, compiler, registry, accessors
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable, Iterator
from typing import Any

from sqlalchemy import inspect

from bitcolumn.core.errors import (
    AccessorCollisionWarning,
    InvalidBitFieldSpecError,
    UnknownFlagError,
)
from bitcolumn.core.logging import get_logger
from bitcolumn.core.settings import get_settings
from bitcolumn.orm.columns import AccessorBinding, BitFieldColumnSpec

logger = get_logger(__name__)

REGISTRY_ATTR = "__bitfield_registry__"


class FlagTable:
    """Compiled flag table of one bit-field column."""

    def __init__(self, spec: BitFieldColumnSpec) -> None:
        self.spec = spec
        self.masks: dict[str, int] = {flag: 1 << i for i, flag in enumerate(spec.flags)}
        self.bindings: list[AccessorBinding] = []

    @property
    def column_name(self) -> str:
        return self.spec.column_name

    @property
    def flags(self) -> tuple[str, ...]:
        return self.spec.flags

    @property
    def raw_accessor_name(self) -> str:
        return self.spec.raw_accessor_name

    def resolve(self, name: str) -> int:
        """Bit mask for *name*, given as accessor name (with prefix) or bare flag name."""
        prefix = self.spec.prefix
        if isinstance(name, str):
            if prefix and name.startswith(prefix) and name[len(prefix):] in self.masks:
                return self.masks[name[len(prefix):]]
            if name in self.masks:
                return self.masks[name]
        raise UnknownFlagError(name, column=self.column_name)

    def __repr__(self) -> str:
        return f"FlagTable({self.column_name!r}, flags={list(self.flags)!r})"


class BitFieldRegistry:
    """Bit-field columns and flag accessors bound on one mapped class."""

    def __init__(self, entity: type, parent: BitFieldRegistry | None = None) -> None:
        self.entity = entity
        self.tables: dict[str, FlagTable] = dict(parent.tables) if parent else {}
        self.accessors: dict[str, AccessorBinding] = dict(parent.accessors) if parent else {}
        self.reserved: set[str] = set(parent.reserved) if parent else set()

    def __iter__(self) -> Iterator[FlagTable]:
        return iter(self.tables.values())

    def __len__(self) -> int:
        return len(self.tables)

    def table(self, name: str) -> FlagTable | None:
        """Flag table by aggregate column name or raw accessor name."""
        if name in self.tables:
            return self.tables[name]
        for table in self.tables.values():
            if table.raw_accessor_name == name:
                return table
        return None

    def binding(self, name: str) -> AccessorBinding | None:
        """The flag accessor installed under *name*, if any."""
        return self.accessors.get(name)

    def is_column(self, name: str) -> bool:
        return self.table(name) is not None

    def is_taken(self, name: str) -> bool:
        """True if *name* is already an attribute of the class, a bound accessor or a reserved column."""
        if name in self.accessors or name in self.reserved or self.is_column(name):
            return True
        return any(name in vars(klass) for klass in self.entity.__mro__ if klass is not object)


def get_registry(entity: type) -> BitFieldRegistry | None:
    """Return the registry governing *entity*, inherited from a base class if needed."""
    return getattr(entity, REGISTRY_ATTR, None)


def _own_registry(entity: type) -> BitFieldRegistry:
    registry = entity.__dict__.get(REGISTRY_ATTR)
    if registry is None:
        registry = BitFieldRegistry(entity, parent=get_registry(entity))
        setattr(entity, REGISTRY_ATTR, registry)
    return registry


def reserve(entity: type, column_names: Iterable[str]) -> None:
    """Claim the aggregate names of *entity* before any of its flags is bound."""
    _own_registry(entity).reserved.update(column_names)


def register(entity: type, spec: BitFieldColumnSpec) -> list[AccessorBinding]:
    """Compile *spec* and install its accessors on the mapped class *entity*.

    Returns the flag bindings that were created.  Flags whose accessor name is
    already taken are skipped with an :class:`AccessorCollisionWarning`.
    Registering the same spec twice is a no-op returning the same bindings.
    """
    from bitcolumn.orm.accessors import AggregateAccessor, FlagAccessor
    from bitcolumn.orm.interceptor import install_store_hook

    registry = _own_registry(entity)

    existing = registry.tables.get(spec.column_name)
    if existing is not None:
        if existing.spec == spec:
            return list(existing.bindings)
        raise InvalidBitFieldSpecError(
            f"bitfield '{spec.column_name}' is already registered with a different declaration"
        ).with_context(entity=entity.__name__, column=spec.column_name)

    if not inspect(entity).has_property(spec.raw_accessor_name):
        raise InvalidBitFieldSpecError(
            f"bitfield '{spec.column_name}' has no mapped raw attribute '{spec.raw_accessor_name}'"
        ).with_context(entity=entity.__name__, column=spec.column_name)

    registry.reserved.add(spec.column_name)
    table = FlagTable(spec)
    settings = get_settings()

    for flag, mask in table.masks.items():
        name = spec.accessor_name(flag)
        if registry.is_taken(name):
            message = f"accessor '{name}' cannot be created, already exists"
            logger.warning(
                "bitfield_accessor_collision",
                entity=entity.__name__,
                column=spec.column_name,
                accessor=name,
            )
            if settings.warn_on_collision:
                warnings.warn(message, AccessorCollisionWarning, stacklevel=2)
            continue
        binding = AccessorBinding(name=name, flag=flag, bit_mask=mask, owning_column=spec)
        setattr(entity, name, FlagAccessor(binding))
        registry.accessors[name] = binding
        table.bindings.append(binding)

    registry.tables[spec.column_name] = table
    setattr(entity, spec.column_name, AggregateAccessor(table))
    install_store_hook(entity, table)

    logger.debug(
        "bitfield_registered",
        entity=entity.__name__,
        column=spec.column_name,
        flags=len(spec.flags),
        accessors=[b.name for b in table.bindings],
    )
    return list(table.bindings)


def compile_column(entity: type, attr_name: str, column: Any) -> BitFieldColumnSpec:
    """Build the spec of a recognised bit-field ``Column`` declared as *attr_name*."""
    return BitFieldColumnSpec.from_column_info(
        attr_name,
        column.info,
        data_type=column.type,
        nullable=bool(column.nullable),
    )


__all__ = [
    "BitFieldRegistry",
    "FlagTable",
    "REGISTRY_ATTR",
    "compile_column",
    "get_registry",
    "register",
    "reserve",
]
