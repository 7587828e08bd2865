"""Tests for the construction and column-store write paths."""

from __future__ import annotations

import pytest
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from bitcolumn.core.errors import InvalidFlagValueError, UnknownFlagError
from bitcolumn.orm import BitFieldMixin, bitfield_column
from bitcolumn.orm.interceptor import bitfield_constructor, partition_kwargs

from _support.models import Item, Record


class TestConstruction:
    def test_flag_keys_are_applied(self):
        item = Item(id=1, active=1, foo=1)
        assert item.active == 1
        assert item.foo == 1
        assert item.status == ["active", "foo"]
        assert item._status == 5

    def test_clear_after_construction(self):
        item = Item(id=1, active=1, foo=1)
        item.foo = 0
        assert item.status == ["active"]
        assert item._status == 1

    def test_prefixed_flag_keys(self):
        item = Item(id=1, status_1=1, status_3=1)
        assert item.status_1 is True
        assert item._foobar == 5

    def test_symbolic_column_values(self):
        item = Item(id=1, status=["active", "foo"], advanced_status=["status_1", "status_3"])
        assert item._status == 5
        assert item._foobar == 5

    def test_flags_applied_after_column_value(self):
        item = Item(id=1, status=["active"], bar=True, active=False)
        assert item.status == ["bar"]

    def test_false_flag_keys(self):
        item = Item(id=1, _status=15, inactive=False)
        assert item.status == ["active", "foo", "bar"]

    def test_unknown_symbolic_value_raises(self):
        with pytest.raises(UnknownFlagError):
            Item(id=1, status=["active", "deleted"])

    def test_unknown_keyword_keeps_sqlalchemy_error(self):
        with pytest.raises(TypeError):
            Item(id=1, deleted=True)

    def test_ordinary_columns_pass_through(self):
        item = Item(id=7, name="widget")
        assert item.id == 7
        assert item.name == "widget"

    def test_partition(self):
        ordinary, flags = partition_kwargs(Item, {"id": 1, "status": ["foo"], "bar": 1, "status_2": 0, "x": 3})
        assert ordinary == {"id": 1, "status": ["foo"], "x": 3}
        assert flags == {"bar": 1, "status_2": 0}

    def test_base_constructor_installed(self):
        class Base(BitFieldMixin, DeclarativeBase):
            pass

        assert Base.__init__ is bitfield_constructor

        class Gadget(Base):
            __tablename__ = "gadget"
            id: Mapped[int] = mapped_column(primary_key=True)
            modes = bitfield_column(["on", "loud"])

        assert Gadget(id=1, loud=True).modes == ["loud"]

    def test_explicit_base_init_is_kept(self):
        class Base(BitFieldMixin, DeclarativeBase):
            def __init__(self, **kwargs):
                self.built_by = "custom"
                bitfield_constructor(self, **kwargs)

        class Widget(Base):
            __tablename__ = "widget"
            id: Mapped[int] = mapped_column(primary_key=True)
            modes = bitfield_column(["on", "loud"])

        widget = Widget(id=1, on=True)
        assert widget.built_by == "custom"
        assert widget.modes == ["on"]


class TestColumnStore:
    def test_integer_passes_through(self):
        item = Item(id=1)
        item._status = 6
        assert item.status == ["inactive", "foo"]

    def test_name_is_added_to_current_value(self):
        item = Item(id=1, _status=1)
        item._status = "foo"
        assert item._status == 5

    def test_list_is_added_to_current_value(self):
        item = Item(id=1, _status=1)
        item._status = ["inactive", "bar"]
        assert item.status == ["active", "inactive", "bar"]

    def test_prefixed_names(self):
        record = Record(id=1)
        record._bitfield2_raw = ["status_status2"]
        assert record.bitfield2 == ["status2"]
        assert record.bitfield == []

    def test_unknown_name_leaves_value_untouched(self):
        item = Item(id=1, _status=1)
        with pytest.raises(UnknownFlagError) as exc:
            item._status = ["foo", "deleted"]
        assert exc.value.flag == "deleted"
        assert item._status == 1

    def test_flag_of_other_column_is_unknown(self):
        item = Item(id=1)
        with pytest.raises(UnknownFlagError):
            item._status = "status_1"

    @pytest.mark.parametrize("value", [-3, 1.5, True, object()])
    def test_invalid_values(self, value):
        item = Item(id=1)
        with pytest.raises(InvalidFlagValueError):
            item._status = value

    def test_stored_value_is_encoded_on_flush(self, session):
        item = Item(id=1)
        item._status = ["active", "bar"]
        session.add(item)
        session.commit()
        assert session.get(Item, 1)._status == 9

    def test_symbolic_on_loaded_row(self, engine, session):
        session.add(Item(id=1, _status=2))
        session.commit()
        session.expire_all()

        item = session.get(Item, 1)
        item._status = "foo"
        assert item._status == 6
