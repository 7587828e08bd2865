"""Tests for bitcolumn.core.codec."""

import pytest

from bitcolumn.core.codec import (
    FlagList,
    SingleFlag,
    apply_flags,
    decode_all,
    encode_name_or_list,
    flag_names,
    is_set,
    normalize,
    set_bit,
)
from bitcolumn.core.errors import InvalidFlagValueError, UnknownFlagError

FLAGS = ["active", "inactive", "foo", "bar"]
MASKS = {flag: 1 << i for i, flag in enumerate(FLAGS)}


def resolve(name):
    try:
        return MASKS[name]
    except KeyError:
        raise UnknownFlagError(name, column="status") from None


class TestIsSet:
    def test_none_is_zero(self):
        assert is_set(None, 1) is False

    def test_set_bit_detected(self):
        assert is_set(5, 4) is True

    def test_unset_bit(self):
        assert is_set(5, 2) is False


class TestSetBit:
    @pytest.mark.parametrize("raw", [0, 1, 5, 15, 1 << 40])
    @pytest.mark.parametrize("position", [0, 2, 30])
    def test_set_then_clear(self, raw, position):
        mask = 1 << position
        assert is_set(set_bit(raw, mask, True), mask) is True
        assert is_set(set_bit(raw, mask, False), mask) is False

    def test_set_is_idempotent(self):
        assert set_bit(set_bit(4, 1, True), 1, True) == 5

    def test_clear_unset_bit_does_not_go_negative(self):
        assert set_bit(4, 1, False) == 4

    def test_none_defaults_to_zero(self):
        assert set_bit(None, 8, True) == 8
        assert set_bit(None, 8, False) == 0

    def test_other_bits_untouched(self):
        assert set_bit(0b1111, 0b0100, False) == 0b1011


class TestDecodeAll:
    def test_zero_and_none_are_empty(self):
        assert decode_all(0, FLAGS) == []
        assert decode_all(None, FLAGS) == []

    def test_declaration_order(self):
        assert decode_all(5, FLAGS) == ["active", "foo"]

    def test_undeclared_high_bits_ignored(self):
        assert decode_all(1 | 64, FLAGS) == ["active"]


class TestEncode:
    def test_single_name(self):
        assert encode_name_or_list("foo", resolve) == 4

    def test_list(self):
        assert encode_name_or_list(["active", "foo"], resolve) == 5

    def test_duplicates_collapse(self):
        assert encode_name_or_list(["foo", "foo", "active"], resolve) == 5

    def test_unknown_name_raises(self):
        with pytest.raises(UnknownFlagError) as exc:
            encode_name_or_list(["active", "deleted"], resolve)
        assert exc.value.flag == "deleted"

    @pytest.mark.parametrize(
        "names, expected",
        [
            ([], []),
            (["foo"], ["foo"]),
            (["bar", "active", "bar"], ["active", "bar"]),
            (["inactive", "inactive"], ["inactive"]),
            (["foo", "active"], ["active", "foo"]),
            (["bar", "foo", "inactive", "active"], FLAGS),
        ],
    )
    def test_round_trip_normalizes_order(self, names, expected):
        assert decode_all(encode_name_or_list(names, resolve), FLAGS) == expected

    def test_empty_list_is_zero(self):
        assert encode_name_or_list([], resolve) == 0


class TestApplyFlags:
    def test_apply_is_additive(self):
        assert apply_flags(1, ["foo"], resolve) == 5

    def test_apply_resolves_before_mutating(self):
        with pytest.raises(UnknownFlagError):
            apply_flags(1, ["foo", "nope"], resolve)


class TestNormalize:
    def test_integers_pass_through(self):
        assert normalize(7) == 7
        assert normalize(0) == 0

    def test_none_passes_through(self):
        assert normalize(None) is None

    def test_string_is_single_flag(self):
        assert normalize("foo") == SingleFlag("foo")

    def test_list_is_flag_list(self):
        assert normalize(["foo", "active"]) == FlagList(["foo", "active"])

    def test_set_is_sorted(self):
        assert normalize({"foo", "active"}).names == ("active", "foo")

    def test_digit_string_is_symbolic(self):
        assert normalize("3") == SingleFlag("3")

    @pytest.mark.parametrize("value", [-1, True, 1.5, {"foo": 1}, ["foo", 2]])
    def test_rejects_other_values(self, value):
        with pytest.raises(InvalidFlagValueError):
            normalize(value, column="status")

    def test_flag_names(self):
        assert flag_names(SingleFlag("foo")) == ("foo",)
        assert flag_names("foo") == ("foo",)
        assert flag_names(["a", "b"]) == ("a", "b")
