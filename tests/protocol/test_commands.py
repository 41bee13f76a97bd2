"""Tests for BF.* argument list builders."""

import pytest

from redbloom_mcp.exceptions import EmptyBatchError, InvalidArgumentError
from redbloom_mcp.protocol.commands import (
    InsertOptions,
    build_add,
    build_exists,
    build_info,
    build_insert,
    build_madd,
    build_mexists,
    build_reserve,
)


class TestBuildReserve:
    """Test BF.RESERVE assembly."""

    def test_default_expansion(self):
        """Default expansion rate of 2 is sent explicitly."""
        assert build_reserve("bf", 0.01, 1000) == ["BF.RESERVE", "bf", 0.01, 1000, "EXPANSION", 2]

    @pytest.mark.parametrize("expansion_rate", [0, -1, -100])
    def test_zero_or_negative_expansion_is_nonscaling(self, expansion_rate):
        """Zero and negative expansion rates both produce NONSCALING."""
        assert build_reserve("bf", 0.001, 50, expansion_rate) == ["BF.RESERVE", "bf", 0.001, 50, "NONSCALING"]

    @pytest.mark.parametrize("expansion_rate", [1, 2, 4, 7])
    def test_positive_expansion_is_passed_exactly(self, expansion_rate):
        """Positive expansion rates are sent with the EXPANSION keyword."""
        cmd = build_reserve("bf", 0.5, 10, expansion_rate)
        assert cmd[-2:] == ["EXPANSION", expansion_rate]
        assert "NONSCALING" not in cmd

    @pytest.mark.parametrize("error_rate", [0, 1, -0.1, 1.5, "0.01", None, True])
    def test_rejects_bad_error_rate(self, error_rate):
        """Error rate must be a probability strictly inside (0, 1)."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            build_reserve("bf", error_rate, 100)
        assert exc_info.value.submitted is False
        assert exc_info.value.command == "BF.RESERVE"

    @pytest.mark.parametrize("capacity", [0, -5, 1.5, "100", None, True])
    def test_rejects_bad_capacity(self, capacity):
        """Capacity must be a positive integer."""
        with pytest.raises(InvalidArgumentError):
            build_reserve("bf", 0.01, capacity)

    def test_rejects_blank_name(self):
        """An empty filter name is refused locally."""
        with pytest.raises(InvalidArgumentError):
            build_reserve("  ", 0.01, 100)


class TestBuildSingleItem:
    """Test BF.ADD / BF.EXISTS / BF.INFO assembly."""

    def test_add(self):
        assert build_add("bf", "item") == ["BF.ADD", "bf", "item"]

    def test_add_keeps_numbers_numeric(self):
        """Numbers reach the transport unstringified."""
        cmd = build_add("bf", 42)
        assert cmd == ["BF.ADD", "bf", 42]
        assert isinstance(cmd[2], int)

    def test_exists(self):
        assert build_exists("bf", 3.5) == ["BF.EXISTS", "bf", 3.5]

    def test_info(self):
        assert build_info("bf") == ["BF.INFO", "bf"]

    def test_add_rejects_unsupported_item(self):
        with pytest.raises(InvalidArgumentError):
            build_add("bf", ["nested"])


class TestBuildBatch:
    """Test BF.MADD / BF.MEXISTS assembly."""

    def test_madd_preserves_order_and_duplicates(self):
        """Every item is sent in call order, repeats included."""
        assert build_madd("bf", ["a", 1, "a", b"raw"]) == ["BF.MADD", "bf", "a", 1, "a", b"raw"]

    def test_mexists(self):
        assert build_mexists("bf", ("x", "y")) == ["BF.MEXISTS", "bf", "x", "y"]

    @pytest.mark.parametrize("builder", [build_madd, build_mexists])
    def test_empty_batch_rejected(self, builder):
        """Empty batches fail before submission."""
        with pytest.raises(EmptyBatchError) as exc_info:
            builder("bf", [])
        assert exc_info.value.submitted is False

    def test_bad_item_in_batch_rejected(self):
        with pytest.raises(InvalidArgumentError):
            build_madd("bf", ["ok", None])

    @pytest.mark.parametrize("builder", [build_madd, build_mexists])
    @pytest.mark.parametrize("items", ["ab", b"ab", bytearray(b"ab")])
    def test_text_is_not_a_batch(self, builder, items):
        """A bare str or bytes is never split into one member per character."""
        with pytest.raises(InvalidArgumentError) as exc_info:
            builder("bf", items)
        assert not isinstance(exc_info.value, EmptyBatchError)
        assert exc_info.value.submitted is False

    def test_generator_accepted(self):
        assert build_madd("bf", (item for item in ["a", "b"])) == ["BF.MADD", "bf", "a", "b"]

    def test_non_iterable_is_not_reported_as_empty(self):
        with pytest.raises(InvalidArgumentError) as exc_info:
            build_mexists("bf", 5)
        assert not isinstance(exc_info.value, EmptyBatchError)
        assert "int" in exc_info.value.message


class TestBuildInsert:
    """Test BF.INSERT clause ordering and precedence."""

    def test_all_options(self):
        """Every clause appears in fixed order."""
        options = InsertOptions(error_rate=0.01, capacity=100, expansion_rate=-1, upsert=False)
        assert build_insert("bf", ["a", "b"], options) == [
            "BF.INSERT", "bf",
            "ERROR", 0.01,
            "CAPACITY", 100,
            "NONSCALING",
            "NOCREATE",
            "ITEMS", "a", "b",
        ]

    def test_no_options(self):
        """Without options only ITEMS is emitted."""
        assert build_insert("bf", [1, 2, 3]) == ["BF.INSERT", "bf", "ITEMS", 1, 2, 3]

    def test_default_options_match_no_options(self):
        assert build_insert("bf", ["a"], InsertOptions()) == build_insert("bf", ["a"])

    def test_positive_expansion(self):
        options = InsertOptions(capacity=500, expansion_rate=4)
        assert build_insert("bf", ["a"], options) == [
            "BF.INSERT", "bf", "CAPACITY", 500, "EXPANSION", 4, "ITEMS", "a",
        ]

    def test_nocreate_alone(self):
        assert build_insert("bf", ["a"], InsertOptions(upsert=False)) == [
            "BF.INSERT", "bf", "NOCREATE", "ITEMS", "a",
        ]

    def test_zero_error_rate_and_capacity_are_skipped(self):
        """Falsy creation values emit no clause rather than being validated."""
        options = InsertOptions(error_rate=0, capacity=0)
        assert build_insert("bf", ["a"], options) == ["BF.INSERT", "bf", "ITEMS", "a"]

    def test_zero_expansion_rate_inconsistent_with_reserve(self):
        """Known inconsistency: zero expansion means NONSCALING for BF.RESERVE
        but emits no scaling clause at all for BF.INSERT, so the filter is
        created scaling. Pinned so any harmonisation is a deliberate change.
        """
        insert_cmd = build_insert("bf", ["a"], InsertOptions(expansion_rate=0))
        reserve_cmd = build_reserve("bf", 0.01, 100, expansion_rate=0)

        assert insert_cmd == ["BF.INSERT", "bf", "ITEMS", "a"]
        assert "NONSCALING" not in insert_cmd
        assert "NONSCALING" in reserve_cmd

    def test_set_error_rate_is_validated(self):
        with pytest.raises(InvalidArgumentError):
            build_insert("bf", ["a"], InsertOptions(error_rate=2.0))

    def test_set_capacity_is_validated(self):
        with pytest.raises(InvalidArgumentError):
            build_insert("bf", ["a"], InsertOptions(capacity=-3))

    def test_empty_items_rejected(self):
        with pytest.raises(EmptyBatchError):
            build_insert("bf", [], InsertOptions(capacity=10))

    def test_items_keyword_never_omitted(self):
        cmd = build_insert("bf", ["ITEMS"])
        assert cmd == ["BF.INSERT", "bf", "ITEMS", "ITEMS"]

    def test_generator_items(self):
        cmd = build_insert("bf", (item for item in ("a", 1)), InsertOptions(upsert=False))
        assert cmd == ["BF.INSERT", "bf", "NOCREATE", "ITEMS", "a", 1]

    @pytest.mark.parametrize("items", ["abc", b"abc", None])
    def test_items_container_rejected(self, items):
        with pytest.raises(InvalidArgumentError) as exc_info:
            build_insert("bf", items)
        assert not isinstance(exc_info.value, EmptyBatchError)
        assert exc_info.value.command == "BF.INSERT"
