"""
Tests for the consumption aggregator and export reader.
"""

import io

import pytest

from horizon.config.settings import ColumnLayout, layout_from_env
from horizon.exceptions import InvalidInputError
from horizon.inventory import (
    SAMPLE_INVENTORY,
    InventoryItem,
    aggregate,
    load_inventory,
    parse_number,
    read_rows,
    service_keywords,
    split_sku,
    top_items,
    total_amount,
)
from tests.conftest import export_row

HEADER = ["Subscription Plan Number", "Date", "SKU", "Unit", "Quantity", "", "", "", "Amount"]


class TestAggregate:
    """Tests for aggregate()."""

    def test_sums_rows_with_same_sku(self):
        rows = [
            ["", "", "B91214 - Compute - E4", "OCPU/Hour", "100", "", "", "", "50.00"],
            ["", "", "B91214 - Compute - E4", "OCPU/Hour", "150", "", "", "", "75.00"],
        ]
        items = aggregate(rows)

        assert items == [
            InventoryItem(
                id="B91214",
                description="Compute - E4",
                unit="OCPU/Hour",
                quantity=250.0,
                amount=125.0,
            )
        ]

    def test_unparsable_numbers_count_as_zero(self):
        items = aggregate([["", "", "X - Y", "U", "abc", "", "", "", "not-a-number"]])

        assert len(items) == 1
        assert items[0].id == "X"
        assert items[0].description == "Y"
        assert items[0].unit == "U"
        assert items[0].quantity == 0
        assert items[0].amount == 0

    def test_unparsable_row_still_adds_other_rows(self):
        rows = [
            export_row("X - Y", quantity="abc", amount="5"),
            export_row("X - Y", quantity="3", amount="bad"),
        ]
        item = aggregate(rows)[0]
        assert item.quantity == 3
        assert item.amount == 5

    def test_sorted_by_amount_descending(self):
        rows = [
            export_row("A - Small", amount="10"),
            export_row("B - Large", amount="300"),
            export_row("C - Medium", amount="50"),
            export_row("A - Small", amount="5"),
        ]
        items = aggregate(rows)

        assert [i.id for i in items] == ["B", "C", "A"]
        amounts = [i.amount for i in items]
        assert amounts == sorted(amounts, reverse=True)

    def test_one_item_per_distinct_sku(self):
        rows = [export_row(f"SKU{n % 3} - Service {n % 3}", amount=str(n)) for n in range(12)]
        items = aggregate(rows)

        assert sorted(i.id for i in items) == ["SKU0", "SKU1", "SKU2"]
        assert sum(i.amount for i in items) == sum(range(12))

    def test_first_row_fixes_description_and_unit(self):
        rows = [
            export_row("B1 - First Name", unit="GB/Month", amount="1"),
            export_row("B1 - Second Name", unit="TB/Month", amount="1"),
        ]
        item = aggregate(rows)[0]
        assert item.description == "First Name"
        assert item.unit == "GB/Month"
        assert item.amount == 2

    def test_unit_stored_verbatim(self):
        item = aggregate([export_row("B1 - Thing", unit="  GB/Month ")])[0]
        assert item.unit == "  GB/Month "

    def test_short_rows_are_skipped(self):
        rows = [
            ["", "", "B1 - Short", "U", "1", "", "", ""],
            export_row("B2 - Full", amount="7"),
        ]
        items = aggregate(rows)
        assert [i.id for i in items] == ["B2"]
        assert items[0].amount == 7

    def test_empty_rows_and_blank_descriptions_are_skipped(self):
        rows = [
            [],
            None,
            export_row("   "),
            export_row(""),
            export_row("B3 - Kept"),
        ]
        assert [i.id for i in aggregate(rows)] == ["B3"]

    def test_description_without_separator(self):
        item = aggregate([export_row("  Marketplace Credits  ")])[0]
        assert item.id == "Marketplace Credits"
        assert item.description == "Marketplace Credits"

    def test_splits_on_first_separator_only(self):
        item = aggregate([export_row("B91214 - Compute - Standard - E4")])[0]
        assert item.id == "B91214"
        assert item.description == "Compute - Standard - E4"

    def test_header_row_is_dropped(self):
        rows = [HEADER, export_row("B1 - Thing", amount="3")]
        items = aggregate(rows)
        assert [i.id for i in items] == ["B1"]

    def test_header_sentinel_only_checked_on_first_row(self):
        later = ["Subscription Plan Number", "", "B9 - Later", "U", "1", "", "", "", "2"]
        rows = [export_row("B1 - Thing"), later]
        assert sorted(i.id for i in aggregate(rows)) == ["B1", "B9"]

    def test_first_row_without_sentinel_is_data(self):
        rows = [["Plan", "", "B1 - Thing", "U", "4", "", "", "", "8"]]
        assert aggregate(rows)[0].amount == 8

    def test_empty_input(self):
        assert aggregate([]) == []
        assert aggregate([HEADER]) == []

    def test_accepts_tuples_and_generators(self):
        rows = (tuple(export_row("B1 - Thing", amount="2")) for _ in range(3))
        assert aggregate(rows)[0].amount == 6

    def test_idempotent(self):
        rows = [export_row(f"S{n % 4} - Svc", quantity=str(n), amount=str(n * 2.5)) for n in range(20)]
        assert set(aggregate(rows)) == set(aggregate(rows))

    def test_does_not_mutate_input(self):
        rows = [HEADER, export_row("B1 - Thing")]
        snapshot = [list(r) for r in rows]
        aggregate(rows)
        assert rows == snapshot

    @pytest.mark.parametrize("bad", ["not rows", b"bytes", 42, None, ["abc", "def"], [1, 2]])
    def test_invalid_input_raises(self, bad):
        with pytest.raises(InvalidInputError):
            aggregate(bad)

    def test_invalid_input_is_value_error(self):
        with pytest.raises(ValueError):
            aggregate("x")

    def test_custom_layout(self):
        layout = ColumnLayout(description=0, unit=1, quantity=2, amount=3, header_sentinel="SKU")
        rows = [
            ["SKU", "Unit", "Qty", "Cost"],
            ["B1 - Thing", "GB", "2", "4.5"],
            ["B1 - Thing", "GB", "3", "0.5"],
        ]
        items = aggregate(rows, layout)
        assert layout.min_columns == 4
        assert items == [InventoryItem("B1", "Thing", "GB", 5.0, 5.0)]


class TestParsing:
    """Tests for the cell helpers."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("100", 100.0),
            ("  12.5", 12.5),
            ("12.5 GB", 12.5),
            ("-3", -3.0),
            (".5", 0.5),
            ("1e3", 1000.0),
            ("", 0.0),
            ("abc", 0.0),
            ("$10", 0.0),
            ("1e999", 0.0),
            ("\u0663\u0660", 0.0),
            ("\uff11\uff12", 0.0),
            (None, 0.0),
            (7, 7.0),
        ],
    )
    def test_parse_number(self, value, expected):
        assert parse_number(value) == expected

    def test_split_sku(self):
        assert split_sku("B1 - Block Storage") == ("B1", "Block Storage")
        assert split_sku("B1-Block") == ("B1-Block", "B1-Block")


class TestReader:
    """Tests for read_rows() and load_inventory()."""

    CSV = (
        "Subscription Plan Number,Date,SKU,Unit,Quantity,a,b,c,Amount\n"
        "P1,2024-05-01,B91214 - Compute - E4,OCPU/Hour,100,,,,50.00\n"
        "\n"
        "P1,2024-05-02,B91214 - Compute - E4,OCPU/Hour,150,,,,75.00\n"
        'P1,2024-05-02,"B88317 - Block Storage - Performance, Tier 1",GB/Month,10,,,,200\n'
    )

    def test_read_rows_from_bytes_with_bom(self):
        rows = read_rows(("\ufeff" + self.CSV).encode("utf-8"))
        assert rows[0][0] == "Subscription Plan Number"
        assert len(rows) == 4

    def test_read_rows_from_text_stream(self):
        rows = read_rows(io.StringIO(self.CSV))
        assert rows[3][2] == "B88317 - Block Storage - Performance, Tier 1"

    def test_load_inventory_from_path(self, tmp_path):
        path = tmp_path / "usage.csv"
        path.write_text(self.CSV, encoding="utf-8")

        items = load_inventory(path)

        assert [i.id for i in items] == ["B88317", "B91214"]
        assert items[1].quantity == 250
        assert items[1].amount == 125


class TestInventoryHelpers:
    """Tests for the sample portfolio and summary helpers."""

    def test_sample_is_sorted_by_amount(self):
        amounts = [i.amount for i in SAMPLE_INVENTORY]
        assert amounts == sorted(amounts, reverse=True)

    def test_total_and_top(self):
        assert total_amount(SAMPLE_INVENTORY) == pytest.approx(2525.70)
        assert [i.id for i in top_items(SAMPLE_INVENTORY, 2)] == ["B91214", "B88317"]

    def test_service_keywords(self):
        assert service_keywords(SAMPLE_INVENTORY) == [
            "Compute",
            "Block Storage",
            "Object Storage",
            "Network",
        ]

    def test_to_dict(self):
        data = SAMPLE_INVENTORY[0].to_dict()
        assert data["sku"] == "B91214"
        assert data["amount"] == 1250.5


class TestLayoutConfig:
    """Tests for environment overrides of the column layout."""

    def test_defaults(self, monkeypatch):
        for name in (
            "HORIZON_COL_DESCRIPTION",
            "HORIZON_COL_UNIT",
            "HORIZON_COL_QUANTITY",
            "HORIZON_COL_AMOUNT",
            "HORIZON_HEADER_SENTINEL",
        ):
            monkeypatch.delenv(name, raising=False)
        layout = layout_from_env()
        assert (layout.description, layout.unit, layout.quantity, layout.amount) == (2, 3, 4, 8)
        assert layout.min_columns == 9

    def test_overrides(self, monkeypatch):
        monkeypatch.setenv("HORIZON_COL_AMOUNT", "10")
        monkeypatch.setenv("HORIZON_HEADER_SENTINEL", "Plan")
        layout = layout_from_env()
        assert layout.amount == 10
        assert layout.min_columns == 11
        assert layout.header_sentinel == "Plan"

    def test_bad_override(self, monkeypatch):
        monkeypatch.setenv("HORIZON_COL_UNIT", "three")
        with pytest.raises(ValueError):
            layout_from_env()
