import pytest

from scraplog.ledger.aggregate import aggregate
from scraplog.ledger.models import Record
from scraplog.ledger.normalizer import normalize_record


def _fixture():
    return [
        Record(id="1", item_name="Iron", weight=10, price_per_kg=50, supplier_name="Musa",
               transaction_date="2024-01-01", total_amount=500),
        Record(id="2", item_name="Iron", weight=5, price_per_kg=50, supplier_name="Ada",
               transaction_date="2024-01-02", total_amount=250),
        Record(id="3", item_name="Pot", weight=0, amount=200, supplier_name="Musa",
               transaction_date="2024-01-03", total_amount=200),
    ]


def test_totals_and_per_item_stats():
    s = aggregate(_fixture())
    assert s.total_weight == 15
    assert s.total_amount == 950
    assert s.total_records == 3
    assert s.item_stats["Iron"].count == 2
    assert s.item_stats["Iron"].total_weight == 15
    assert s.item_stats["Pot"].total_amount == 200
    assert list(s.item_stats) == ["Iron", "Pot"]


def test_supplier_stats_keep_first_seen_order_and_sort_descending():
    s = aggregate(_fixture())
    assert list(s.supplier_stats) == ["Musa", "Ada"]
    assert s.supplier_stats["Musa"].total_amount == 700
    assert s.supplier_stats["Musa"].count == 2
    assert [name for name, _ in s.suppliers_by_amount()] == ["Musa", "Ada"]


def test_supplier_ties_keep_insertion_order():
    records = [
        Record(id="1", supplier_name="B", total_amount=10),
        Record(id="2", supplier_name="A", total_amount=10),
        Record(id="3", supplier_name="C", total_amount=30),
    ]
    assert [name for name, _ in aggregate(records).suppliers_by_amount()] == ["C", "B", "A"]


def test_empty_input():
    s = aggregate([])
    assert (s.total_weight, s.total_amount, s.total_records) == (0, 0, 0)
    assert s.item_stats == {} and s.supplier_stats == {}
    assert s.recent_transactions == []


def test_recent_transactions_are_newest_five():
    records = [Record(id=str(i), transaction_date=f"2024-01-{i:02d}") for i in range(1, 9)]
    recent = aggregate(records).recent_transactions
    assert [r.id for r in recent] == ["8", "7", "6", "5", "4"]


def test_unparsable_dates_sort_last_without_crashing():
    records = [
        Record(id="bad", transaction_date="someday"),
        Record(id="ok", transaction_date="2020-01-01"),
    ]
    recent = aggregate(records).recent_transactions
    assert [r.id for r in recent] == ["ok", "bad"]


def test_stringified_numbers_and_raw_mappings_are_tolerated():
    records = [
        {"item_name": "Iron", "weight": "2.5", "total_amount": "100", "supplier_name": "Musa"},
        Record(id="x", item_name="Iron", weight="1.5", total_amount="50"),  # type: ignore[arg-type]
    ]
    s = aggregate(records)
    assert s.total_weight == pytest.approx(4.0)
    assert s.total_amount == pytest.approx(150.0)
    assert s.item_stats["Iron"].count == 2


def test_aggregate_does_not_read_raw():
    r = normalize_record({"itemName": "Iron", "totalAmount": 10})
    r.raw["totalAmount"] = 9999
    assert aggregate([r]).total_amount == 10
