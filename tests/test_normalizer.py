from datetime import date

from scraplog.ledger.models import Record
from scraplog.ledger.normalizer import is_local_id, normalize_record, normalize_records, to_number


def test_empty_mapping_gets_defaults_and_generated_id():
    r = normalize_record({})
    assert r.item_name == ""
    assert r.supplier_name == ""
    assert (r.weight, r.price_per_kg, r.amount, r.total_amount) == (0.0, 0.0, 0.0, 0.0)
    assert r.transaction_date == date.today().isoformat()
    assert is_local_id(r.id)
    assert r.timestamp is None and r.created_at is None


def test_generated_ids_are_unique():
    ids = {normalize_record({}).id for _ in range(500)}
    assert len(ids) == 500


def test_storage_naming_is_mapped_to_canonical_fields():
    r = normalize_record({
        "id": 7,
        "item_name": "Iron",
        "weight": "10.5",
        "price_per_kg": "50",
        "supplier_name": "Musa",
        "transaction_date": "2024-01-02",
        "total_amount": "525",
        "created_at": "2024-01-02T08:00:00Z",
    })
    assert r.id == "7"
    assert r.item_name == "Iron"
    assert r.weight == 10.5
    assert r.price_per_kg == 50.0
    assert r.supplier_name == "Musa"
    assert r.transaction_date == "2024-01-02"
    assert r.total_amount == 525.0
    assert r.created_at == "2024-01-02T08:00:00Z"


def test_display_naming_wins_when_both_present():
    r = normalize_record({"itemName": "Ceramic", "item_name": "Iron", "totalAmount": 10, "total_amount": 99})
    assert r.item_name == "Ceramic"
    assert r.total_amount == 10.0


def test_mongo_style_id_is_kept():
    assert normalize_record({"_id": "abc123"}).id == "abc123"


def test_non_numeric_values_become_zero():
    r = normalize_record({"weight": "heavy", "pricePerKg": None, "amount": float("nan"), "totalAmount": "inf"})
    assert (r.weight, r.price_per_kg, r.amount, r.total_amount) == (0.0, 0.0, 0.0, 0.0)


def test_to_number_strips_currency_and_separators():
    assert to_number("₦1,250.50") == 1250.5
    assert to_number(True) == 0.0
    assert to_number(" 3 ") == 3.0


def test_transaction_datetime_is_cut_to_date():
    assert normalize_record({"transactionDate": "2024-03-05T10:00:00.000Z"}).transaction_date == "2024-03-05"


def test_normalize_is_idempotent():
    samples = [
        {},
        {"item_name": "Pot", "amount": "200", "supplier_name": " Ada ", "timestamp": "2024-01-01T10:00:00Z"},
        {"itemName": "Iron", "weight": 3, "pricePerKg": 40, "displayDate": "2024-02-01"},
        "not a record",
    ]
    for raw in samples:
        once = normalize_record(raw)
        assert normalize_record(once) == once


def test_raw_is_kept_but_ignored_by_equality():
    raw = {"id": "1", "itemName": "Iron", "transactionDate": "2024-01-01", "extra": True}
    r = normalize_record(raw)
    assert r.raw is raw
    assert r == Record(id="1", item_name="Iron", transaction_date="2024-01-01")


def test_normalize_records_fails_soft():
    assert normalize_records(None) == []
    assert normalize_records({"id": "1"}) == []
    out = normalize_records([{"id": "1"}, None, {"id": "3"}])
    assert [r.id for r in out][0::2] == ["1", "3"]
    assert len(out) == 3
