import csv
from datetime import date

from scraplog.cli.ledger_cmd import main


def test_add_then_history(store, capsys):
    assert main(["add", "--item", "Iron", "--weight", "10", "--price", "50", "--supplier", "Musa",
                 "--date", "2024-01-02"], store=store) == 0
    out = capsys.readouterr().out
    assert "₦500.00" in out

    assert main(["history", "--item", "iron"], store=store) == 0
    out = capsys.readouterr().out
    assert "Iron" in out and "Musa" in out


def test_add_with_missing_field_exits_nonzero(store, backend, capsys):
    assert main(["add", "--item", "Iron", "--weight", "10", "--supplier", "Musa"], store=store) == 1
    assert "Price per kg is required" in capsys.readouterr().out
    assert backend.calls == []


def test_add_while_offline_reports_local_save(store, backend, capsys):
    backend.fail = True
    assert main(["add", "--item", "Pot", "--weight", "2", "--amount", "200", "--supplier", "Ada"], store=store) == 0
    out = capsys.readouterr().out
    assert "ローカルにのみ保存しました" in out
    assert len(store.records) == 1


def test_dashboard_lists_suppliers_by_amount(store, backend, capsys):
    backend.records = [
        {"id": "1", "item_name": "Iron", "weight": 10, "total_amount": 100, "supplier_name": "Small",
         "transaction_date": "2024-01-01"},
        {"id": "2", "item_name": "Iron", "weight": 5, "total_amount": 900, "supplier_name": "Large",
         "transaction_date": "2024-01-02"},
    ]
    assert main(["dashboard"], store=store) == 0
    out = capsys.readouterr().out
    assert "₦1,000.00" in out
    assert out.index("Large") < out.index("Small")


def test_history_export(store, backend, tmp_path, capsys):
    backend.records = [
        {"id": "1", "item_name": "Iron", "weight": 10, "price_per_kg": 5, "total_amount": 50,
         "supplier_name": "Musa", "transaction_date": "2024-01-01"},
        {"id": "2", "item_name": "Iron", "weight": 1, "price_per_kg": 5, "total_amount": 5,
         "supplier_name": "Musa", "transaction_date": "2024-01-03"},
    ]
    target = tmp_path / "report.csv"
    assert main(["history", "--sort", "amount-asc", "--export", str(target)], store=store) == 0
    rows = list(csv.reader(target.open(encoding="utf-8")))
    assert [row[4] for row in rows[1:]] == ["5.00", "50.00"]


def test_delete_offline_still_removes_locally(store, backend, capsys):
    backend.records = [{"id": "1", "item_name": "Iron", "transaction_date": "2024-01-01"}]
    store.list()
    backend.fail = True
    assert main(["delete", "1"], store=store) == 0
    assert "ローカルからは削除しました" in capsys.readouterr().out
    assert store.records == []


def test_no_command_prints_help(capsys):
    assert main([]) == 0
    assert "usage" in capsys.readouterr().out.lower()


def test_daily_shows_count_and_total_for_the_chosen_day(store, backend, capsys):
    backend.records = [
        {"id": "1", "item_name": "Iron", "weight": 10, "total_amount": 100, "supplier_name": "Musa",
         "transaction_date": "2024-02-01"},
        {"id": "2", "item_name": "Ceramic", "weight": 4, "total_amount": 60, "supplier_name": "Ada",
         "transaction_date": "2024-02-01"},
        {"id": "3", "item_name": "Copper", "weight": 1, "total_amount": 999, "supplier_name": "Bola",
         "transaction_date": "2024-02-02"},
    ]
    assert main(["daily", "--date", "2024-02-01"], store=store) == 0
    out = capsys.readouterr().out
    assert "取引件数: 2" in out
    assert "₦160.00" in out
    assert "Copper" not in out
    assert backend.calls[-1] == ("list", {"start_date": "2024-02-01", "end_date": "2024-02-01"})


def test_daily_defaults_to_today(store, backend, capsys):
    today = date.today().isoformat()
    backend.records = [{"id": "1", "item_name": "Iron", "total_amount": 5, "transaction_date": today}]
    assert main(["daily"], store=store) == 0
    out = capsys.readouterr().out
    assert today in out
    assert "取引件数: 1" in out


def test_daily_with_no_records(store, capsys):
    assert main(["daily", "--date", "1999-01-01"], store=store) == 0
    assert "この日の取引はありません" in capsys.readouterr().out
