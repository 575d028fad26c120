"""スクラップ買取台帳"""

from .aggregate import aggregate
from .dates import repair_timestamp, resolve_date, resolve_date_key, resolve_date_only
from .db import LocalMirror
from .models import ItemStats, Record, Summary, SupplierStats, ViewFilters, is_pot
from .normalizer import normalize_record, normalize_records, to_number
from .report import export_csv, write_csv
from .store import RecordBackend, RecordStore, build_record
from .views import build_view, filter_records, sort_records

__all__ = [
    "ItemStats",
    "LocalMirror",
    "Record",
    "RecordBackend",
    "RecordStore",
    "Summary",
    "SupplierStats",
    "ViewFilters",
    "aggregate",
    "build_record",
    "build_view",
    "export_csv",
    "filter_records",
    "is_pot",
    "normalize_record",
    "normalize_records",
    "repair_timestamp",
    "resolve_date",
    "resolve_date_key",
    "resolve_date_only",
    "sort_records",
    "to_number",
    "write_csv",
]
