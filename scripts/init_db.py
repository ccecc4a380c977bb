from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from nikagenyx.database.bootstrap import apply_schema, list_tables

REQUIRED_TABLES = (
    "employees",
    "accounts",
    "journal_entries",
    "journal_entry_items",
    "audit_logs",
    "invoices",
    "invoice_items",
    "attendance",
    "payroll_mode",
)


def main() -> int:
    parser = argparse.ArgumentParser(description="Create the Nikagenyx Books tables")
    parser.add_argument("--schema", type=Path, default=REPO_ROOT / "database" / "schema.sql")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_schema(db_config, schema_path=args.schema)
    tables = set(list_tables(db_config))
    missing = [t for t in REQUIRED_TABLES if t not in tables]
    target = f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')}"
    if missing:
        print(f"ERROR: {target} is missing tables: {', '.join(missing)}")
        return 1

    print(f"OK: applied {args.schema.name} -> {target} ({len(tables)} tables)")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
