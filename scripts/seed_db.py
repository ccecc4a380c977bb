from __future__ import annotations

import argparse
import importlib
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from config import get_settings_module

from nikagenyx.database.bootstrap import apply_seed_sql, ensure_demo_admin


def main() -> None:
    parser = argparse.ArgumentParser(description="Seed the chart of accounts and a demo admin.")
    parser.add_argument("--admin-id", default="NGX000001")
    parser.add_argument("--admin-pin", default="1234")
    args = parser.parse_args()

    settings = importlib.import_module(get_settings_module())
    db_config = dict(settings.DB_CONFIG)

    apply_seed_sql(db_config, seed_path=REPO_ROOT / "database" / "seed.sql")
    ensure_demo_admin(db_config, emp_id=args.admin_id, pin=args.admin_pin)

    print(
        "OK: Seeded database -> "
        f"{db_config.get('user')}@{db_config.get('host')}:{db_config.get('port', 3306)}/{db_config.get('database')} "
        f"(admin={args.admin_id})"
    )


if __name__ == "__main__":
    main()
