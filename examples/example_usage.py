"""Example: use the service layer directly, without Flask.

Controllers are thin; the business rules live in the services.
"""

import importlib
from datetime import date

from config import get_settings_module

from nikagenyx.container import build_container


def main():
    settings = importlib.import_module(get_settings_module())
    container = build_container(db_config=settings.DB_CONFIG, settings=settings)

    tb = container.ledger_service.trial_balance(date.today())
    print(f"Trial balance as of {tb.as_of}: debit={tb.total_debit} credit={tb.total_credit} balanced={tb.balanced}")

    for view in container.account_service.list_accounts()[:5]:
        print(view.account.code, view.account.name, view.balance)


if __name__ == "__main__":
    main()
