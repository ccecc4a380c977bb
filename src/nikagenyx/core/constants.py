"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

from datetime import date
from decimal import Decimal

BALANCE_TOLERANCE = Decimal("0.01")
DEFAULT_LEDGER_START = date(2000, 1, 1)

STANDARD_HOURS_PER_DAY = 8
DEFAULT_OVERTIME_MULTIPLIER = Decimal("1.5")

PIN_LENGTH = 4
EMPLOYEE_ID_PREFIX = "NGX"

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Largest values the DECIMAL columns hold: money (15,2), quantity (12,3), rates (5,2).
MAX_MONEY = Decimal("9999999999999.99")
MAX_QUANTITY = Decimal("999999999.999")
MAX_RATE = Decimal("999.99")
