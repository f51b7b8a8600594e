"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""
from decimal import Decimal

MONEY_PLACES = 2
# Columns are DECIMAL(12,2) and INT.
MAX_MONEY_AMOUNT = Decimal("9999999999.99")
MAX_QUANTITY = 2**31 - 1
MAX_NOTES_LENGTH = 500
MAX_REASON_LENGTH = 500
DEFAULT_LOG_LEVEL = "INFO"
API_PREFIX = "/api"
