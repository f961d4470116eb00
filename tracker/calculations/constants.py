"""
Calculation Constants for EVC Track

Centralized location for the enumerations and bounds used in calculations
and validation. Values that are deployment-specific come from Config.
"""

from config import Config

# Battery percentage bounds
MIN_PERCENT = 0
MAX_PERCENT = 100

# Money
DEFAULT_CURRENCY = Config.DEFAULT_CURRENCY
SUPPORTED_CURRENCIES = ("JPY", "USD", "EUR", "GBP")

# Charge types (connector / speed categories)
CHARGE_TYPES = (
    "fast",
    "standard",
    "level1",
    "level2",
    "chademo",
    "ccs",
    "tesla",
    "type2",
)
FAST_CHARGE_TYPES = frozenset({"fast", "tesla", "chademo", "ccs"})
DEFAULT_CHARGE_TYPE = "standard"

# Session status
STATUS_ACTIVE = "active"
STATUS_COMPLETED = "completed"
SESSION_STATUSES = (STATUS_ACTIVE, STATUS_COMPLETED)

# Expense categories
EXPENSE_CATEGORIES = ("maintenance", "repair", "insurance", "tax", "other")
DEFAULT_EXPENSE_CATEGORY = "maintenance"

# Analytics
TREND_MONTHS = Config.TREND_MONTHS
