"""Allowed values for enumerated model fields."""

ROLES = ("individual", "student", "business")
CURRENCIES = ("USD", "EUR", "GBP", "INR", "JPY", "CAD", "AUD")
THEMES = ("dark", "light")

ACCOUNT_TYPES = ("checking", "savings", "credit", "investment", "cash")
TRANSACTION_TYPES = ("income", "expense", "transfer")
RECURRING_FREQUENCIES = ("daily", "weekly", "monthly", "yearly")

BUDGET_PERIODS = ("weekly", "monthly", "yearly")
PRIORITIES = ("low", "medium", "high")
BILL_FREQUENCIES = ("once", "weekly", "biweekly", "monthly", "quarterly", "yearly")

INVESTMENT_TYPES = (
    "stock",
    "etf",
    "mutual_fund",
    "bond",
    "crypto",
    "real_estate",
    "commodity",
    "other",
)

NOTIFICATION_TYPES = (
    "transaction",
    "budget_warning",
    "budget_exceeded",
    "goal_progress",
    "goal_completed",
    "bill_reminder",
    "bill_overdue",
    "account_update",
    "system",
    "ai_insight",
)

CONVERSATION_CONTEXTS = ("general", "budget", "investment", "savings", "debt")
MESSAGE_ROLES = ("user", "assistant")
