"""
Centralized category definitions used by validation, imports and the
role-specific dashboards.
"""

INCOME_CATEGORIES = [
    "Salary",
    "Freelance",
    "Investments",
    "Business",
    "Rental",
    "Gifts",
    "Refunds",
    "Other Income",
]

EXPENSE_CATEGORIES = [
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Bills & Utilities",
    "Health & Fitness",
    "Travel",
    "Education",
    "Personal Care",
    "Home",
    "Groceries",
    "Subscriptions",
    "Insurance",
    "Taxes",
    "Gifts & Donations",
    "Pets",
    "Kids",
    "Other Expenses",
]

# Expense categories surfaced on the business dashboard
BUSINESS_CATEGORIES = [
    "Office",
    "Software",
    "Marketing",
    "Travel",
    "Equipment",
    "Utilities",
]

GOAL_CATEGORIES = [
    "Emergency Fund",
    "Vacation",
    "Home",
    "Car",
    "Education",
    "Retirement",
    "Wedding",
    "Electronics",
    "Debt Payoff",
    "Investment",
    "Other",
]

BILL_CATEGORIES = [
    "utilities",
    "rent",
    "mortgage",
    "insurance",
    "subscription",
    "loan",
    "credit_card",
    "other",
]


def get_categories() -> dict[str, list[str]]:
    """Return the transaction category lists keyed by transaction type."""
    return {"income": list(INCOME_CATEGORIES), "expense": list(EXPENSE_CATEGORIES)}
