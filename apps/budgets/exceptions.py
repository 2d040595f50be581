"""
Domain exceptions for budgets app.
"""


class BudgetServiceError(Exception):
    """Base exception for budget service errors."""
    pass


class InvalidBudgetError(BudgetServiceError):
    """Raised when a budget amount is negative or not a number."""
    pass
