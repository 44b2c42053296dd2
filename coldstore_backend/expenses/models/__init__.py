from .expense import Expense, ExpenseCategory

__all__ = ["Expense", "ExpenseCategory"]
