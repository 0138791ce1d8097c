"""Expense categorization package."""

from bizboard.categorization.categorizer import (
    CategorySuggestion,
    CollaboratorUnavailable,
    ExpenseCategorizer,
    SuggestionSource,
)

__all__ = [
    "CategorySuggestion",
    "CollaboratorUnavailable",
    "ExpenseCategorizer",
    "SuggestionSource",
]
