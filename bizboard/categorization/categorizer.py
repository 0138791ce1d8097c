"""
Expense Categorization

DESIGN DECISION: We use Gemini to suggest a category from the free-text
description of an expense.

CRITICAL BOUNDARIES:
- CAN: Suggest a category for the Expenses form
- CANNOT: Write to the ledger (the store never calls this module)
- CANNOT: Fail the add-expense flow; remote failures become the
  fallback label plus a notice for the user

The model is a SUGGESTER, not a VALIDATOR. The user can overwrite
whatever it returns, and the ledger accepts any non-empty category.
"""

import json
from enum import Enum
from typing import Any, Optional

import google.generativeai as genai
import structlog
from pydantic import BaseModel, Field

from bizboard.audit import AuditLogger
from bizboard.config import get_settings


class CollaboratorUnavailable(Exception):
    """The categorization model could not produce an answer."""
    pass


class SuggestionSource(str, Enum):
    """Where a suggested category came from."""
    MODEL = "model"          # The model answered
    FALLBACK = "fallback"    # The model failed; configured fallback label
    EMPTY = "empty"          # Nothing to categorize; model not called


class CategorySuggestion(BaseModel):
    """Suggested value for the category field of an expense."""

    category: str = Field(
        ...,
        description="Suggested category ('' when there was nothing to categorize)"
    )
    source: SuggestionSource
    notice: Optional[str] = Field(
        default=None,
        description="Non-blocking message for the user, if any"
    )

    @property
    def used_fallback(self) -> bool:
        return self.source == SuggestionSource.FALLBACK


class ExpenseCategorizer:
    """
    Suggests expense categories using a Gemini model.

    RESPONSIBILITIES:
    - Turn an expense description into a short category label
    - Map every remote failure to the fallback label

    BOUNDARIES:
    - NEVER touches the ledger
    - NEVER retries; one request per suggestion
    - NEVER raises for remote failures
    """

    def __init__(
        self,
        model: Optional[Any] = None,
        fallback_category: Optional[str] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        """
        Initialize the categorizer.

        Args:
            model: Object with an async ``generate_content_async(prompt)``.
                  If None, a Gemini model is built from GeminiSettings.
            fallback_category: Label used when the model fails.
                              Defaults to AppSettings.uncategorized_label.
            audit_logger: Optional audit trail for suggestions and failures.
        """
        self._fallback = fallback_category or get_settings().app.uncategorized_label
        self._audit_logger = audit_logger
        self._logger = structlog.get_logger(__name__)
        self._model = model
        self._unavailable_reason: Optional[str] = None

        if self._model is None:
            try:
                self._configure_genai()
            except Exception as e:
                # Missing API key: run without the model, every call falls back
                self._unavailable_reason = str(e)
                self._logger.warning("categorizer_not_configured", error=str(e))

    def _configure_genai(self):
        """Configure Google Generative AI."""
        settings = get_settings().gemini
        genai.configure(api_key=settings.api_key)
        self._model = genai.GenerativeModel(
            model_name=settings.model_name,
            generation_config={
                "temperature": settings.temperature,
                "max_output_tokens": settings.max_tokens,
            }
        )

    @property
    def is_available(self) -> bool:
        """Whether a model is configured (it may still fail per call)."""
        return self._model is not None

    @property
    def fallback_category(self) -> str:
        return self._fallback

    async def suggest(self, description: str) -> CategorySuggestion:
        """
        Suggest a category for an expense description.

        An empty description returns an empty suggestion without
        calling the model. A failed call returns the fallback label
        with a notice the UI can show as a toast.
        """
        description = (description or "").strip()
        if not description:
            return CategorySuggestion(category="", source=SuggestionSource.EMPTY)

        try:
            category = await self._ask_model(description)
        except CollaboratorUnavailable as e:
            self._logger.warning(
                "categorization_failed",
                error=str(e),
                fallback=self._fallback,
            )
            if self._audit_logger:
                self._audit_logger.log_categorization_failed(
                    description, str(e), self._fallback,
                )
            return CategorySuggestion(
                category=self._fallback,
                source=SuggestionSource.FALLBACK,
                notice="Could not categorize the expense. "
                       f"Using '{self._fallback}' - you can change it before saving.",
            )

        if self._audit_logger:
            self._audit_logger.log_category_suggested(description, category)
        return CategorySuggestion(category=category, source=SuggestionSource.MODEL)

    async def classify(self, description: str) -> str:
        """Suggested category as plain text."""
        suggestion = await self.suggest(description)
        return suggestion.category

    async def _ask_model(self, description: str) -> str:
        if self._model is None:
            raise CollaboratorUnavailable(
                f"Categorization model not configured: {self._unavailable_reason}"
            )

        prompt = f"""You are helping categorize expenses for a small business bookkeeping app.

Suggest one short, general bookkeeping category (1 to 3 words, Title Case)
for the following expense.

Expense description: {description[:200]}

Examples of good categories: Software, Travel, Meals, Office Expenses,
Business Development, Utilities, Rent, Marketing, Professional Services.

Respond with ONLY a JSON object in this exact format:
{{"category": "Category Name"}}"""

        try:
            response = await self._model.generate_content_async(prompt)
            text = response.text
        except Exception as e:
            raise CollaboratorUnavailable(str(e) or type(e).__name__) from e

        category = self._parse_category(text)
        if not category:
            raise CollaboratorUnavailable("Empty answer from categorization model")
        return category

    @staticmethod
    def _parse_category(text: Optional[str]) -> str:
        """Category from a JSON answer, else the first non-empty line."""
        text = (text or "").strip()

        start = text.find("{")
        end = text.rfind("}") + 1
        if start >= 0 and end > start:
            try:
                data = json.loads(text[start:end])
            except json.JSONDecodeError:
                data = None
            if isinstance(data, dict):
                return str(data.get("category") or "").strip()[:100]

        for line in text.splitlines():
            line = line.strip().strip("\"'`").strip()
            if line:
                return line[:100]
        return ""
