"""Tests for the expense categorizer (fake models, no API calls)."""

from types import SimpleNamespace

import pytest

from bizboard.categorization import (
    CollaboratorUnavailable,
    ExpenseCategorizer,
    SuggestionSource,
)
from bizboard.config import get_settings
from bizboard.models import AuditEventType


class FakeModel:
    """Stands in for genai.GenerativeModel."""

    def __init__(self, text='{"category": "Travel"}'):
        self.text = text
        self.prompts = []

    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        return SimpleNamespace(text=self.text)


class UnreachableModel(FakeModel):
    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        raise ConnectionError("network is unreachable")


class BlockedResponse:
    @property
    def text(self):
        raise ValueError("response was blocked")


class BlockedModel(FakeModel):
    async def generate_content_async(self, prompt):
        self.prompts.append(prompt)
        return BlockedResponse()


@pytest.fixture
def unconfigured(monkeypatch, tmp_path):
    """No Gemini key in the environment or in a .env file."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.chdir(tmp_path)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


class TestSuggest:
    """Tests for ExpenseCategorizer.suggest / classify."""

    @pytest.mark.asyncio
    async def test_model_answer_used(self):
        model = FakeModel()
        categorizer = ExpenseCategorizer(model=model)

        suggestion = await categorizer.suggest("taxi to airport")

        assert suggestion.category == "Travel"
        assert suggestion.source == SuggestionSource.MODEL
        assert suggestion.notice is None
        assert "taxi to airport" in model.prompts[0]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("description", ["", "   ", None])
    async def test_empty_description_skips_model(self, description):
        model = FakeModel()
        categorizer = ExpenseCategorizer(model=model)

        assert await categorizer.classify(description) == ""
        assert model.prompts == []

    @pytest.mark.asyncio
    async def test_unreachable_model_falls_back(self):
        categorizer = ExpenseCategorizer(model=UnreachableModel())

        suggestion = await categorizer.suggest("taxi to airport")

        assert suggestion.category == "Uncategorized"
        assert suggestion.used_fallback is True
        assert suggestion.notice

    @pytest.mark.asyncio
    async def test_blocked_response_falls_back(self):
        categorizer = ExpenseCategorizer(model=BlockedModel())
        assert await categorizer.classify("taxi to airport") == "Uncategorized"

    @pytest.mark.asyncio
    async def test_custom_fallback_label(self):
        categorizer = ExpenseCategorizer(model=UnreachableModel(), fallback_category="Other")
        assert await categorizer.classify("taxi to airport") == "Other"

    @pytest.mark.asyncio
    async def test_long_fallback_label(self):
        label = ("Needs Review " * 12).strip()
        categorizer = ExpenseCategorizer(model=UnreachableModel(), fallback_category=label)
        suggestion = await categorizer.suggest("Taxi to airport")
        assert suggestion.category == label
        assert suggestion.used_fallback

    @pytest.mark.asyncio
    async def test_plain_text_answer(self):
        categorizer = ExpenseCategorizer(model=FakeModel(text="\n  Meals  \n"))
        assert await categorizer.classify("lunch with client") == "Meals"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("text", ["", "   ", '{"confidence": 0.9}'])
    async def test_unusable_answer_falls_back(self, text):
        categorizer = ExpenseCategorizer(model=FakeModel(text=text))
        assert await categorizer.classify("lunch with client") == "Uncategorized"

    @pytest.mark.asyncio
    async def test_unconfigured_model_falls_back(self, unconfigured):
        categorizer = ExpenseCategorizer()

        assert categorizer.is_available is False
        assert await categorizer.classify("taxi to airport") == "Uncategorized"

    @pytest.mark.asyncio
    async def test_suggestions_and_failures_are_audited(self, audit):
        await ExpenseCategorizer(model=FakeModel(), audit_logger=audit).suggest("taxi")
        await ExpenseCategorizer(model=UnreachableModel(), audit_logger=audit).suggest("taxi")

        assert [e.event_type for e in audit.events] == [
            AuditEventType.CATEGORY_SUGGESTED,
            AuditEventType.CATEGORIZATION_FAILED,
        ]


class TestAskModel:
    """The internal call raises CollaboratorUnavailable; suggest() absorbs it."""

    @pytest.mark.asyncio
    async def test_remote_failure_raises_internally(self):
        categorizer = ExpenseCategorizer(model=UnreachableModel())
        with pytest.raises(CollaboratorUnavailable, match="unreachable"):
            await categorizer._ask_model("taxi")


class TestParseCategory:
    """Tests for reading the model's answer."""

    def test_json_answer(self):
        assert ExpenseCategorizer._parse_category('{"category": "Software"}') == "Software"

    def test_json_inside_code_fence(self):
        text = '```json\n{"category": "Office Expenses"}\n```'
        assert ExpenseCategorizer._parse_category(text) == "Office Expenses"

    def test_quoted_line(self):
        assert ExpenseCategorizer._parse_category('"Marketing"') == "Marketing"

    def test_long_answer_truncated(self):
        assert len(ExpenseCategorizer._parse_category("x" * 500)) == 100

    def test_none(self):
        assert ExpenseCategorizer._parse_category(None) == ""
