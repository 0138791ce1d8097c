"""Ledger exceptions."""

from bizboard.models.records import RecordKind, ValidationIssue


class LedgerError(Exception):
    """Base exception for ledger operations."""
    pass


class ValidationError(LedgerError):
    """
    A record failed its field constraints.

    Raised before the ledger is mutated. The caller shows ``issues``
    next to the offending form fields.
    """

    def __init__(self, kind: RecordKind, issues: list[ValidationIssue]):
        self.kind = kind
        self.issues = issues
        summary = "; ".join(f"{i.field}: {i.message}" for i in issues)
        super().__init__(f"Invalid {kind.value}: {summary}")

    def messages_by_field(self) -> dict[str, str]:
        """First message per field, for inline display."""
        messages: dict[str, str] = {}
        for issue in self.issues:
            messages.setdefault(issue.field, issue.message)
        return messages
