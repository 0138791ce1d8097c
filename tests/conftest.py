"""Shared fixtures for BizBoard tests."""

import pytest

from bizboard.audit import AuditLogger


class RecordingAuditLogger(AuditLogger):
    """Keeps events in memory instead of writing them."""

    def __init__(self):
        super().__init__()
        self.events = []

    def log(self, event):
        self.events.append(event)
        return True


@pytest.fixture
def audit():
    return RecordingAuditLogger()
