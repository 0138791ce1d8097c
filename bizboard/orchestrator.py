"""
Application Wiring for BizBoard

This module builds the one set of components the screens share:
- the ledger store (single owner of every record)
- the recent-changes feed subscribed to it
- the expense categorizer
- the audit logger used by both

DESIGN DECISION: Components are built here and passed down explicitly.
Nothing in the package reaches for a global store, so tests can build
as many independent ledgers as they like.
"""

from typing import NamedTuple, Optional

from bizboard.audit import AuditLogger
from bizboard.categorization import ExpenseCategorizer
from bizboard.config import get_settings
from bizboard.ledger import LedgerStore
from bizboard.queries import RecentChanges
from bizboard.seed import seed_sample_data


class AppComponents(NamedTuple):
    store: LedgerStore
    recent_changes: RecentChanges
    categorizer: ExpenseCategorizer
    audit_logger: AuditLogger


def create_app_components(
    seed: Optional[bool] = None,
    categorizer: Optional[ExpenseCategorizer] = None,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        seed: Load the sample records. Defaults to
              AppSettings.seed_sample_data.
        categorizer: Pre-built categorizer (tests pass one with a fake
                     model). If None, one is built from settings.

    Returns:
        AppComponents with the store already seeded and observed.
    """
    app_settings = get_settings().app
    audit_logger = AuditLogger()

    store = LedgerStore(audit_logger=audit_logger)
    recent_changes = RecentChanges(limit=app_settings.recent_changes_limit)

    if seed is None:
        seed = app_settings.seed_sample_data
    if seed:
        seed_sample_data(store)

    # Sample records never show up as recent activity
    store.subscribe(recent_changes)

    categorizer = categorizer or ExpenseCategorizer(audit_logger=audit_logger)

    return AppComponents(
        store=store,
        recent_changes=recent_changes,
        categorizer=categorizer,
        audit_logger=audit_logger,
    )
