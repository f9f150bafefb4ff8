"""Diagnostics collector for the gallery builder.

Every pipeline stage reports skipped files, dropped pairs and failed
writes here instead of printing. Entries are kept in memory for the
caller to inspect and mirrored to the standard logger.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from gallery_builder.models import Diagnostic

logger = logging.getLogger(__name__)


class DiagnosticsCollector:
    """In-memory record of what happened during one build."""

    def __init__(self) -> None:
        self._entries: list[Diagnostic] = []

    def __len__(self) -> int:
        return len(self._entries)

    def log(
        self,
        component: str,
        action: str,
        details: Optional[dict[str, Any]] = None,
        success: bool = True,
    ) -> Diagnostic:
        """Record an entry.

        Args:
            component: Pipeline stage (e.g., "metadata", "pairing", "paginate").
            action: What happened (e.g., "file_unreadable", "missing_thumbnail").
            details: Optional dict of extra context.
            success: False for anything that dropped data or aborted work.

        Returns:
            The recorded Diagnostic.
        """
        entry = Diagnostic(
            component=component,
            action=action,
            details=details,
            success=success,
        )
        self._entries.append(entry)

        if success:
            logger.info(entry.describe())
        else:
            logger.warning(entry.describe())
        return entry

    def query(
        self,
        component: Optional[str] = None,
        action: Optional[str] = None,
        failures_only: bool = False,
        limit: int = 100,
    ) -> list[Diagnostic]:
        """Return recorded entries with optional filters, oldest first."""
        results = []
        for entry in self._entries:
            if component and entry.component != component:
                continue
            if action and entry.action != action:
                continue
            if failures_only and entry.success:
                continue
            results.append(entry)
        return results[:limit]

    def failures(self) -> list[Diagnostic]:
        """All entries recorded with success=False."""
        return [e for e in self._entries if not e.success]

    def clear(self) -> None:
        self._entries.clear()
