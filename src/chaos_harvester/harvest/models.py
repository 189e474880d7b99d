"""Pydantic models for harvest results.

- ``HarvestAction``: What happened to one external object.
- ``HarvestResult``: Outcome of harvesting one external object.
- ``HarvestReport``: Aggregate results for a full harvest run.

All models are frozen (immutable).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel


class HarvestAction(str, Enum):
    """Possible outcomes for one external object."""

    CREATED = "created"
    REUSED = "reused"
    UNPUBLISHED = "unpublished"
    SKIPPED = "skipped"
    PREVIEW = "preview"
    FAILED = "failed"


class HarvestResult(BaseModel):
    """Result of harvesting one external object.

    Attributes:
        query: Query of the object shadow ("" if no shadow was built).
        object_guid: GUID of the bound object, if any.
        action: What happened to the object.
        success: Whether the object was committed without error.
        error: Error message if harvesting failed.
        duplicates: Number of duplicate objects that were unpublished.
        files_reused: File shadows matched to existing files.
        files_created: File shadows that created a file.
        files_failed: File shadows whose file could not be created.
        files_deleted: Files removed because no file shadow accounted for them.
        metadata_rejected: Metadata documents that failed schema validation.
    """

    query: str
    object_guid: str | None = None
    action: HarvestAction
    success: bool = True
    error: str | None = None
    duplicates: int = 0
    files_reused: int = 0
    files_created: int = 0
    files_failed: int = 0
    files_deleted: int = 0
    metadata_rejected: int = 0

    model_config = {"frozen": True}


class HarvestReport(BaseModel):
    """Aggregate report for a full harvest run.

    Attributes:
        dry_run: Whether the run had ``no-shadow-commit`` set.
        results: Individual harvest results, in processing order.
        started_at: ISO 8601 timestamp when the run started.
        completed_at: ISO 8601 timestamp when the run completed.
    """

    dry_run: bool = False
    results: list[HarvestResult] = []
    started_at: str
    completed_at: str | None = None

    model_config = {"frozen": True}

    def by_action(self, action: HarvestAction) -> list[HarvestResult]:
        return [r for r in self.results if r.action == action]

    @property
    def created(self) -> list[HarvestResult]:
        return self.by_action(HarvestAction.CREATED)

    @property
    def reused(self) -> list[HarvestResult]:
        return self.by_action(HarvestAction.REUSED)

    @property
    def unpublished(self) -> list[HarvestResult]:
        return self.by_action(HarvestAction.UNPUBLISHED)

    @property
    def skipped(self) -> list[HarvestResult]:
        return self.by_action(HarvestAction.SKIPPED)

    @property
    def errors(self) -> list[HarvestResult]:
        """Results where success is False."""
        return [r for r in self.results if not r.success]

    def summary(self) -> str:
        """Format a short summary of the run with counts by action."""
        lines = [
            "Harvest report" + (" (dry run)" if self.dry_run else ""),
            f"  Created:     {len(self.created)}",
            f"  Reused:      {len(self.reused)}",
            f"  Unpublished: {len(self.unpublished)}",
            f"  Skipped:     {len(self.skipped)}",
            f"  Errors:      {len(self.errors)}",
            f"  Total:       {len(self.results)}",
        ]
        return "\n".join(lines)
