"""Batch driver that harvests a sequence of external objects.

For each external object the ``Harvester``:

1. Builds an ``ObjectShadow`` with the object processor.
2. Runs every processor on it, in order.
3. Commits the shadow.
4. Records a ``HarvestResult``.

Error handling is per-object: a failure is logged and recorded, and the
run continues with the next object.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from datetime import datetime, timezone
from typing import Any

from chaos_harvester.core.models import ChaosObject
from chaos_harvester.processors.base import ObjectProcessor, Processor
from chaos_harvester.processors.metadata import MetadataProcessor, MetadataResult
from chaos_harvester.shadows.base import HarvestContext
from chaos_harvester.shadows.file import FileStatus
from chaos_harvester.shadows.object import ObjectShadow

from .models import HarvestAction, HarvestReport, HarvestResult

logger = logging.getLogger(__name__)


class Harvester:
    """Harvest external objects into the CHAOS service.

    Args:
        context: Client, options and clock shared by every commit.
        object_processor: Builds the object shadow for an external object.
        processors: Processors run on each shadow before it is committed.
    """

    def __init__(
        self,
        context: HarvestContext,
        object_processor: ObjectProcessor,
        processors: Sequence[Processor] = (),
    ) -> None:
        self.context = context
        self.object_processor = object_processor
        self.processors = list(processors)

    def prepare(self) -> None:
        """Fetch the schemas of validating metadata processors.

        Raises:
            MetadataSchemaError: If a schema cannot be fetched.
        """
        for processor in self.processors:
            if isinstance(processor, MetadataProcessor) and processor.validate:
                processor.fetch_schema()

    def run(self, external_objects: Iterable[Any]) -> HarvestReport:
        """Harvest every external object.

        Returns:
            A ``HarvestReport`` with one result per external object.
        """
        started_at = datetime.now(timezone.utc).isoformat()
        dry_run = self.context.options.no_shadow_commit
        self.prepare()

        results: list[HarvestResult] = []
        for external_object in external_objects:
            shadow: ObjectShadow | None = None
            try:
                shadow = self.object_processor.build_shadow(external_object)
                results.append(self.harvest_one(external_object, shadow))
            except Exception as exc:
                logger.error(
                    "Error harvesting %s: %s",
                    shadow if shadow is not None else external_object,
                    exc,
                )
                results.append(
                    HarvestResult(
                        query=shadow.query if shadow is not None else "",
                        object_guid=(
                            shadow.bound_object.id
                            if shadow is not None and shadow.bound_object
                            else None
                        ),
                        action=HarvestAction.FAILED,
                        success=False,
                        error=str(exc),
                    )
                )

        return HarvestReport(
            dry_run=dry_run,
            results=results,
            started_at=started_at,
            completed_at=datetime.now(timezone.utc).isoformat(),
        )

    def harvest_one(
        self, external_object: Any, shadow: ObjectShadow
    ) -> HarvestResult:
        """Run the processors on *shadow* and commit it."""
        metadata_rejected = 0
        for processor in self.processors:
            outcome = processor.process(external_object, shadow)
            if isinstance(outcome, MetadataResult) and not outcome.attached:
                metadata_rejected += 1

        obj = shadow.commit(self.context)

        statuses = [result.status for result in shadow.file_results]
        return HarvestResult(
            query=shadow.query,
            object_guid=obj.id if obj is not None else None,
            action=self._classify(shadow, obj),
            duplicates=len(shadow.duplicate_objects),
            files_reused=statuses.count(FileStatus.REUSED),
            files_created=statuses.count(FileStatus.CREATED),
            files_failed=statuses.count(FileStatus.FAILED),
            files_deleted=len(shadow.deleted_file_ids),
            metadata_rejected=metadata_rejected,
        )

    def _classify(
        self, shadow: ObjectShadow, obj: ChaosObject | None
    ) -> HarvestAction:
        if self.context.options.no_shadow_commit:
            return HarvestAction.PREVIEW
        if shadow.skipped:
            return HarvestAction.UNPUBLISHED if obj is not None else HarvestAction.SKIPPED
        if shadow.created:
            return HarvestAction.CREATED
        return HarvestAction.REUSED
