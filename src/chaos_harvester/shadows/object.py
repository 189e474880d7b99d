"""Shadow of an external object and its reconciliation with the service.

An ``ObjectShadow`` carries a query that identifies the object on the
service, defaults used when the object has to be created, and the
metadata, file and related-object shadows that belong to it.

Committing a shadow:

1. Resolves the query to exactly one object (get-or-create), tolerating
   up to ``DUPLICATE_OBJECTS_THRESHOLD`` duplicates.
2. Unless skipped, commits metadata, then files, deletes files on the
   object that no file shadow accounts for, and commits related objects.
3. Publishes the object, or unpublishes it when skipped.
4. Unpublishes every duplicate.

Service failures raise ``ServiceError`` and abort the commit; nothing is
retried or rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from chaos_harvester.core.client import ensure_success
from chaos_harvester.core.models import ChaosObject
from chaos_harvester.exceptions import (
    AmbiguousQueryError,
    ServiceError,
    ShadowCommitNotSupportedError,
    ShadowStateError,
)
from chaos_harvester.validators import validate_query

from .base import HarvestContext, Shadow
from .file import FileCommitResult, FileShadow
from .metadata import MetadataShadow
from .publication import PublicationController

logger = logging.getLogger(__name__)

# More duplicates than this and the query is too ambiguous to pick an object.
DUPLICATE_OBJECTS_THRESHOLD = 3

OBJECT_SORT = "DateCreated+asc"


@dataclass(frozen=True)
class Resolution:
    """The object a shadow resolved to. Set once per shadow.

    Attributes:
        object: The canonical object (earliest created match, or the new one).
        duplicates: Other objects matching the same query.
        created: True when the object was created by this shadow.
    """

    object: ChaosObject
    duplicates: tuple[ChaosObject, ...] = ()
    created: bool = False


class ObjectShadow(Shadow):
    """Staging record for one external object.

    Args:
        query: Object/Get query identifying the object on the service.
        folder_id: Folder a new object is created in.
        object_type_id: Type of a new object.
        skipped: The external object should not be published.
        unpublish_everywhere: When skipped, unpublish from every access
            point the object is currently on.
        publish_accesspoint_guids: Access points to publish on.
        unpublish_accesspoint_guids: Access points to unpublish from.
        extras: Scratch values exchanged between processors.
    """

    def __init__(
        self,
        query: str = "",
        folder_id: int | None = None,
        object_type_id: int | None = None,
        skipped: bool = False,
        unpublish_everywhere: bool = False,
        publish_accesspoint_guids: set[str] | None = None,
        unpublish_accesspoint_guids: set[str] | None = None,
        extras: dict[str, str] | None = None,
    ) -> None:
        self.query = query
        self.folder_id = folder_id
        self.object_type_id = object_type_id
        self.skipped = skipped
        self.unpublish_everywhere = unpublish_everywhere
        self.publish_accesspoint_guids: set[str] = set(publish_accesspoint_guids or ())
        self.unpublish_accesspoint_guids: set[str] = set(unpublish_accesspoint_guids or ())
        self.extras: dict[str, str] = dict(extras or {})

        self.metadata_shadows: list[MetadataShadow] = []
        self.file_shadows: list[FileShadow] = []
        self.related_object_shadows: list[ObjectShadow] = []

        self.file_results: list[FileCommitResult] = []
        self.deleted_file_ids: list[int] = []
        self._resolution: Resolution | None = None

    # ------------------------------------------------------------------
    # Resolved state
    # ------------------------------------------------------------------

    @property
    def resolution(self) -> Resolution | None:
        return self._resolution

    @property
    def bound_object(self) -> ChaosObject | None:
        return self._resolution.object if self._resolution else None

    @property
    def duplicate_objects(self) -> tuple[ChaosObject, ...]:
        return self._resolution.duplicates if self._resolution else ()

    @property
    def created(self) -> bool:
        return self._resolution is not None and self._resolution.created

    def _bind(self, resolution: Resolution) -> ChaosObject:
        if self._resolution is not None:
            raise ShadowStateError(
                f"Shadow is already bound to object {self._resolution.object.id}"
            )
        self._resolution = resolution
        return resolution.object

    # ------------------------------------------------------------------
    # Get or create
    # ------------------------------------------------------------------

    def get(
        self, context: HarvestContext, or_create: bool = True
    ) -> ChaosObject | None:
        """Resolve the query to an object, creating it if allowed.

        Returns the cached object on repeated calls. Returns None when
        nothing matches and *or_create* is False.

        Raises:
            ValueError: If the query is invalid.
            ServiceError: If the query or the create call fails.
            AmbiguousQueryError: If more than ``DUPLICATE_OBJECTS_THRESHOLD``
                duplicates match.
        """
        if self._resolution is not None:
            return self._resolution.object

        is_valid, error_msg = validate_query(self.query)
        if not is_valid:
            raise ValueError(f"Invalid query: {error_msg}")

        logger.debug("Trying to get the CHAOS object from %s", self.query)
        response = context.client.object_get(
            self.query,
            sort=OBJECT_SORT,
            page_index=0,
            page_size=DUPLICATE_OBJECTS_THRESHOLD + 1,
            include_metadata=True,
            include_files=True,
            include_object_relations=True,
            include_accesspoints=True,
        )
        ensure_success(response, "getting the object from the chaos service")

        total_count = response.total_count
        if total_count == 0:
            if not or_create:
                return None
            return self._bind(Resolution(self._create(context), created=True))

        if total_count - 1 > DUPLICATE_OBJECTS_THRESHOLD:
            raise AmbiguousQueryError(
                f"{total_count - 1} duplicate objects, is too many "
                f"(> {DUPLICATE_OBJECTS_THRESHOLD}). The query is way too ambiguous.",
                total_count=total_count,
                threshold=DUPLICATE_OBJECTS_THRESHOLD,
            )
        if total_count > 1:
            logger.warning(
                "The query %s resulted in %d objects. "
                "Consider if the query should be more specific.",
                self.query,
                total_count,
            )

        results: list[ChaosObject] = list(response.results)
        if not results:
            raise ServiceError(
                f"The service reported {total_count} objects but returned none.",
                layer="mcm",
            )

        obj = results[0]
        logger.info(
            "Reusing object from service, created %s with GUID = %s.",
            obj.creation_timestamp,
            obj.id,
        )
        return self._bind(Resolution(obj, duplicates=tuple(results[1:])))

    def _create(self, context: HarvestContext) -> ChaosObject:
        if self.object_type_id is None or self.folder_id is None:
            raise ValueError(
                "object_type_id and folder_id are required to create an object"
            )

        response = context.client.object_create(self.object_type_id, self.folder_id)
        ensure_success(response, "creating the object in the chaos service")
        if len(response.results) != 1:
            raise ServiceError(
                "The service didn't respond with a single object when creating it.",
                layer="mcm",
            )

        obj: ChaosObject = response.results[0]
        logger.info("Created a new object in the service with GUID = %s.", obj.id)
        return obj

    # ------------------------------------------------------------------
    # Commit
    # ------------------------------------------------------------------

    def commit(
        self, context: HarvestContext, parent: ObjectShadow | None = None
    ) -> ChaosObject | None:
        """Synchronise the shadow and everything it owns with the service.

        Returns:
            The bound object, or None when no object was resolved.

        Raises:
            ShadowCommitNotSupportedError: If *parent* is given.
            ServiceError: If any service call fails.
            AmbiguousQueryError: If the query matches too many objects.
        """
        logger.debug("Committing the shadow of an object.")
        if parent is not None:
            raise ShadowCommitNotSupportedError(
                "Committing related objects has not yet been implemented."
            )

        options = context.options
        if options.has_option("no-shadow-commit"):
            obj = self.get(context, or_create=False)
            if obj is not None:
                logger.info(
                    "Because the 'no-shadow-commit' option is set, this object "
                    "is not committed to CHAOS object '%s'.",
                    obj.id,
                )
            else:
                logger.info(
                    "Because the 'no-shadow-commit' option is set, this object "
                    "is not created as a CHAOS object."
                )
            return obj

        if options.has_option("require-files-on-objects") and not self.file_shadows:
            logger.info(
                "Object shadow skipped because 'require-files-on-objects' is set "
                "and no file shadows was attached."
            )
            self.skipped = True

        if self.skipped:
            self.get(context, or_create=False)
        else:
            self.get(context)
            self._commit_children(context)

        publisher = PublicationController(context.client, context.clock)
        obj = self.bound_object
        if not self.skipped:
            publisher.publish(obj, sorted(self.publish_accesspoint_guids))
        elif obj is not None:
            publisher.unpublish(
                obj,
                sorted(self.unpublish_accesspoint_guids),
                everywhere=self.unpublish_everywhere,
            )
        else:
            logger.info(
                "No need to unpublish as this external object is not represented in CHAOS."
            )

        for duplicate in self.duplicate_objects:
            publisher.unpublish(
                duplicate,
                sorted(self.unpublish_accesspoint_guids),
                everywhere=self.unpublish_everywhere,
            )

        return obj

    def _commit_children(self, context: HarvestContext) -> None:
        obj = self.bound_object

        for metadata_shadow in self.metadata_shadows:
            metadata_shadow.commit(context, self)

        file_line = "Committing files: "
        self.file_results = []
        for file_shadow in self.file_shadows:
            result = file_shadow.commit(context, self)
            self.file_results.append(result)
            file_line += result.status.marker

        committed_ids = {
            result.file_id
            for result in self.file_results
            if result.file_id is not None
        }
        self.deleted_file_ids = []
        for file in obj.files:
            if file.id in committed_ids:
                continue
            logger.debug("Deleting file #%d.", file.id)
            file_line += "-"
            response = context.client.file_delete(file.id)
            ensure_success(response, f"deleting file #{file.id}")
            self.deleted_file_ids.append(file.id)

        logger.info(file_line)

        # No cycle guard: a related shadow committed with a parent raises
        # before it recurses.
        for related_shadow in self.related_object_shadows:
            related_shadow.commit(context, self)

    def __str__(self) -> str:
        if self.bound_object is not None and self.bound_object.id:
            return self.bound_object.id
        if self.query:
            return f"[chaos object found from {self.query}]"
        return ""
