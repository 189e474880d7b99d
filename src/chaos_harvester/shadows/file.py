"""Shadow of a file reference pending attachment to an object."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING

from chaos_harvester.core.models import ChaosFile, ChaosObject

from .base import HarvestContext, Shadow

if TYPE_CHECKING:
    from .object import ObjectShadow

logger = logging.getLogger(__name__)


class FileStatus(str, Enum):
    """Outcome of committing one file shadow."""

    REUSED = "reused"
    CREATED = "created"
    FAILED = "failed"

    @property
    def marker(self) -> str:
        """Character used for this outcome in the per-object progress line."""
        return {"reused": ".", "created": "+"}.get(self.value, "?")


@dataclass(frozen=True)
class FileCommitResult:
    status: FileStatus
    file_id: int | None = None
    error: str | None = None


class FileShadow(Shadow):
    """A file the object should have once it is committed.

    Files are matched on original file name, folder path, format and
    destination; a matching file already on the object is reused.
    """

    def __init__(
        self,
        original_file_name: str,
        folder_path: str = "",
        format_id: int | None = None,
        destination_id: int | None = None,
    ) -> None:
        self.original_file_name = original_file_name
        self.folder_path = folder_path
        self.format_id = format_id
        self.destination_id = destination_id
        self.file_id: int | None = None

    def matches(self, file: ChaosFile) -> bool:
        return (
            file.original_file_name == self.original_file_name
            and file.folder_path == self.folder_path
            and file.format_id == self.format_id
            and file.destination_id == self.destination_id
        )

    def find_existing(self, obj: ChaosObject) -> ChaosFile | None:
        for file in obj.files:
            if self.matches(file):
                return file
        return None

    def commit(
        self, context: HarvestContext, parent: ObjectShadow | None = None
    ) -> FileCommitResult:
        """Reuse a matching file on the parent's object or create one.

        A failed File/Create is logged and reported as ``FAILED``; it does
        not abort the object.
        """
        if parent is None:
            raise ValueError("A file shadow is committed through its object shadow")

        obj = parent.get(context)
        existing = self.find_existing(obj)
        if existing is not None:
            self.file_id = existing.id
            return FileCommitResult(FileStatus.REUSED, file_id=existing.id)

        response = context.client.file_create(
            obj.id,
            self.format_id,
            self.destination_id,
            self.original_file_name,
            self.folder_path,
        )
        if not response.was_success or not response.mcm_success or not response.results:
            error = (
                response.error_message
                or response.mcm_error_message
                or "no file returned"
            )
            logger.error(
                "Could not create file %s on %s: %s",
                self.original_file_name,
                obj.id,
                error,
            )
            return FileCommitResult(FileStatus.FAILED, error=error)

        created: ChaosFile = response.results[0]
        self.file_id = created.id
        return FileCommitResult(FileStatus.CREATED, file_id=created.id)

    def __str__(self) -> str:
        return f"{self.folder_path}/{self.original_file_name}".lstrip("/")
