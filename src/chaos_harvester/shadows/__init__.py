"""Shadows: in-memory staging of objects, metadata and files.

- ``base``        -- ``Shadow`` and the ``HarvestContext`` commits run with.
- ``object``      -- ``ObjectShadow``: get-or-create, duplicates, commit cascade.
- ``publication`` -- ``PublicationController``: publish / unpublish.
- ``metadata``    -- ``MetadataShadow``.
- ``file``        -- ``FileShadow``.
"""

from .base import HarvestContext, Shadow
from .file import FileCommitResult, FileShadow, FileStatus
from .metadata import MetadataShadow, MetadataStatus
from .object import DUPLICATE_OBJECTS_THRESHOLD, ObjectShadow, Resolution
from .publication import PublicationController, unpublish_targets

__all__ = [
    "DUPLICATE_OBJECTS_THRESHOLD",
    "FileCommitResult",
    "FileShadow",
    "FileStatus",
    "HarvestContext",
    "MetadataShadow",
    "MetadataStatus",
    "ObjectShadow",
    "PublicationController",
    "Resolution",
    "Shadow",
    "unpublish_targets",
]
