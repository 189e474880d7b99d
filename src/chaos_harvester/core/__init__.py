"""Service client contract and record models shared by shadows and processors."""

from .client import ChaosClient, ensure_success
from .models import (
    AccessPoint,
    ChaosFile,
    ChaosObject,
    MetadataRecord,
    MetadataSchema,
    ServiceResponse,
)

__all__ = [
    "AccessPoint",
    "ChaosClient",
    "ChaosFile",
    "ChaosObject",
    "MetadataRecord",
    "MetadataSchema",
    "ServiceResponse",
    "ensure_success",
]
