"""Exception hierarchy for chaos-harvester."""

from __future__ import annotations


class HarvesterError(Exception):
    """Base exception for all harvester errors."""


class ConfigError(HarvesterError):
    """Configuration loading or validation failure."""


class ServiceError(HarvesterError):
    """The service answered a call with a general or MCM failure.

    Attributes:
        layer: ``"general"`` for transport-level failures, ``"mcm"`` for
            failures reported by the MCM module itself.
    """

    def __init__(self, message: str, *, layer: str = "general") -> None:
        super().__init__(message)
        self.layer = layer


class AmbiguousQueryError(HarvesterError):
    """An object query matched too many objects to pick one."""

    def __init__(self, message: str, *, total_count: int, threshold: int) -> None:
        super().__init__(message)
        self.total_count = total_count
        self.threshold = threshold


class ShadowCommitNotSupportedError(HarvesterError, NotImplementedError):
    """The requested shadow commit is not implemented."""


class ShadowStateError(HarvesterError):
    """A shadow was moved into a state it cannot enter twice."""


class MetadataSchemaError(HarvesterError):
    """A metadata schema could not be fetched or parsed."""
