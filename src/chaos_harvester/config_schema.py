"""Configuration file schema for chaos_harvester.

Defines Pydantic models for the YAML config structure with dedicated
sections for harvest behaviour and logging, plus an adapter that turns
the ``harvest`` section into runtime ``HarvestOptions``.

Usage:
    from chaos_harvester.config_schema import build_config, to_options

    raw = load_hierarchical_config()
    config = build_config(raw)
    options = to_options(config, cli_overrides={"no_shadow_commit": True})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from .config import HarvestOptions

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Section models
# ---------------------------------------------------------------------------


class HarvestConfig(BaseModel):
    """Defaults applied to every object shadow, and runtime switches.

    All fields are optional so env vars and CLI overrides can supply
    them at runtime instead.
    """

    folder_id: int | None = Field(
        default=None, ge=0, description="Folder new objects are created in"
    )
    object_type_id: int | None = Field(
        default=None, ge=0, description="Object type of new objects"
    )
    publish_accesspoint_guids: list[str] = Field(
        default_factory=list,
        description="Access points non-skipped objects are published on",
    )
    unpublish_accesspoint_guids: list[str] = Field(
        default_factory=list,
        description="Access points skipped objects are unpublished from",
    )
    unpublish_everywhere: bool = Field(
        default=False,
        description="Unpublish skipped objects from every access point they are on",
    )
    no_shadow_commit: bool = Field(
        default=False,
        description="Resolve objects only, never modify the service",
    )
    require_files_on_objects: bool = Field(
        default=False,
        description="Skip objects that have no file shadows",
    )
    validate_metadata: bool = Field(
        default=False,
        description="Validate generated metadata against its schema",
    )

    model_config = {"frozen": True}


class LoggingConfig(BaseModel):
    """Logging configuration.

    Attributes:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        file: Optional log file path.
        format: "text" or "json".
    """

    level: str = Field(default="INFO", description="Log level")
    file: str | None = Field(default=None, description="Log file path")
    format: Literal["text", "json"] = Field(
        default="text", description="Log line format"
    )

    model_config = {"frozen": True}


# ---------------------------------------------------------------------------
# Top-level config
# ---------------------------------------------------------------------------


class HarvesterConfig(BaseModel):
    """Top-level configuration.

    Every section has defaults, so ``HarvesterConfig()`` (zero-config)
    is always valid.
    """

    harvest: HarvestConfig = Field(default_factory=HarvestConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"frozen": True}


def build_config(raw_data: dict) -> HarvesterConfig:
    """Construct a ``HarvesterConfig`` from the raw dict returned by
    ``load_hierarchical_config()``.

    Missing sections get defaults.

    Args:
        raw_data: Merged configuration dictionary.

    Returns:
        Validated ``HarvesterConfig`` instance.
    """
    if not raw_data:
        return HarvesterConfig()

    return HarvesterConfig(**raw_data)


def to_options(
    config: HarvesterConfig,
    cli_overrides: dict | None = None,
) -> HarvestOptions:
    """Resolve runtime ``HarvestOptions`` using the ``harvest`` section as
    the YAML fallback layer.

    Env vars and CLI overrides still win, see ``config.load_options()``.
    """
    # Import here to avoid a cycle (config.py is imported by callers of this module)
    from .config import load_options

    return load_options(
        cli_overrides=cli_overrides,
        yaml_fallbacks=config.harvest.model_dump(),
    )
