"""Runtime options for a harvest run.

Reads harvest options from CLI overrides, environment variables,
.env files, and YAML config file fallbacks.

Precedence (highest to lowest):
    CLI overrides > Environment variables > .env file > YAML config > Built-in defaults

Environment variables:
    CHAOS_FOLDER_ID: Folder new objects are created in (optional)
    CHAOS_OBJECT_TYPE_ID: Object type of new objects (optional)
    CHAOS_NO_SHADOW_COMMIT: Resolve objects only, never modify the service (default: false)
    CHAOS_REQUIRE_FILES_ON_OBJECTS: Skip objects without file shadows (default: false)
    CHAOS_VALIDATE_METADATA: Validate metadata against its schema (default: false)
"""

import logging
import os
from dataclasses import dataclass, field

from .exceptions import ConfigError
from .validators import validate_accesspoint_guid

logger = logging.getLogger(__name__)

_OPTION_FIELDS = {
    "no-shadow-commit": "no_shadow_commit",
    "require-files-on-objects": "require_files_on_objects",
    "validate-metadata": "validate_metadata",
}


@dataclass
class HarvestOptions:
    folder_id: int | None = None
    object_type_id: int | None = None
    publish_accesspoint_guids: list[str] = field(default_factory=list)
    unpublish_accesspoint_guids: list[str] = field(default_factory=list)
    unpublish_everywhere: bool = False
    no_shadow_commit: bool = False
    require_files_on_objects: bool = False
    validate_metadata: bool = False

    def has_option(self, name: str) -> bool:
        """Return True when the hyphenated runtime option *name* is set."""
        attr = _OPTION_FIELDS.get(name)
        if attr is None:
            return False
        return bool(getattr(self, attr))


def _get_bool_env(key: str) -> bool | None:
    """Return True/False from env var, or None if unset."""
    val = os.getenv(key)
    if val is None:
        return None
    return val.lower() in ("true", "1", "yes", "on")


def _parse_int(source: str, val: object) -> int:
    try:
        return int(val)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid {source} '{val}': must be a number") from None


def _get_int_env(key: str) -> int | None:
    val = os.getenv(key)
    if val is None or not val.strip():
        return None
    return _parse_int(key, val)


def validate_options(options: HarvestOptions) -> None:
    """Validate option values and raise ConfigError if invalid.

    Args:
        options: HarvestOptions instance to validate.

    Raises:
        ConfigError: If an id is negative or an access point GUID is malformed.
    """
    for name in ("folder_id", "object_type_id"):
        value = getattr(options, name)
        if value is not None and value < 0:
            raise ConfigError(f"Invalid {name} {value}: must not be negative")

    for guid in (
        *options.publish_accesspoint_guids,
        *options.unpublish_accesspoint_guids,
    ):
        is_valid, error_msg = validate_accesspoint_guid(guid)
        if not is_valid:
            raise ConfigError(error_msg)

    if options.no_shadow_commit:
        logger.warning(
            "no-shadow-commit is set: objects are resolved but the service is not modified."
        )


def load_options(
    cli_overrides: dict | None = None,
    yaml_fallbacks: dict | None = None,
) -> HarvestOptions:
    """Load harvest options with unified precedence.

    Resolution order for each field (highest to lowest):
        CLI override > env var / .env > yaml_fallbacks > built-in default

    The caller is responsible for calling ``load_dotenv()`` before this
    function so that .env values are available via ``os.getenv()``.

    Args:
        cli_overrides: Dict keyed by ``HarvestOptions`` field name. Boolean
            flags only override when True.
        yaml_fallbacks: Dict of values from the YAML config ``harvest`` section.

    Returns:
        Validated HarvestOptions instance.

    Raises:
        ConfigError: If a value cannot be parsed or is invalid.
    """
    cli = cli_overrides or {}
    fb = yaml_fallbacks or {}

    # --- Numeric fields: CLI > env > YAML > default ---

    def resolve_int(name: str, env_key: str) -> int | None:
        if cli.get(name) is not None:
            return _parse_int(name, cli[name])
        env_val = _get_int_env(env_key)
        if env_val is not None:
            return env_val
        if fb.get(name) is not None:
            return _parse_int(name, fb[name])
        return None

    # --- Boolean fields: CLI flag > env > YAML > default ---

    def resolve_bool(name: str, env_key: str) -> bool:
        if cli.get(name):
            return True
        env_val = _get_bool_env(env_key)
        if env_val is not None:
            return env_val
        return bool(fb.get(name, False))

    options = HarvestOptions(
        folder_id=resolve_int("folder_id", "CHAOS_FOLDER_ID"),
        object_type_id=resolve_int("object_type_id", "CHAOS_OBJECT_TYPE_ID"),
        publish_accesspoint_guids=list(
            cli.get("publish_accesspoint_guids")
            or fb.get("publish_accesspoint_guids")
            or []
        ),
        unpublish_accesspoint_guids=list(
            cli.get("unpublish_accesspoint_guids")
            or fb.get("unpublish_accesspoint_guids")
            or []
        ),
        unpublish_everywhere=bool(
            cli.get("unpublish_everywhere")
            or fb.get("unpublish_everywhere", False)
        ),
        no_shadow_commit=resolve_bool(
            "no_shadow_commit", "CHAOS_NO_SHADOW_COMMIT"
        ),
        require_files_on_objects=resolve_bool(
            "require_files_on_objects", "CHAOS_REQUIRE_FILES_ON_OBJECTS"
        ),
        validate_metadata=resolve_bool(
            "validate_metadata", "CHAOS_VALIDATE_METADATA"
        ),
    )

    validate_options(options)

    return options
