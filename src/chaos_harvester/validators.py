"""
Input validation for values that end up in CHAOS service calls.

Validators return ``(is_valid, error_message)`` tuples so callers decide
whether a bad value is fatal.
"""

import re

_GUID_PATTERN = re.compile(
    r"^[0-9a-fA-F]{8}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{4}-[0-9a-fA-F]{12}$"
)


def format_validation_error(field_name: str, reason: str) -> str:
    """
    Generate consistent error message for validation failures.

    Args:
        field_name: Human-readable field name (e.g., "Query")
        reason: Description of validation failure (e.g., "cannot be empty")

    Returns:
        Formatted error message string
    """
    return f"{field_name} {reason}"


def validate_query(query: str | None) -> tuple[bool, str]:
    """
    Validate an object query before it is sent to Object/Get.

    The query is otherwise opaque and is passed to the service as is.

    Validation rules:
        - Cannot be None, empty or whitespace-only
    """
    if query is None or not query.strip():
        return (False, format_validation_error("Query", "cannot be empty"))

    return (True, "")


def validate_accesspoint_guid(guid: str) -> tuple[bool, str]:
    """
    Validate an access point GUID.

    Validation rules:
        - Cannot be empty
        - Must be a hyphenated 8-4-4-4-12 hex GUID
    """
    if not guid or not guid.strip():
        return (
            False,
            format_validation_error("Access point GUID", "cannot be empty"),
        )

    if not _GUID_PATTERN.match(guid.strip()):
        return (
            False,
            format_validation_error(
                "Access point GUID", f"'{guid}' is not a valid GUID"
            ),
        )

    return (True, "")
