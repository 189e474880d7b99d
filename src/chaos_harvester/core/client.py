"""Contract for the CHAOS service client and the response check every call goes through."""

from datetime import datetime
from typing import Protocol

from ..exceptions import ServiceError
from .models import ServiceResponse


class ChaosClient(Protocol):
    """Calls the harvester makes against the CHAOS service.

    Implementations own the transport. Every method returns a
    ``ServiceResponse`` and never raises for service-side failures;
    callers check the response with :func:`ensure_success`.
    """

    def object_get(
        self,
        query: str,
        sort: str | None = None,
        accesspoint_guid: str | None = None,
        page_index: int = 0,
        page_size: int = 10,
        include_metadata: bool = False,
        include_files: bool = False,
        include_object_relations: bool = False,
        include_accesspoints: bool = False,
    ) -> ServiceResponse:
        """
        Query objects. Results are ``ChaosObject`` instances.
        """
        ...

    def object_create(
        self, object_type_id: int, folder_id: int
    ) -> ServiceResponse:
        """
        Create an empty object. Results hold the created ``ChaosObject``.
        """
        ...

    def object_set_publish_settings(
        self,
        object_guid: str,
        accesspoint_guid: str,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> ServiceResponse:
        """
        Set the publish window of an object on an access point.
        Omitting ``start_date`` unpublishes the object there.
        """
        ...

    def file_create(
        self,
        object_guid: str,
        format_id: int | None,
        destination_id: int | None,
        original_file_name: str,
        folder_path: str,
    ) -> ServiceResponse:
        """
        Attach a file to an object. Results hold the created ``ChaosFile``.
        """
        ...

    def file_delete(self, file_id: int) -> ServiceResponse:
        """
        Delete a file. There is no undo.
        """
        ...

    def metadata_set(
        self,
        object_guid: str,
        schema_guid: str,
        language_code: str,
        revision_id: int | None,
        xml: str,
    ) -> ServiceResponse:
        """
        Store a metadata document on an object.
        """
        ...

    def metadata_schema_get(self, schema_guid: str) -> ServiceResponse:
        """
        Fetch a metadata schema. Results are ``MetadataSchema`` instances.
        """
        ...


def ensure_success(response: ServiceResponse, action: str) -> ServiceResponse:
    """
    Raise if either layer of a service response reports a failure.

    Args:
        response: Response returned by a ``ChaosClient`` call.
        action: What was attempted, e.g. "getting the object".

    Returns:
        The response, for chaining.

    Raises:
        ServiceError: With ``layer="general"`` or ``layer="mcm"``.
    """
    if not response.was_success:
        raise ServiceError(
            f"General error when {action}: "
            f"{response.error_message or 'Unknown error'}",
            layer="general",
        )
    if not response.mcm_success:
        raise ServiceError(
            f"MCM error when {action}: "
            f"{response.mcm_error_message or 'Unknown error'}",
            layer="mcm",
        )
    return response
