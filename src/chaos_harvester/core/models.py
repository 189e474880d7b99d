"""Pydantic models for records exchanged with the CHAOS service.

- ``AccessPoint``: a publication channel an object is (or was) visible on.
- ``ChaosFile``: a file reference attached to an object.
- ``MetadataRecord``: one metadata document stored on an object.
- ``ChaosObject``: an object record with its expanded sub-resources.
- ``MetadataSchema``: a metadata schema definition.
- ``ServiceResponse``: the outcome of a single service call.

Record models are frozen; the harvester never edits what the service
returned, it issues new calls instead.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field


class AccessPoint(BaseModel):
    """Publish window of an object on one access point."""

    accesspoint_guid: str
    start_date: datetime | None = None
    end_date: datetime | None = None

    model_config = {"frozen": True}


class ChaosFile(BaseModel):
    """A file attached to an object."""

    id: int
    original_file_name: str = ""
    folder_path: str = ""
    format_id: int | None = None
    destination_id: int | None = None

    model_config = {"frozen": True}


class MetadataRecord(BaseModel):
    """A metadata document stored on an object."""

    schema_guid: str
    language_code: str = "da"
    revision_id: int | None = None
    xml: str = ""

    model_config = {"frozen": True}


class ChaosObject(BaseModel):
    """An object record as returned by Object/Get or Object/Create.

    Attributes:
        id: Object GUID.
        object_type_id: Numeric object type.
        folder_id: Folder the object was created in.
        creation_timestamp: When the service created the object.
        access_points: Current publish settings, per access point.
        files: Files attached to the object.
        metadatas: Metadata documents attached to the object.
    """

    id: str
    object_type_id: int | None = None
    folder_id: int | None = None
    creation_timestamp: datetime | None = None
    access_points: list[AccessPoint] = Field(default_factory=list)
    files: list[ChaosFile] = Field(default_factory=list)
    metadatas: list[MetadataRecord] = Field(default_factory=list)

    model_config = {"frozen": True}

    def find_metadata(
        self, schema_guid: str, language_code: str
    ) -> MetadataRecord | None:
        """Return the metadata record for a schema and language, if any."""
        for metadata in self.metadatas:
            if (
                metadata.schema_guid == schema_guid
                and metadata.language_code == language_code
            ):
                return metadata
        return None


class MetadataSchema(BaseModel):
    """A metadata schema as returned by MetadataSchema/Get."""

    guid: str
    name: str = ""
    schema_xml: str

    model_config = {"frozen": True}


class ServiceResponse(BaseModel):
    """Outcome of one call to the service.

    A call can fail on two independent layers: the general (transport)
    layer and the MCM module layer. Both flags must be checked, see
    :func:`chaos_harvester.core.client.ensure_success`.

    Attributes:
        was_success: General-layer success flag.
        error_message: General-layer error message, when it failed.
        mcm_success: MCM-layer success flag.
        mcm_error_message: MCM-layer error message, when it failed.
        total_count: Total number of matching results on the service.
        results: The returned page of results.
    """

    was_success: bool = True
    error_message: str | None = None
    mcm_success: bool = True
    mcm_error_message: str | None = None
    total_count: int = 0
    results: list[Any] = Field(default_factory=list)

    model_config = {"frozen": True}
