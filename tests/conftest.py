"""Shared pytest fixtures for chaos-harvester tests."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

import pytest
from dotenv import load_dotenv

from chaos_harvester.config import HarvestOptions
from chaos_harvester.core.models import (
    AccessPoint,
    ChaosFile,
    ChaosObject,
    MetadataRecord,
    MetadataSchema,
    ServiceResponse,
)
from chaos_harvester.shadows.base import HarvestContext

load_dotenv()

FIXED_NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


class FakeChaosClient:
    """In-memory ChaosClient replacement for testing.

    Objects are indexed by the query that finds them. Object/Create
    registers the new object under the last query seen, so a later
    Object/Get with that query finds it. Every call is recorded in
    ``calls``; a response placed in ``failures`` under a method name is
    returned instead of performing that call.
    """

    READ_METHODS = ("object_get", "metadata_schema_get")

    def __init__(self, schemas: dict[str, str] | None = None) -> None:
        self.objects: dict[str, ChaosObject] = {}
        self.index: dict[str, list[str]] = {}
        self.schemas: dict[str, str] = dict(schemas or {})
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.failures: dict[str, ServiceResponse] = {}
        self._object_seq = 0
        self._file_seq = 1000
        self._last_query: str | None = None

    # -- helpers --------------------------------------------------------

    def _next_object(self) -> tuple[str, datetime]:
        self._object_seq += 1
        created = datetime(2020, 1, 1, tzinfo=timezone.utc) + timedelta(
            minutes=self._object_seq
        )
        return f"obj-{self._object_seq}", created

    def _record(self, name: str, **kwargs: Any) -> ServiceResponse | None:
        self.calls.append((name, kwargs))
        return self.failures.get(name)

    def _replace(self, obj: ChaosObject, **update: Any) -> None:
        self.objects[obj.id] = obj.model_copy(update=update)

    def add_object(self, query: str, **fields: Any) -> ChaosObject:
        """Store an object that *query* finds."""
        object_id, created = self._next_object()
        fields.setdefault("id", object_id)
        fields.setdefault("creation_timestamp", created)
        obj = ChaosObject(**fields)
        self.objects[obj.id] = obj
        self.index.setdefault(query, []).append(obj.id)
        return obj

    def calls_to(self, name: str) -> list[dict[str, Any]]:
        return [kwargs for method, kwargs in self.calls if method == name]

    @property
    def mutating_calls(self) -> list[tuple[str, dict[str, Any]]]:
        return [c for c in self.calls if c[0] not in self.READ_METHODS]

    # -- ChaosClient ----------------------------------------------------

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
        failure = self._record(
            "object_get", query=query, sort=sort, page_size=page_size
        )
        if failure is not None:
            return failure
        self._last_query = query
        matches = sorted(
            (self.objects[i] for i in self.index.get(query, [])),
            key=lambda o: o.creation_timestamp,
        )
        start = page_index * page_size
        return ServiceResponse(
            total_count=len(matches),
            results=matches[start : start + page_size],
        )

    def object_create(
        self, object_type_id: int, folder_id: int
    ) -> ServiceResponse:
        failure = self._record(
            "object_create", object_type_id=object_type_id, folder_id=folder_id
        )
        if failure is not None:
            return failure
        object_id, created = self._next_object()
        obj = ChaosObject(
            id=object_id,
            object_type_id=object_type_id,
            folder_id=folder_id,
            creation_timestamp=created,
        )
        self.objects[obj.id] = obj
        if self._last_query is not None:
            self.index.setdefault(self._last_query, []).append(obj.id)
        return ServiceResponse(total_count=1, results=[obj])

    def object_set_publish_settings(
        self,
        object_guid: str,
        accesspoint_guid: str,
        start_date: datetime | None = None,
        end_date: datetime | None = None,
    ) -> ServiceResponse:
        failure = self._record(
            "object_set_publish_settings",
            object_guid=object_guid,
            accesspoint_guid=accesspoint_guid,
            start_date=start_date,
            end_date=end_date,
        )
        if failure is not None:
            return failure
        obj = self.objects[object_guid]
        access_points = [
            ap for ap in obj.access_points if ap.accesspoint_guid != accesspoint_guid
        ]
        access_points.append(
            AccessPoint(
                accesspoint_guid=accesspoint_guid,
                start_date=start_date,
                end_date=end_date,
            )
        )
        self._replace(obj, access_points=access_points)
        return ServiceResponse(total_count=1)

    def file_create(
        self,
        object_guid: str,
        format_id: int | None,
        destination_id: int | None,
        original_file_name: str,
        folder_path: str,
    ) -> ServiceResponse:
        failure = self._record(
            "file_create",
            object_guid=object_guid,
            format_id=format_id,
            destination_id=destination_id,
            original_file_name=original_file_name,
            folder_path=folder_path,
        )
        if failure is not None:
            return failure
        self._file_seq += 1
        file = ChaosFile(
            id=self._file_seq,
            original_file_name=original_file_name,
            folder_path=folder_path,
            format_id=format_id,
            destination_id=destination_id,
        )
        obj = self.objects[object_guid]
        self._replace(obj, files=[*obj.files, file])
        return ServiceResponse(total_count=1, results=[file])

    def file_delete(self, file_id: int) -> ServiceResponse:
        failure = self._record("file_delete", file_id=file_id)
        if failure is not None:
            return failure
        for obj in list(self.objects.values()):
            if any(f.id == file_id for f in obj.files):
                self._replace(
                    obj, files=[f for f in obj.files if f.id != file_id]
                )
        return ServiceResponse(total_count=1)

    def metadata_set(
        self,
        object_guid: str,
        schema_guid: str,
        language_code: str,
        revision_id: int | None,
        xml: str,
    ) -> ServiceResponse:
        failure = self._record(
            "metadata_set",
            object_guid=object_guid,
            schema_guid=schema_guid,
            language_code=language_code,
            revision_id=revision_id,
            xml=xml,
        )
        if failure is not None:
            return failure
        obj = self.objects[object_guid]
        metadatas = [
            m
            for m in obj.metadatas
            if (m.schema_guid, m.language_code) != (schema_guid, language_code)
        ]
        metadatas.append(
            MetadataRecord(
                schema_guid=schema_guid,
                language_code=language_code,
                revision_id=(revision_id or 0) + 1,
                xml=xml,
            )
        )
        self._replace(obj, metadatas=metadatas)
        return ServiceResponse(total_count=1)

    def metadata_schema_get(self, schema_guid: str) -> ServiceResponse:
        failure = self._record("metadata_schema_get", schema_guid=schema_guid)
        if failure is not None:
            return failure
        if schema_guid not in self.schemas:
            return ServiceResponse(total_count=0)
        schema = MetadataSchema(
            guid=schema_guid, schema_xml=self.schemas[schema_guid]
        )
        return ServiceResponse(total_count=1, results=[schema])


@pytest.fixture
def fake_client():
    """Empty in-memory CHAOS service."""
    return FakeChaosClient()


@pytest.fixture
def harvest_options():
    """Options with a folder, an object type and one publish access point."""
    return HarvestOptions(
        folder_id=7,
        object_type_id=36,
        publish_accesspoint_guids=["11111111-1111-1111-1111-111111111111"],
        unpublish_accesspoint_guids=["22222222-2222-2222-2222-222222222222"],
    )


@pytest.fixture
def context(fake_client, harvest_options):
    """HarvestContext bound to the fake client and a fixed clock."""
    return HarvestContext(
        client=fake_client,
        options=harvest_options,
        clock=lambda: FIXED_NOW,
    )
