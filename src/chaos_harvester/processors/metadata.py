"""Metadata processors: generate a document, validate it, attach it.

A ``MetadataProcessor`` is bound to one metadata schema. ``process()``
generates a document for an external object and, when validation is on,
checks it against the schema fetched from the service. A document that
does not validate is not attached; the processor reports
``MetadataOutcome.VALIDATION_FAILED`` instead of raising so the rest of
the object can still be harvested.
"""

from __future__ import annotations

import logging
from abc import abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any

from lxml import etree

from chaos_harvester.core.models import MetadataSchema
from chaos_harvester.exceptions import MetadataSchemaError
from chaos_harvester.shadows.base import HarvestContext
from chaos_harvester.shadows.metadata import MetadataShadow
from chaos_harvester.shadows.object import ObjectShadow

from .base import Processor

logger = logging.getLogger(__name__)


class MetadataOutcome(str, Enum):
    ATTACHED = "attached"
    VALIDATION_FAILED = "validation_failed"


@dataclass(frozen=True)
class MetadataResult:
    """Result of running a metadata processor on one object shadow.

    Attributes:
        outcome: Whether the document was attached.
        shadow: The object shadow that was processed.
        metadata: The attached metadata shadow, if any.
        errors: Schema validation messages when validation failed.
    """

    outcome: MetadataOutcome
    shadow: ObjectShadow
    metadata: MetadataShadow | None = None
    errors: tuple[str, ...] = ()

    @property
    def attached(self) -> bool:
        return self.outcome == MetadataOutcome.ATTACHED


class MetadataProcessor(Processor):
    """Generate and attach metadata for one schema.

    Args:
        context: Harvest context; its client fetches the schema.
        schema_guid: Schema the generated documents conform to.
        validate: Validate documents before attaching them. Defaults to
            the ``validate_metadata`` harvest option.
        language_code: Language of the generated documents.
    """

    def __init__(
        self,
        context: HarvestContext,
        schema_guid: str,
        validate: bool | None = None,
        language_code: str = "da",
    ) -> None:
        super().__init__(context)
        self.schema_guid = schema_guid
        self.language_code = language_code
        self.validate = (
            context.options.validate_metadata if validate is None else validate
        )
        self._schema_source: str | None = None
        self._schema: etree.XMLSchema | None = None

    def fetch_schema(self) -> MetadataSchema:
        """Fetch the schema from the service and keep its XML source.

        Raises:
            MetadataSchemaError: If the call fails or returns no schema.
        """
        logger.debug("Fetching schema: %s", self.schema_guid)
        response = self.context.client.metadata_schema_get(self.schema_guid)
        if (
            not response.was_success
            or not response.mcm_success
            or len(response.results) < 1
        ):
            raise MetadataSchemaError(
                "Failed to fetch XML schemas from the Chaos system, "
                f"for schema GUID '{self.schema_guid}'."
            )
        schema: MetadataSchema = response.results[0]
        self._schema_source = schema.schema_xml
        self._schema = None
        return schema

    def set_validate(self, validate: bool) -> None:
        self.validate = validate

    def _compiled_schema(self) -> etree.XMLSchema:
        if self._schema is not None:
            return self._schema
        if self._schema_source is None:
            raise MetadataSchemaError(
                f"Schema '{self.schema_guid}' must be fetched before validating."
            )
        try:
            root = etree.fromstring(self._schema_source.encode("utf-8"))
            self._schema = etree.XMLSchema(root)
        except (etree.XMLSyntaxError, etree.XMLSchemaParseError) as exc:
            raise MetadataSchemaError(
                f"Schema '{self.schema_guid}' is not a valid XML schema: {exc}"
            ) from exc
        return self._schema

    def process(
        self, external_object: Any, shadow: ObjectShadow
    ) -> MetadataResult:
        logger.debug("%s is processing.", type(self).__name__)

        document = self.generate_metadata(external_object, shadow)
        metadata = MetadataShadow(
            self.schema_guid, document, language_code=self.language_code
        )

        if self.validate:
            schema = self._compiled_schema()
            if not schema.validate(document):
                errors = tuple(entry.message for entry in schema.error_log)
                logger.debug(
                    "Metadata for schema %s did not validate, not attached to %s: %s",
                    self.schema_guid,
                    shadow,
                    "; ".join(errors),
                )
                return MetadataResult(
                    MetadataOutcome.VALIDATION_FAILED, shadow, errors=errors
                )

        shadow.metadata_shadows.append(metadata)
        return MetadataResult(MetadataOutcome.ATTACHED, shadow, metadata)

    @abstractmethod
    def generate_metadata(
        self, external_object: Any, shadow: ObjectShadow
    ) -> etree._Element:
        """Build the metadata document for *external_object*."""
