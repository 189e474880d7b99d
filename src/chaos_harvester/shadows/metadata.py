"""Shadow of a metadata document pending attachment to an object."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING

from lxml import etree

from chaos_harvester.core.client import ensure_success
from chaos_harvester.core.models import MetadataRecord

from .base import HarvestContext, Shadow

if TYPE_CHECKING:
    from .object import ObjectShadow

logger = logging.getLogger(__name__)


class MetadataStatus(str, Enum):
    """What committing a metadata shadow did."""

    SET = "set"
    UNCHANGED = "unchanged"


def _normalize_xml(xml: str) -> str | None:
    try:
        return etree.tostring(etree.fromstring(xml.encode("utf-8")), encoding="unicode")
    except etree.XMLSyntaxError:
        return None


class MetadataShadow(Shadow):
    """One metadata document for one schema and language.

    Args:
        schema_guid: Metadata schema the document conforms to.
        document: Root element of the generated document.
        language_code: Language of the document.
    """

    def __init__(
        self,
        schema_guid: str,
        document: etree._Element,
        language_code: str = "da",
    ) -> None:
        self.schema_guid = schema_guid
        self.document = document
        self.language_code = language_code

    @property
    def xml(self) -> str:
        return etree.tostring(self.document, encoding="unicode")

    def commit(
        self, context: HarvestContext, parent: ObjectShadow | None = None
    ) -> MetadataStatus:
        """Store the document on the parent's object unless it is already there.

        Raises:
            ValueError: If there is no parent object shadow.
            ServiceError: If Metadata/Set fails.
        """
        if parent is None:
            raise ValueError("A metadata shadow is committed through its object shadow")

        obj = parent.get(context)
        existing: MetadataRecord | None = obj.find_metadata(
            self.schema_guid, self.language_code
        )
        xml = self.xml

        if existing is not None and _normalize_xml(existing.xml) == xml:
            logger.debug(
                "Metadata %s (%s) on %s is unchanged",
                self.schema_guid,
                self.language_code,
                obj.id,
            )
            return MetadataStatus.UNCHANGED

        revision_id = existing.revision_id if existing is not None else None
        logger.debug(
            "Setting metadata %s (%s) on %s, revision %s",
            self.schema_guid,
            self.language_code,
            obj.id,
            revision_id,
        )
        response = context.client.metadata_set(
            obj.id, self.schema_guid, self.language_code, revision_id, xml
        )
        ensure_success(response, "setting metadata")
        return MetadataStatus.SET
