"""Processor contracts.

Processors turn an external object into shadow state. An
``ObjectProcessor`` creates the ``ObjectShadow``; every other processor
adds to an existing one.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from chaos_harvester.shadows.base import HarvestContext
from chaos_harvester.shadows.object import ObjectShadow


class Processor(ABC):
    """Adds to an object shadow from an external object."""

    def __init__(self, context: HarvestContext) -> None:
        self.context = context

    @abstractmethod
    def process(self, external_object: Any, shadow: ObjectShadow) -> Any:
        """Populate *shadow* from *external_object*."""


class ObjectProcessor(ABC):
    """Creates the object shadow for an external object.

    New shadows start from the folder, object type and access point
    defaults in the harvest options.
    """

    def __init__(self, context: HarvestContext) -> None:
        self.context = context

    @abstractmethod
    def generate_query(self, external_object: Any) -> str:
        """Object/Get query that finds this external object on the service."""

    def should_skip(self, external_object: Any) -> bool:
        return False

    def build_shadow(self, external_object: Any) -> ObjectShadow:
        options = self.context.options
        return ObjectShadow(
            query=self.generate_query(external_object),
            folder_id=options.folder_id,
            object_type_id=options.object_type_id,
            skipped=self.should_skip(external_object),
            unpublish_everywhere=options.unpublish_everywhere,
            publish_accesspoint_guids=set(options.publish_accesspoint_guids),
            unpublish_accesspoint_guids=set(options.unpublish_accesspoint_guids),
        )
