"""Processors that build object shadows from external objects."""

from .base import ObjectProcessor, Processor
from .metadata import MetadataOutcome, MetadataProcessor, MetadataResult

__all__ = [
    "MetadataOutcome",
    "MetadataProcessor",
    "MetadataResult",
    "ObjectProcessor",
    "Processor",
]
