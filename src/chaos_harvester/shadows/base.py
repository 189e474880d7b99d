"""Shared base for shadows and the context they commit with."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from chaos_harvester.config import HarvestOptions
from chaos_harvester.core.client import ChaosClient


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class HarvestContext:
    """Collaborators threaded through every commit.

    Attributes:
        client: Client for the CHAOS service.
        options: Runtime options of the harvest run.
        clock: Returns the current time; publish windows are derived from it.
    """

    client: ChaosClient
    options: HarvestOptions = field(default_factory=HarvestOptions)
    clock: Callable[[], datetime] = utc_now


class Shadow(ABC):
    """In-memory stand-in for an entity pending synchronisation.

    A shadow is built up by processors and committed once.
    """

    @abstractmethod
    def commit(self, context: HarvestContext, parent: Any = None) -> Any:
        """Synchronise the shadow with the service."""
