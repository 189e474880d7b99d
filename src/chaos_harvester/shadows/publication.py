"""Publish and unpublish objects on access points."""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timedelta

from chaos_harvester.core.client import ChaosClient, ensure_success
from chaos_harvester.core.models import ChaosObject

logger = logging.getLogger(__name__)

# Publish windows open this long before the local clock reads now.
PUBLISH_LEAD_TIME = timedelta(days=1)


class PublicationController:
    """Set or clear the publish window of objects.

    Args:
        client: Client used for Object/SetPublishSettings.
        clock: Returns the current time.
    """

    def __init__(
        self, client: ChaosClient, clock: Callable[[], datetime]
    ) -> None:
        self.client = client
        self.clock = clock

    def publish(
        self, obj: ChaosObject, accesspoint_guids: Iterable[str]
    ) -> None:
        """Publish *obj* on every access point, open-ended from yesterday.

        Raises:
            ServiceError: If any call fails; later access points are not touched.
        """
        start = self.clock() - PUBLISH_LEAD_TIME
        for accesspoint_guid in accesspoint_guids:
            logger.info(
                "Publishing %s to accesspoint = %s with startDate = %s",
                obj.id,
                accesspoint_guid,
                start.strftime("%Y-%m-%d %H:%M:%S"),
            )
            response = self.client.object_set_publish_settings(
                obj.id, accesspoint_guid, start_date=start
            )
            ensure_success(response, "setting publish settings")

    def unpublish(
        self,
        obj: ChaosObject,
        accesspoint_guids: Iterable[str],
        everywhere: bool = False,
    ) -> list[str]:
        """Clear the publish window of *obj*.

        The access points cleared are the ones the object currently
        reports (only when *everywhere* is set) followed by
        *accesspoint_guids*, each at most once.

        Returns:
            The access point GUIDs that were cleared, in call order.

        Raises:
            ServiceError: If any call fails.
        """
        targets = unpublish_targets(obj, accesspoint_guids, everywhere)
        for accesspoint_guid in targets:
            logger.info(
                "Unpublishing %s from accesspoint = %s",
                obj.id,
                accesspoint_guid,
            )
            response = self.client.object_set_publish_settings(
                obj.id, accesspoint_guid
            )
            ensure_success(response, "setting publish settings")
        return targets


def unpublish_targets(
    obj: ChaosObject,
    accesspoint_guids: Iterable[str],
    everywhere: bool,
) -> list[str]:
    """Union of the object's access points (if *everywhere*) and the explicit ones."""
    candidates: list[str] = []
    if everywhere:
        candidates.extend(ap.accesspoint_guid for ap in obj.access_points)
    candidates.extend(accesspoint_guids)
    return list(dict.fromkeys(candidates))
