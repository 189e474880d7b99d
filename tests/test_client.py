"""Tests for chaos_harvester.core.client.ensure_success()."""

import pytest

from chaos_harvester.core.client import ensure_success
from chaos_harvester.core.models import ServiceResponse
from chaos_harvester.exceptions import HarvesterError, ServiceError


def test_success_returns_response():
    response = ServiceResponse(total_count=1, results=["x"])

    assert ensure_success(response, "getting") is response


def test_general_failure():
    response = ServiceResponse(was_success=False, error_message="503")

    with pytest.raises(ServiceError) as exc_info:
        ensure_success(response, "getting the object")

    assert str(exc_info.value) == "General error when getting the object: 503"
    assert exc_info.value.layer == "general"
    assert isinstance(exc_info.value, HarvesterError)


def test_mcm_failure():
    response = ServiceResponse(mcm_success=False, mcm_error_message="no folder")

    with pytest.raises(ServiceError) as exc_info:
        ensure_success(response, "creating the object")

    assert str(exc_info.value) == "MCM error when creating the object: no folder"
    assert exc_info.value.layer == "mcm"


def test_general_layer_checked_first():
    response = ServiceResponse(was_success=False, mcm_success=False)

    with pytest.raises(ServiceError, match="General error when x: Unknown error"):
        ensure_success(response, "x")


def test_fake_client_satisfies_protocol(fake_client):
    from chaos_harvester.core.client import ChaosClient

    client: ChaosClient = fake_client
    assert client.object_get("q").total_count == 0
