"""Tests for the IBM Cloud client wrapper, with the SDK services mocked."""
from unittest import mock

import pytest
import requests
from ibm_cloud_sdk_core import ApiException

from ic_secretgen.secrets.domains.errors import KeyLookupError, SessionError
from ic_secretgen.secrets.domains.ibm_client import IBMCloudClient
from ic_secretgen.secrets.domains.models import ResourceInstance, ServiceKey


def detailed_response(result):
    response = mock.Mock()
    response.get_result.return_value = result
    return response


@pytest.fixture
def manager():
    return mock.Mock()


@pytest.fixture
def controller():
    return mock.Mock()


@pytest.fixture
def client(manager, controller):
    return IBMCloudClient(
        "test-key",
        authenticator=mock.Mock(),
        resource_manager=manager,
        resource_controller=controller,
    )


class TestAuthentication:
    """Test suite for session setup."""

    def test_authenticate_requests_token(self, client):
        """Test that authenticate requests an IAM token."""
        client.authenticate()
        client.authenticator.token_manager.get_token.assert_called_once_with()

    def test_rejected_api_key_raises_session_error(self, client):
        """Test that a rejected API key raises SessionError."""
        client.authenticator.token_manager.get_token.side_effect = ApiException(400, message="Provided API key could not be found")

        with pytest.raises(SessionError, match="could not be found"):
            client.authenticate()

    def test_network_failure_raises_session_error(self, client):
        """Test that an unreachable IAM endpoint raises SessionError."""
        client.authenticator.token_manager.get_token.side_effect = requests.ConnectionError("unreachable")

        with pytest.raises(SessionError, match="unreachable"):
            client.authenticate()

    def test_empty_api_key_raises_session_error(self):
        """Test that an empty API key raises SessionError."""
        with pytest.raises(SessionError):
            IBMCloudClient("").authenticate()


class TestLookups:
    """Test suite for group, instance and key lookups."""

    def test_find_resource_groups(self, client, manager):
        """Test that groups are listed by account and name."""
        manager.list_resource_groups.return_value = detailed_response(
            {"resources": [{"id": "rg-123", "name": "prod-rg"}]}
        )

        groups = client.find_resource_groups("acc", "prod-rg")

        assert groups == [{"id": "rg-123", "name": "prod-rg"}]
        manager.list_resource_groups.assert_called_once_with(account_id="acc", name="prod-rg")

    def test_list_instances(self, client, controller):
        """Test that instances are listed by name and group ID."""
        controller.list_resource_instances.return_value = detailed_response({
            "resources": [{"crn": "crn:1", "region_id": "us-south", "name": "my-redis"}],
        })

        instances = client.list_instances("my-redis", "rg-123")

        assert instances == [ResourceInstance(crn="crn:1", region_id="us-south")]
        controller.list_resource_instances.assert_called_once_with(name="my-redis", resource_group_id="rg-123")

    def test_get_keys(self, client, controller):
        """Test that keys are listed by name."""
        controller.list_resource_keys.return_value = detailed_response({
            "resources": [{"name": "k", "source_crn": "crn:1", "credentials": {"host": "h"}}],
        })

        keys = client.get_keys("k")

        assert keys == [ServiceKey(name="k", source_crn="crn:1", credentials={"host": "h"})]
        controller.list_resource_keys.assert_called_once_with(name="k")

    def test_get_keys_unknown_name_raises_key_lookup_error(self, client, controller):
        """Test that a key name with no results raises KeyLookupError."""
        controller.list_resource_keys.return_value = detailed_response({"resources": []})

        with pytest.raises(KeyLookupError, match="'k' does not exist"):
            client.get_keys("k")

    def test_get_keys_api_error_raises_key_lookup_error(self, client, controller):
        """Test that an API error listing keys raises KeyLookupError."""
        controller.list_resource_keys.side_effect = ApiException(404, message="Not found")

        with pytest.raises(KeyLookupError, match="'k'"):
            client.get_keys("k")
