"""IBM Cloud resource-management client wrapper."""
import logging
from typing import Any, Dict, List, Optional

import requests
from ibm_cloud_sdk_core import ApiException
from ibm_cloud_sdk_core.authenticators import IAMAuthenticator
from ibm_platform_services import ResourceControllerV2, ResourceManagerV2

from .errors import KeyLookupError, SessionError
from .models import ResourceInstance, ServiceKey

logger = logging.getLogger(__name__)


class IBMCloudClient:
    """Wrapper around the IBM Cloud resource manager and resource controller services."""

    def __init__(
        self,
        api_key: str,
        authenticator: Optional[IAMAuthenticator] = None,
        resource_manager: Optional[ResourceManagerV2] = None,
        resource_controller: Optional[ResourceControllerV2] = None,
    ):
        self._api_key = api_key
        self._authenticator = authenticator
        self._resource_manager = resource_manager
        self._resource_controller = resource_controller

    @property
    def authenticator(self) -> IAMAuthenticator:
        """Lazy-initialize authenticator."""
        if self._authenticator is None:
            if not self._api_key:
                raise SessionError("IBM Cloud API key is empty")
            try:
                self._authenticator = IAMAuthenticator(self._api_key)
            except ValueError as e:
                raise SessionError(f"Invalid IBM Cloud API key: {e}")
        return self._authenticator

    @property
    def resource_manager(self) -> ResourceManagerV2:
        """Lazy-initialize resource manager client."""
        if self._resource_manager is None:
            self._resource_manager = ResourceManagerV2(authenticator=self.authenticator)
        return self._resource_manager

    @property
    def resource_controller(self) -> ResourceControllerV2:
        """Lazy-initialize resource controller client."""
        if self._resource_controller is None:
            self._resource_controller = ResourceControllerV2(authenticator=self.authenticator)
        return self._resource_controller

    def authenticate(self) -> None:
        """
        Establish an IAM session by requesting a token up front.

        Raises:
            SessionError: If the API key is rejected or IAM can't be reached
        """
        try:
            self.authenticator.token_manager.get_token()
        except (ApiException, requests.RequestException) as e:
            raise SessionError(f"IBM Cloud authentication failed: {e}")
        logger.info("Authenticated against IBM Cloud IAM")

    def find_resource_groups(self, account_id: str, name: str) -> List[Dict[str, Any]]:
        """
        Look up resource groups by name.

        Args:
            account_id: IBM Cloud account ID
            name: Resource group name

        Returns:
            List of resource group records (each has at least 'id' and 'name')

        Raises:
            ApiException: On API errors
        """
        result = self.resource_manager.list_resource_groups(account_id=account_id, name=name).get_result()
        return list(result.get("resources") or [])

    def list_instances(self, name: str, resource_group_id: str) -> List[ResourceInstance]:
        """
        List service instances with the given name in a resource group.

        Raises:
            ApiException: On API errors
        """
        result = self.resource_controller.list_resource_instances(
            name=name, resource_group_id=resource_group_id
        ).get_result()
        return [
            ResourceInstance(crn=item.get("crn", ""), region_id=item.get("region_id", ""))
            for item in result.get("resources") or []
        ]

    def get_keys(self, key_name: str) -> List[ServiceKey]:
        """
        Fetch service keys by name.

        Args:
            key_name: Service key name

        Returns:
            List of service keys with that name, across all instances

        Raises:
            KeyLookupError: On API errors, or if no key has that name
        """
        try:
            result = self.resource_controller.list_resource_keys(name=key_name).get_result()
        except ApiException as e:
            raise KeyLookupError(f"Failed to fetch service key '{key_name}': {e}")
        resources = result.get("resources") or []
        if not resources:
            raise KeyLookupError(f"Service key '{key_name}' does not exist")
        return [
            ServiceKey(
                name=item.get("name", key_name),
                source_crn=item.get("source_crn", ""),
                credentials=dict(item.get("credentials") or {}),
            )
            for item in resources
        ]
