"""Resolve resource group names and instance names to IBM Cloud IDs."""
import logging
from dataclasses import replace
from typing import Dict, Iterable, List, Tuple

import requests
from ibm_cloud_sdk_core import ApiException

from ..domains.models import CredentialRequest, Manifest, RegionalDetails

logger = logging.getLogger(__name__)


def collect_resource_group_names(details: RegionalDetails) -> List[str]:
    """Distinct resource group names across all service types, in first-seen order."""
    names: List[str] = []
    for _, service_requests in details.by_service_type():
        for request in service_requests:
            if request.resource_group not in names:
                names.append(request.resource_group)
    return names


def resolve_resource_groups(client, account_id: str, names: Iterable[str]) -> Dict[str, str]:
    """
    Resolve resource group names to group IDs, one lookup per name.

    Args:
        client: IBMCloudClient (or anything with find_resource_groups)
        account_id: IBM Cloud account ID
        names: Distinct resource group names

    Returns:
        Mapping of group name to group ID. Names that could not be resolved map to "".
    """
    group_ids: Dict[str, str] = {}
    for name in names:
        group_ids[name] = ""
        try:
            groups = client.find_resource_groups(account_id, name)
        except (ApiException, requests.RequestException) as e:
            logger.error(f"Error retrieving resource group {name}: {e}")
            continue

        if not groups:
            logger.error(f"Resource group {name} not found in account {account_id}")
            continue

        group_ids[name] = groups[0].get("id", "")
        logger.info(f"Resolved resource group {name} -> {group_ids[name]}")
    return group_ids


def resolve_instance(client, request: CredentialRequest, group_ids: Dict[str, str], region: str) -> CredentialRequest:
    """
    Resolve a request's instance CRN from its name, resource group and region.

    Requests that already carry a resource_instance_id are returned unchanged.
    On a miss the request is returned unresolved and a warning is logged.
    """
    if request.is_resolved:
        return request

    group_id = group_ids.get(request.resource_group, "")
    if group_id:
        try:
            instances = client.list_instances(request.name, group_id)
        except (ApiException, requests.RequestException) as e:
            logger.warning(f"Error listing instances named {request.name}: {e}")
            instances = []

        for instance in instances:
            if instance.region_id == region:
                logger.info(f"Resolved instance {request.name} -> {instance.crn}")
                return replace(request, resource_instance_id=instance.crn)

    logger.warning(
        f"The resource {request.name} doesn't exist in the given resource group: {request.resource_group}"
    )
    return request


def resolve_instances(
    client, service_requests: Iterable[CredentialRequest], group_ids: Dict[str, str], region: str
) -> Tuple[CredentialRequest, ...]:
    return tuple(resolve_instance(client, request, group_ids, region) for request in service_requests)


def resolve_manifest(client, manifest: Manifest) -> Manifest:
    """
    Resolve every credential request in the manifest.

    Returns:
        A new Manifest; the input is left untouched
    """
    group_ids = resolve_resource_groups(
        client, manifest.account, collect_resource_group_names(manifest.data)
    )

    details = manifest.data
    for service_type, service_requests in manifest.data.by_service_type():
        details = details.with_requests(
            service_type, resolve_instances(client, service_requests, group_ids, manifest.region)
        )

    return replace(manifest, data=details)
