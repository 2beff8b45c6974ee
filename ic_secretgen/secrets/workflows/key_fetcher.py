"""Fetch the public/private service keys of a resolved instance."""
import logging
from typing import Iterable

from ..domains.models import Bundle, CredentialRequest, ResolvedKeyPair, ServiceKey

logger = logging.getLogger(__name__)


def select_key(keys: Iterable[ServiceKey], instance_crn: str) -> Bundle:
    """Credentials of the first key issued for instance_crn, or {} if none matches."""
    for key in keys:
        if key.source_crn == instance_crn:
            return key.credentials
    return {}


def _fetch(client, key_name: str, instance_crn: str) -> Bundle:
    if not key_name:
        return {}
    credentials = select_key(client.get_keys(key_name), instance_crn)
    if not credentials:
        logger.warning(f"No service key named {key_name} belongs to {instance_crn}")
    return credentials


def fetch_keys(client, request: CredentialRequest) -> ResolvedKeyPair:
    """
    Fetch the public and private key credentials for a request.

    Args:
        client: IBMCloudClient (or anything with get_keys)
        request: Resolved credential request

    Returns:
        ResolvedKeyPair; either half is empty when the key name is unset or no key matches

    Raises:
        KeyLookupError: If the key lookup API fails or a configured key name does not exist
    """
    if not request.is_resolved:
        return ResolvedKeyPair()

    return ResolvedKeyPair(
        public=_fetch(client, request.public_key_name, request.resource_instance_id),
        private=_fetch(client, request.private_key_name, request.resource_instance_id),
    )
