"""Workflow that turns a manifest into Kubernetes Secret files."""
import logging
from pathlib import Path
from typing import List

from ..domains.ibm_client import IBMCloudClient
from ..domains.manifest_loader import load_manifest
from ..domains.models import GeneratorConfig
from .key_fetcher import fetch_keys
from .resolution import resolve_manifest
from .secret_writer import compose_and_write

logger = logging.getLogger(__name__)


def generate_secrets(config: GeneratorConfig, client=None) -> List[Path]:
    """
    Generate one Secret file per credential request in the input manifest.

    Args:
        config: Run configuration (input file, namespace, output location, parser, ...)
        client: IBMCloudClient to use; built from config.api_key if not provided

    Returns:
        Paths of the files written, in processing order

    Behavior:
        - Authenticates before any lookup (fails fast on a bad API key)
        - Looks up each distinct resource group once
        - Requests whose instance can't be resolved are reported and skipped
        - Processes redis, then kafka, then cloudant, each in manifest order

    Raises:
        ManifestError, SessionError, KeyLookupError, SchemaMismatch,
        UnknownParserError, SecretWriteError
    """
    manifest = load_manifest(config.input_file)

    if client is None:
        client = IBMCloudClient(config.api_key)
    client.authenticate()

    resolved = resolve_manifest(client, manifest)

    written: List[Path] = []
    for service_type, requests in resolved.data.by_service_type():
        for request in requests:
            key_pair = fetch_keys(client, request)
            path = compose_and_write(service_type, key_pair, request.output, config)
            if path is not None:
                written.append(path)

    logger.info(f"Wrote {len(written)} secret file(s) to {config.output_dir}")
    return written
