"""Loader for the JSON input manifest."""
import json
import logging

from .errors import ManifestError
from .models import Manifest

logger = logging.getLogger(__name__)


def load_manifest(path: str) -> Manifest:
    """
    Load and validate the input manifest.

    Args:
        path: Path to a UTF-8 JSON manifest file

    Returns:
        Parsed Manifest

    Raises:
        ManifestError: If the file can't be read, isn't valid JSON, or doesn't match the manifest shape
    """
    try:
        with open(path, 'r', encoding='utf-8') as f:
            raw = json.load(f)
    except UnicodeDecodeError as e:
        raise ManifestError(f"Manifest at {path} is not valid UTF-8: {e}")
    except json.JSONDecodeError as e:
        raise ManifestError(f"Failed to parse manifest at {path}: {e}")
    except OSError as e:
        raise ManifestError(f"Failed to read manifest at {path}: {e}")

    manifest = Manifest.from_dict(raw)

    counts = ", ".join(f"{service_type}={len(requests)}" for service_type, requests in manifest.data.by_service_type())
    logger.info(f"Manifest loaded from {path} (account {manifest.account}, region {manifest.region}): {counts}")

    return manifest
