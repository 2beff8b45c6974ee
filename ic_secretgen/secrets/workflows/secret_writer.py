"""Compose Kubernetes Secret manifests and write them to disk."""
import json
import logging
from pathlib import Path
from typing import Optional

from ..domains.errors import SecretWriteError
from ..domains.models import GeneratorConfig, ResolvedKeyPair, SecretDocument
from ..domains.transformers import transform

logger = logging.getLogger(__name__)


def output_path(output: str, config: GeneratorConfig) -> Path:
    return Path(config.output_dir) / f"{output}{config.output_suffix}"


def compose_secret(
    service_type: str, key_pair: ResolvedKeyPair, output: str, config: GeneratorConfig
) -> Optional[SecretDocument]:
    """
    Build the Secret document for one request.

    Returns:
        SecretDocument, or None when both key bundles are empty
    """
    if key_pair.is_empty:
        return None

    data = transform(
        service_type,
        key_pair.public,
        key_pair.private,
        encode_base64=config.to_base64,
        parser_group=config.parser,
    )
    return SecretDocument(name=output, namespace=config.namespace, data=data)


def write_secret(document: SecretDocument, output: str, config: GeneratorConfig) -> Path:
    """
    Write a Secret document as indented JSON, overwriting any existing file.

    Raises:
        SecretWriteError: If the file can't be written
    """
    path = output_path(output, config)
    try:
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(document.to_dict(), f, indent=2)
    except OSError as e:
        raise SecretWriteError(f"Failed to write secret to {path}: {e}")

    logger.info(f"Wrote secret {document.namespace}/{document.name} to {path}")
    return path


def compose_and_write(
    service_type: str, key_pair: ResolvedKeyPair, output: str, config: GeneratorConfig
) -> Optional[Path]:
    if key_pair.is_empty:
        logger.info(f"No credentials for {service_type} output {output}, skipping")
        return None

    print(f"Processing {service_type} for output {output}{config.output_suffix}")
    document = compose_secret(service_type, key_pair, output, config)
    return write_secret(document, output, config)
