"""
Manifest parsing and validation.

Parses manifest YAML into a Manifest and turns plugin manifests into catalog
descriptors. The descriptor keeps the manifest text exactly as it was read,
since the stored text is both the source of truth for lookups and the payload
compared when deciding whether a plugin changed.
"""

import logging
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from plugin_catalog.exceptions import ManifestParseError
from plugin_catalog.models.catalog import PluginDescriptor
from plugin_catalog.models.manifest import (
    Manifest,
    PluginStage,
    PluginStep,
    UnknownSpec,
)
from plugin_catalog.plugins.extractor import ManifestEntry

logger = logging.getLogger(__name__)


def parse_manifest(data: Union[bytes, str]) -> Manifest:
    """
    Parse manifest YAML into a validated Manifest.

    Args:
        data: Manifest content as bytes (UTF-8) or text

    Returns:
        Parsed manifest

    Raises:
        ManifestParseError: If the content is not valid YAML, is not a
                            mapping, or does not fit the manifest schema
    """
    if isinstance(data, bytes):
        try:
            data = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise ManifestParseError(f"manifest is not valid UTF-8: {e}") from e

    try:
        document = yaml.safe_load(data)
    except yaml.YAMLError as e:
        raise ManifestParseError(f"invalid YAML: {e}") from e

    if not isinstance(document, dict):
        raise ManifestParseError(
            f"manifest must be a mapping, got {type(document).__name__}"
        )

    try:
        return Manifest.model_validate(document)
    except ValidationError as e:
        raise ManifestParseError(f"manifest failed validation: {e}") from e


def descriptor_from_manifest(
    manifest: Manifest, spec_text: str, logo: Optional[str] = None
) -> Optional[PluginDescriptor]:
    """
    Build a descriptor from a parsed manifest.

    Returns:
        The descriptor, or None if the manifest is not a step or stage plugin
    """
    match manifest.spec:
        case PluginStep(description=description) | PluginStage(description=description):
            return PluginDescriptor(
                uid=manifest.name,
                type=manifest.type or "",
                description=description,
                spec=spec_text,
                logo=logo,
            )
        case UnknownSpec():
            return None


def descriptor_from_entry(entry: ManifestEntry) -> Optional[PluginDescriptor]:
    """
    Parse an archive entry into a catalog descriptor.

    Failures are logged with the entry name and reported as None so the
    populate pass can move on to the next entry.
    """
    try:
        manifest = parse_manifest(entry.content)
    except ManifestParseError as e:
        logger.warning(f"Could not parse schema into valid config ({entry.name}): {e}")
        return None

    # parse_manifest already proved the bytes decode
    spec_text = entry.content.decode("utf-8")
    logo = entry.logo.decode("utf-8", errors="replace") if entry.logo is not None else None

    descriptor = descriptor_from_manifest(manifest, spec_text, logo)
    if descriptor is None:
        logger.warning(
            f"Schema did not match a valid plugin schema ({entry.name}): "
            f"kind={manifest.kind!r} type={manifest.type!r}"
        )
    return descriptor
