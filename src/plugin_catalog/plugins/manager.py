"""
Plugin manager.

Entry points of the plugin catalog: ``populate`` runs one synchronization
pass from the configured archive into the catalog, and ``lookup`` resolves a
single plugin manifest for resolvers.
"""

import logging
import zipfile
from typing import Callable, Iterator, Optional

import httpx

from plugin_catalog.config import Settings, settings as default_settings
from plugin_catalog.exceptions import (
    CatalogStoreError,
    InvalidPatternError,
    PluginLookupError,
    PopulateError,
    TransportError,
    UnsupportedQueryError,
)
from plugin_catalog.models.catalog import PluginDescriptor
from plugin_catalog.models.manifest import Manifest
from plugin_catalog.plugins.extractor import MANIFEST_PATTERN, iter_manifests
from plugin_catalog.plugins.parser import descriptor_from_entry, parse_manifest
from plugin_catalog.plugins.reconciler import CatalogReconciler, ReconcileResult
from plugin_catalog.plugins.source import resolve_archive
from plugin_catalog.plugins.store import PluginStore

logger = logging.getLogger(__name__)

# Resolver-facing signature: (name, kind, type, version) -> Manifest
LookupFunc = Callable[[str, str, str, str], Manifest]


class PluginManager:
    """Synchronizes the plugin catalog and serves plugin lookups."""

    def __init__(
        self,
        store: PluginStore,
        config: Optional[Settings] = None,
        http_client: Optional[httpx.Client] = None,
        pattern: str = MANIFEST_PATTERN,
    ) -> None:
        """
        Initialize the manager.

        Args:
            store: Catalog store
            config: Settings providing the archive location (defaults to
                    the global settings)
            http_client: Client used to download remote archives
            pattern: Glob selecting manifest entries in the archive
        """
        self.store = store
        self.config = config or default_settings
        self.http_client = http_client
        self.pattern = pattern

    def get_lookup_fn(self) -> LookupFunc:
        """Return a lookup function for plugins which can be used in a resolver."""
        return self.lookup

    def lookup(self, name: str, kind: str, type: str, version: str = "") -> Manifest:
        """
        Resolve a plugin manifest by name, kind, type and version.

        Only step plugins are cataloged, so any other kind/type is rejected
        without querying the store.

        Raises:
            UnsupportedQueryError: If kind is not 'plugin' or type is not 'step'
            PluginLookupError: If the plugin cannot be found
            ManifestParseError: If the stored manifest no longer parses
        """
        if kind != "plugin":
            raise UnsupportedQueryError("only plugin kind supported")
        if type != "step":
            raise UnsupportedQueryError("only step plugins supported")

        try:
            plugin = self.store.find(name, version)
        except CatalogStoreError as e:
            raise PluginLookupError(f"could not lookup plugin {name!r}: {e}") from e

        return parse_manifest(plugin.spec)

    def populate(self, location: Optional[str] = None) -> ReconcileResult:
        """
        Fetch plugin manifests from the configured archive and upsert them.

        Args:
            location: Archive path or URL (defaults to settings.plugins_zip_path)

        Returns:
            Counts of created, updated, unchanged and failed plugins

        Raises:
            ConfigurationError: If no archive location is configured
            PopulateError: If the pass aborts (download, archive open,
                           catalog listing or pattern failure)
        """
        location = location or self.config.plugins_zip_path

        try:
            with resolve_archive(
                location,
                client=self.http_client,
                timeout=self.config.plugins_download_timeout,
            ) as archive_path:
                try:
                    archive = zipfile.ZipFile(archive_path)
                except (OSError, zipfile.BadZipFile) as e:
                    raise PopulateError(
                        f"could not open zip for reading: {archive_path}"
                    ) from e

                with archive:
                    result = self._traverse_and_upsert(archive)
        except TransportError as e:
            raise PopulateError("could not download remote zip") from e
        except OSError as e:
            raise PopulateError("could not prepare local plugin archive") from e

        logger.info(
            f"Plugin populate finished: {result.created} created, "
            f"{result.updated} updated, {result.unchanged} unchanged, "
            f"{result.failed} failed"
        )
        return result

    def _traverse_and_upsert(self, archive: zipfile.ZipFile) -> ReconcileResult:
        try:
            existing = self.store.list_all()
        except CatalogStoreError as e:
            raise PopulateError("could not list plugins") from e

        try:
            return CatalogReconciler(self.store).reconcile(
                existing, self._parse_entries(archive)
            )
        except InvalidPatternError as e:
            raise PopulateError("could not glob pattern") from e

    def _parse_entries(self, archive: zipfile.ZipFile) -> Iterator[PluginDescriptor]:
        for entry in iter_manifests(archive, self.pattern):
            descriptor = descriptor_from_entry(entry)
            if descriptor is not None:
                yield descriptor
