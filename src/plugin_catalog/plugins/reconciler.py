"""
Catalog reconciliation.

Diffs freshly parsed descriptors against a snapshot of the catalog and
applies the minimal set of creates and updates. The snapshot is indexed by
uid once, before any descriptor is processed, so no per-item existence
queries reach the store.
"""

import logging
from dataclasses import dataclass
from typing import Dict, Iterable

from plugin_catalog.exceptions import CatalogStoreError
from plugin_catalog.models.catalog import PluginDescriptor
from plugin_catalog.plugins.store import PluginStore

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """Outcome counts of one reconciliation."""

    created: int = 0
    updated: int = 0
    unchanged: int = 0
    failed: int = 0


class CatalogReconciler:
    """Applies parsed descriptors to a catalog store."""

    def __init__(self, store: PluginStore):
        self.store = store

    def reconcile(
        self,
        existing: Iterable[PluginDescriptor],
        descriptors: Iterable[PluginDescriptor],
    ) -> ReconcileResult:
        """
        Bring the store up to date with the given descriptors.

        Args:
            existing: Catalog snapshot taken before the pass
            descriptors: Parsed descriptors in archive order

        Returns:
            ReconcileResult; only new uids count as created
        """
        index: Dict[str, PluginDescriptor] = {p.uid: p for p in existing}
        result = ReconcileResult()

        for descriptor in descriptors:
            current = index.get(descriptor.uid)

            if current is not None and current.matches(descriptor):
                result.unchanged += 1
                continue

            if current is not None:
                try:
                    self.store.update_plugin(descriptor)
                except CatalogStoreError as e:
                    logger.warning(f"Could not update plugin {descriptor.uid!r}: {e}")
                    result.failed += 1
                    continue
                logger.info(
                    f"Detected changes: updated existing plugin entry {descriptor.uid!r}"
                )
                result.updated += 1
            else:
                try:
                    self.store.create_plugin(descriptor)
                except CatalogStoreError as e:
                    logger.warning(f"Could not create plugin {descriptor.uid!r}: {e}")
                    result.failed += 1
                    continue
                logger.debug(f"Created plugin entry {descriptor.uid!r}")
                result.created += 1

            # Later duplicates of this uid in the same pass diff against what was written
            index[descriptor.uid] = descriptor

        logger.info(f"Added {result.created} new entries to plugins")
        return result
