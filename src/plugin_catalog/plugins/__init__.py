"""
Plugin catalog synchronization.

This package fetches plugin manifest archives, extracts and validates the
manifests, reconciles them against the persisted catalog, and resolves single
plugins for resolvers.
"""

from plugin_catalog.plugins.manager import LookupFunc, PluginManager
from plugin_catalog.plugins.reconciler import CatalogReconciler, ReconcileResult
from plugin_catalog.plugins.store import PluginStore

__all__ = [
    "CatalogReconciler",
    "LookupFunc",
    "PluginManager",
    "PluginStore",
    "ReconcileResult",
]
