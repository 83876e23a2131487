"""Tests for catalog reconciliation."""

import logging
from dataclasses import replace
from unittest.mock import MagicMock

from plugin_catalog.exceptions import (
    CatalogStoreError,
    PluginAlreadyExistsError,
    PluginNotFoundError,
)
from plugin_catalog.plugins.reconciler import CatalogReconciler, ReconcileResult
from plugin_catalog.plugins.store import PluginStore


class RecordingStore:
    """In-memory store recording every mutating call."""

    def __init__(self, plugins=()):
        self.plugins = {p.uid: p for p in plugins}
        self.created = []
        self.updated = []

    def list_all(self):
        return list(self.plugins.values())

    def find(self, uid, version=""):
        if uid not in self.plugins:
            raise PluginNotFoundError(uid, version)
        return self.plugins[uid]

    def create_plugin(self, descriptor):
        if descriptor.uid in self.plugins:
            raise PluginAlreadyExistsError(descriptor.uid)
        self.created.append(descriptor)
        self.plugins[descriptor.uid] = descriptor
        return descriptor

    def update_plugin(self, descriptor):
        if descriptor.uid not in self.plugins:
            raise PluginNotFoundError(descriptor.uid)
        self.updated.append(descriptor)
        self.plugins[descriptor.uid] = descriptor
        return descriptor


class TestCatalogReconciler:
    """Test CatalogReconciler.reconcile."""

    def test_recording_store_satisfies_protocol(self):
        assert isinstance(RecordingStore(), PluginStore)

    def test_new_plugin_is_created(self, make_descriptor):
        store = RecordingStore()
        docker = make_descriptor()

        result = CatalogReconciler(store).reconcile(store.list_all(), [docker])

        assert store.created == [docker]
        assert store.updated == []
        assert result == ReconcileResult(created=1)

    def test_unchanged_plugin_is_skipped(self, make_descriptor):
        existing = make_descriptor()
        store = MagicMock()

        result = CatalogReconciler(store).reconcile([existing], [make_descriptor()])

        store.create_plugin.assert_not_called()
        store.update_plugin.assert_not_called()
        assert result == ReconcileResult(unchanged=1)

    def test_changed_plugin_is_updated_not_counted_as_created(self, make_descriptor):
        existing = make_descriptor(spec="S1")
        store = RecordingStore([existing])
        changed = make_descriptor(spec="S2")

        result = CatalogReconciler(store).reconcile(store.list_all(), [changed])

        assert store.updated == [changed]
        assert store.created == []
        assert result.created == 0
        assert result.updated == 1

    def test_each_identity_field_triggers_update(self, make_descriptor):
        existing = make_descriptor(logo="<svg/>")
        variants = [
            replace(existing, type="stage"),
            replace(existing, description="Other"),
            replace(existing, spec=existing.spec + " "),
            replace(existing, logo=None),
        ]

        for variant in variants:
            store = RecordingStore([existing])
            result = CatalogReconciler(store).reconcile([existing], [variant])
            assert result.updated == 1, variant

    def test_version_is_not_part_of_identity(self, make_descriptor):
        existing = make_descriptor(version="1.0.0")
        store = MagicMock()

        result = CatalogReconciler(store).reconcile([existing], [make_descriptor()])

        store.update_plugin.assert_not_called()
        assert result.unchanged == 1

    def test_catalog_is_listed_by_caller_once(self, make_descriptor):
        """Reconciliation never asks the store for existing entries."""
        store = MagicMock()
        descriptors = [make_descriptor(uid=f"plugin-{i}") for i in range(5)]

        CatalogReconciler(store).reconcile([], descriptors)

        store.list_all.assert_not_called()
        store.find.assert_not_called()
        assert store.create_plugin.call_count == 5

    def test_create_failure_is_not_fatal(self, make_descriptor, caplog):
        store = MagicMock()
        store.create_plugin.side_effect = [CatalogStoreError("db down"), None]
        first = make_descriptor(uid="first")
        second = make_descriptor(uid="second")

        with caplog.at_level(logging.WARNING, logger="plugin_catalog"):
            result = CatalogReconciler(store).reconcile([], [first, second])

        assert store.create_plugin.call_count == 2
        assert result == ReconcileResult(created=1, failed=1)
        assert "first" in caplog.text

    def test_update_failure_is_not_fatal(self, make_descriptor):
        store = MagicMock()
        store.update_plugin.side_effect = CatalogStoreError("conflict")
        existing = make_descriptor(spec="S1")

        result = CatalogReconciler(store).reconcile(
            [existing], [make_descriptor(spec="S2"), make_descriptor(uid="new")]
        )

        assert result == ReconcileResult(created=1, failed=1)

    def test_duplicate_uid_in_same_pass(self, make_descriptor):
        store = RecordingStore()
        first = make_descriptor(spec="S1")

        result = CatalogReconciler(store).reconcile(
            [], [first, make_descriptor(spec="S1"), make_descriptor(spec="S2")]
        )

        assert result == ReconcileResult(created=1, updated=1, unchanged=1)
        assert store.plugins["docker"].spec == "S2"

    def test_existing_entries_not_in_archive_are_untouched(self, make_descriptor):
        stale = make_descriptor(uid="stale")
        store = RecordingStore([stale])

        CatalogReconciler(store).reconcile(store.list_all(), [make_descriptor()])

        assert store.plugins["stale"] is stale

    def test_second_pass_is_idempotent(self, make_descriptor):
        store = RecordingStore()
        descriptors = [make_descriptor(uid="docker"), make_descriptor(uid="slack")]

        first = CatalogReconciler(store).reconcile(store.list_all(), descriptors)
        store.created.clear()
        second = CatalogReconciler(store).reconcile(store.list_all(), descriptors)

        assert first.created == 2
        assert second == ReconcileResult(unchanged=2)
        assert store.created == []
        assert store.updated == []

    def test_summary_is_logged(self, make_descriptor, caplog):
        store = RecordingStore()

        with caplog.at_level(logging.INFO, logger="plugin_catalog"):
            CatalogReconciler(store).reconcile([], [make_descriptor()])

        assert "Added 1 new entries to plugins" in caplog.text
