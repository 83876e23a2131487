"""
Catalog store interface.

The populate pass and the lookup path talk to the catalog only through this
protocol. PluginRepository is the database-backed implementation.
"""

from typing import List, Protocol, runtime_checkable

from plugin_catalog.models.catalog import PluginDescriptor


@runtime_checkable
class PluginStore(Protocol):
    """Persistent collection of plugin descriptors addressed by uid."""

    def list_all(self) -> List[PluginDescriptor]:
        """Return every cataloged plugin."""
        ...

    def find(self, uid: str, version: str = "") -> PluginDescriptor:
        """Return one plugin; raise PluginNotFoundError when absent."""
        ...

    def create_plugin(self, descriptor: PluginDescriptor) -> PluginDescriptor:
        """Insert a plugin; raise PluginAlreadyExistsError if the uid exists."""
        ...

    def update_plugin(self, descriptor: PluginDescriptor) -> PluginDescriptor:
        """Overwrite a plugin; raise PluginNotFoundError if the uid is absent."""
        ...
