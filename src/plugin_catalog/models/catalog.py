"""
Catalog data models.

Plain dataclasses passed between the populate pass and the catalog store,
independent of how the store persists them.
"""

from dataclasses import dataclass
from typing import Optional


@dataclass
class PluginDescriptor:
    """A plugin as recorded in the catalog."""

    uid: str  # Catalog primary key (the manifest's declared name)
    type: str  # 'step' or 'stage'
    description: str
    spec: str  # Raw manifest text, byte-for-byte as found in the archive
    logo: Optional[str] = None  # SVG markup from a sibling logo.svg
    version: str = ""

    def matches(self, other: "PluginDescriptor") -> bool:
        """
        Check whether two descriptors have the same content.

        Only type, description, spec and logo are compared, using exact
        equality. A whitespace-only change in the manifest is a change.
        """
        return (
            self.type == other.type
            and self.description == other.description
            and self.spec == other.spec
            and self.logo == other.logo
        )
