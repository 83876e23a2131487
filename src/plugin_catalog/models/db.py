"""
SQLAlchemy database models for the plugin catalog.
"""

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.sql import func

from plugin_catalog.models.catalog import PluginDescriptor


class Base(DeclarativeBase):
    """Base class for all database models."""

    pass


class Plugin(Base):
    """A cataloged plugin manifest (one live manifest per uid)."""

    __tablename__ = "plugins"

    uid: Mapped[str] = mapped_column(String(255), primary_key=True)
    version: Mapped[str] = mapped_column(
        String(50), nullable=False, default="", server_default=""
    )
    type: Mapped[str] = mapped_column(String(50), nullable=False, index=True)
    description: Mapped[str] = mapped_column(
        Text, nullable=False, default="", server_default=""
    )
    spec: Mapped[str] = mapped_column(Text, nullable=False)  # Raw manifest YAML
    logo: Mapped[Optional[str]] = mapped_column(Text, nullable=True)  # SVG markup

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), server_default=func.now(), nullable=False
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    def to_descriptor(self) -> PluginDescriptor:
        """Convert the row into a store-independent descriptor."""
        return PluginDescriptor(
            uid=self.uid,
            type=self.type,
            description=self.description,
            spec=self.spec,
            logo=self.logo,
            version=self.version,
        )

    def apply(self, descriptor: PluginDescriptor) -> None:
        """Copy descriptor content onto the row."""
        self.type = descriptor.type
        self.description = descriptor.description
        self.spec = descriptor.spec
        self.logo = descriptor.logo
        self.version = descriptor.version

    def __repr__(self) -> str:
        return f"<Plugin(uid={self.uid!r}, type={self.type!r}, version={self.version!r})>"
