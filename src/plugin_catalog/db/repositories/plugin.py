"""
Plugin repository.

SQLAlchemy-backed implementation of the catalog store used by the populate
pass and the lookup path.
"""

import logging
from typing import List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from plugin_catalog.db.repositories.base import BaseRepository
from plugin_catalog.exceptions import (
    CatalogStoreError,
    PluginAlreadyExistsError,
    PluginNotFoundError,
)
from plugin_catalog.models.catalog import PluginDescriptor
from plugin_catalog.models.db import Plugin

logger = logging.getLogger(__name__)


class PluginRepository(BaseRepository[Plugin]):
    """Repository for Plugin model."""

    def __init__(self, session: Session):
        super().__init__(Plugin, session)

    def list_all(self) -> List[PluginDescriptor]:
        """
        Get every cataloged plugin.

        Returns:
            List of descriptors ordered by uid

        Raises:
            CatalogStoreError: If the query fails
        """
        try:
            rows = self.session.query(Plugin).order_by(Plugin.uid).all()
        except SQLAlchemyError as e:
            raise CatalogStoreError(f"could not list plugins: {e}") from e
        return [row.to_descriptor() for row in rows]

    def find(self, uid: str, version: str = "") -> PluginDescriptor:
        """
        Get a plugin by uid and version.

        Args:
            uid: Plugin identifier
            version: Plugin version ('' for unversioned entries)

        Returns:
            The matching descriptor

        Raises:
            PluginNotFoundError: If no plugin matches
            CatalogStoreError: If the query fails
        """
        try:
            row = (
                self.session.query(Plugin)
                .filter(Plugin.uid == uid, Plugin.version == version)
                .first()
            )
        except SQLAlchemyError as e:
            raise CatalogStoreError(f"could not find plugin {uid!r}: {e}") from e

        if row is None:
            raise PluginNotFoundError(uid, version)
        return row.to_descriptor()

    def create_plugin(self, descriptor: PluginDescriptor) -> PluginDescriptor:
        """
        Insert a new plugin.

        The insert runs in a savepoint so a failed write leaves the session
        usable for the rest of the populate pass.

        Raises:
            PluginAlreadyExistsError: If the uid is already cataloged
            CatalogStoreError: If the insert fails
        """
        try:
            savepoint = self.session.begin_nested()
            try:
                if self.get(descriptor.uid) is not None:
                    raise PluginAlreadyExistsError(descriptor.uid)

                row = Plugin(uid=descriptor.uid)
                row.apply(descriptor)
                self.add(row)
                savepoint.commit()
            except Exception:
                savepoint.rollback()
                raise
        except SQLAlchemyError as e:
            raise CatalogStoreError(
                f"could not create plugin {descriptor.uid!r}: {e}"
            ) from e

        logger.debug(f"Created plugin {descriptor.uid!r}")
        return row.to_descriptor()

    def update_plugin(self, descriptor: PluginDescriptor) -> PluginDescriptor:
        """
        Overwrite an existing plugin with new content.

        Raises:
            PluginNotFoundError: If the uid is not cataloged
            CatalogStoreError: If the update fails
        """
        try:
            savepoint = self.session.begin_nested()
            try:
                row = self.get(descriptor.uid)
                if row is None:
                    raise PluginNotFoundError(descriptor.uid)

                row.apply(descriptor)
                self.session.flush()
                savepoint.commit()
            except Exception:
                savepoint.rollback()
                raise
        except SQLAlchemyError as e:
            raise CatalogStoreError(
                f"could not update plugin {descriptor.uid!r}: {e}"
            ) from e

        logger.debug(f"Updated plugin {descriptor.uid!r}")
        return row.to_descriptor()
