"""
Base repository with generic CRUD helpers.
"""

from typing import Any, Generic, Optional, Type, TypeVar

from sqlalchemy.orm import Session

from plugin_catalog.models.db import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Generic repository over a single SQLAlchemy model."""

    def __init__(self, model: Type[ModelType], session: Session):
        self.model = model
        self.session = session

    def get(self, id: Any) -> Optional[ModelType]:
        """
        Get a record by primary key.

        Args:
            id: Primary key value

        Returns:
            Model instance or None
        """
        return self.session.get(self.model, id)

    def add(self, instance: ModelType) -> ModelType:
        """
        Add an instance and flush it to the database.

        Args:
            instance: Model instance to persist

        Returns:
            The persisted instance
        """
        self.session.add(instance)
        self.session.flush()
        self.session.refresh(instance)
        return instance
