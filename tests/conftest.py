"""
Pytest configuration and fixtures for plugin catalog tests.

This module provides shared fixtures for the database, sample manifests and
plugin archives.
"""

import io
import logging
import zipfile
from pathlib import Path
from typing import Callable, Dict, Generator, Optional

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker

from plugin_catalog.config import Settings
from plugin_catalog.db.connection import enable_sqlite_savepoints
from plugin_catalog.models.catalog import PluginDescriptor
from plugin_catalog.models.db import Base

DOCKER_MANIFEST = """\
version: 1
kind: plugin
type: step
name: docker
spec:
  description: Build and publish Docker images
  inputs:
    repo:
      type: string
      description: Image repository
      required: true
    tags:
      type: string
      default: latest
  image: plugins/docker
"""

SLACK_MANIFEST = """\
version: 1
kind: plugin
type: step
name: slack
spec:
  description: Send Slack notifications
  inputs:
    webhook:
      type: string
      secret: true
  image: plugins/slack
"""

DEPLOY_STAGE_MANIFEST = """\
version: 1
kind: plugin
type: stage
name: deploy
spec:
  description: Deploy an application
  steps:
    - name: rollout
      image: plugins/deploy
"""

PIPELINE_MANIFEST = """\
version: 1
kind: pipeline
name: build
spec:
  stages: []
"""

BROKEN_MANIFEST = "kind: plugin\ntype: step\nname: [unterminated\n"

DOCKER_LOGO = '<svg xmlns="http://www.w3.org/2000/svg"><rect/></svg>'


@pytest.fixture(autouse=True)
def restore_package_logger() -> Generator[None, None, None]:
    """Undo any setup_logging() changes so caplog keeps seeing package records."""
    logger = logging.getLogger("plugin_catalog")
    handlers = list(logger.handlers)
    level = logger.level
    propagate = logger.propagate

    yield

    for handler in list(logger.handlers):
        if handler not in handlers:
            logger.removeHandler(handler)
            handler.close()
    logger.setLevel(level)
    logger.propagate = propagate


@pytest.fixture(scope="session")
def test_engine():
    """Create a test database engine using SQLite in-memory."""
    engine = create_engine(
        "sqlite:///:memory:",
        echo=False,
        connect_args={"check_same_thread": False},
    )
    enable_sqlite_savepoints(engine)
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """
    Create a new database session for a test.

    Each test gets a fresh session with a transaction that is rolled back
    after the test completes, ensuring test isolation.
    """
    connection = test_engine.connect()
    transaction = connection.begin()
    session = sessionmaker(bind=connection)()

    yield session

    session.close()
    transaction.rollback()
    connection.close()


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """Settings isolated from the environment, logging into tmp_path."""
    return Settings(
        _env_file=None,
        plugins_zip_path="",
        log_dir=str(tmp_path / "logs"),
        log_file_enabled=False,
    )


@pytest.fixture
def make_archive(tmp_path: Path) -> Callable[..., Path]:
    """
    Factory writing a zip archive from a mapping of entry name to content.

    Entries are written in the mapping's order.
    """

    def _make(files: Dict[str, str | bytes], name: str = "plugins.zip") -> Path:
        archive_path = tmp_path / name
        with zipfile.ZipFile(archive_path, "w") as archive:
            for entry_name, content in files.items():
                archive.writestr(entry_name, content)
        return archive_path

    return _make


@pytest.fixture
def archive_bytes() -> Callable[[Dict[str, str | bytes]], bytes]:
    """Factory building zip archive bytes in memory."""

    def _build(files: Dict[str, str | bytes]) -> bytes:
        buffer = io.BytesIO()
        with zipfile.ZipFile(buffer, "w") as archive:
            for entry_name, content in files.items():
                archive.writestr(entry_name, content)
        return buffer.getvalue()

    return _build


@pytest.fixture
def make_descriptor() -> Callable[..., PluginDescriptor]:
    """Factory for descriptors with sensible defaults."""

    def _make(
        uid: str = "docker",
        type: str = "step",
        description: str = "Build and publish Docker images",
        spec: str = DOCKER_MANIFEST,
        logo: Optional[str] = None,
        version: str = "",
    ) -> PluginDescriptor:
        return PluginDescriptor(
            uid=uid,
            type=type,
            description=description,
            spec=spec,
            logo=logo,
            version=version,
        )

    return _make
