"""
Plugin archive source resolution.

Turns the configured archive location (a local path or a remote URL) into a
local file the populate pass can open. Remote archives are downloaded into a
temporary file that is removed when the context exits, whatever the outcome.
"""

import logging
import os
import tempfile
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import httpx

from plugin_catalog.exceptions import ConfigurationError, TransportError

logger = logging.getLogger(__name__)

TEMP_ARCHIVE_SUFFIX = "plugins.zip"
DEFAULT_TIMEOUT = 30.0


def download_archive(
    url: str,
    destination: Path,
    client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> int:
    """
    Stream a remote archive to a local file.

    Args:
        url: Archive URL
        destination: Local file to write (truncated if it exists)
        client: HTTP client to use (a short-lived one is created if omitted)
        timeout: Request timeout in seconds when creating a client

    Returns:
        Number of bytes written

    Raises:
        TransportError: If the request fails or returns a non-2xx status
        OSError: If the local file cannot be written
    """
    owns_client = client is None
    if client is None:
        client = httpx.Client(timeout=timeout, follow_redirects=True)

    written = 0
    try:
        with client.stream("GET", url) as response:
            response.raise_for_status()
            with open(destination, "wb") as output:
                for chunk in response.iter_bytes():
                    output.write(chunk)
                    written += len(chunk)
    except httpx.HTTPStatusError as e:
        raise TransportError(url, f"HTTP {e.response.status_code}") from e
    except httpx.HTTPError as e:
        raise TransportError(url, str(e) or type(e).__name__) from e
    finally:
        if owns_client:
            client.close()

    logger.debug(f"Downloaded {written} bytes from {url} to {destination}")
    return written


@contextmanager
def resolve_archive(
    location: Optional[str],
    client: Optional[httpx.Client] = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> Iterator[Path]:
    """
    Resolve an archive location to a readable local path.

    An existing local path is yielded unchanged. Anything else is treated as
    a URL and downloaded into a temporary file, which is deleted on exit.

    Args:
        location: Local path or remote URL
        client: HTTP client used for remote downloads
        timeout: Download timeout in seconds

    Yields:
        Path to a local archive

    Raises:
        ConfigurationError: If no location is given
        TransportError: If the download fails
        OSError: If the temporary file cannot be created or written

    Example:
        >>> with resolve_archive(settings.plugins_zip_path) as archive_path:
        >>>     with zipfile.ZipFile(archive_path) as archive:
        >>>         ...
    """
    if not location:
        raise ConfigurationError("plugins path not provided to read schemas from")

    local_path = Path(location)
    if local_path.exists():
        yield local_path
        return

    fd, temp_name = tempfile.mkstemp(suffix=TEMP_ARCHIVE_SUFFIX)
    os.close(fd)
    temp_path = Path(temp_name)
    try:
        logger.info(f"Plugin archive not found locally, downloading from {location}")
        download_archive(location, temp_path, client=client, timeout=timeout)
        yield temp_path
    finally:
        temp_path.unlink(missing_ok=True)
        logger.debug(f"Removed temporary archive {temp_path}")
