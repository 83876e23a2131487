"""Custom exceptions for the plugin catalog."""


class PluginCatalogError(Exception):
    """Base class for all plugin catalog errors."""


class ConfigurationError(PluginCatalogError):
    """Raised when a required setting is missing or invalid."""


class TransportError(PluginCatalogError):
    """Raised when the plugin archive cannot be fetched from a remote URL."""

    def __init__(self, url: str, reason: str):
        self.url = url
        self.reason = reason
        super().__init__(f"could not download plugin archive from {url}: {reason}")


class InvalidPatternError(PluginCatalogError):
    """Raised when an archive glob pattern is malformed."""

    def __init__(self, pattern: str, reason: str):
        self.pattern = pattern
        super().__init__(f"invalid glob pattern {pattern!r}: {reason}")


class PopulateError(PluginCatalogError):
    """Raised when a populate pass aborts. The original error is the cause."""


class ManifestParseError(PluginCatalogError):
    """Raised when manifest content is not a valid plugin configuration."""


class CatalogStoreError(PluginCatalogError):
    """Raised when a catalog store operation fails."""


class PluginNotFoundError(CatalogStoreError):
    """Raised when a plugin is not present in the catalog."""

    def __init__(self, uid: str, version: str | None = None):
        self.uid = uid
        self.version = version
        message = f"plugin {uid!r} not found"
        if version:
            message += f" (version {version!r})"
        super().__init__(message)


class PluginAlreadyExistsError(CatalogStoreError):
    """Raised when creating a plugin whose identifier is already cataloged."""

    def __init__(self, uid: str):
        self.uid = uid
        super().__init__(f"plugin {uid!r} already exists")


class UnsupportedQueryError(PluginCatalogError):
    """Raised when a lookup asks for a kind/type the catalog does not serve."""


class PluginLookupError(PluginCatalogError, LookupError):
    """Raised when a plugin cannot be resolved from the catalog."""
