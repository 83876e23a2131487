"""Plugin catalog: synchronizes plugin manifests from an archive into a persisted catalog."""

__version__ = "0.1.0"
