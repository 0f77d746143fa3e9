"""Points, storage configuration, trigram index and query cache for a Graphite/Carbon metrics server."""

__version__ = "0.14.0"