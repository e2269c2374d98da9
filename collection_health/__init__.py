"""Health snapshots for the collections of a Qdrant vector database."""

__version__ = "0.1.0"
