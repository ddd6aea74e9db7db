"""Document store layer.

The dashboard state is one JSON document in a document-oriented store.
:class:`DocumentStore` is the capability interface services depend on;
:class:`MemoryDocumentStore` is the bundled implementation.
"""

from linewatch.store.base import DocumentStore, SnapshotCallback, Unsubscribe
from linewatch.store.memory import MemoryDocumentStore

__all__ = ["DocumentStore", "MemoryDocumentStore", "SnapshotCallback", "Unsubscribe"]
