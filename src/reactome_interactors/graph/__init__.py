"""Graph store access, schema constants and node property models."""

from reactome_interactors.graph.schema import LABELS, labels_for
from reactome_interactors.graph.store import GraphStore, Neo4jGraphStore, ReferenceEntityRecord

__all__ = [
    "LABELS",
    "GraphStore",
    "Neo4jGraphStore",
    "ReferenceEntityRecord",
    "labels_for",
]
