"""Access to the property graph the importer enriches.

:class:`GraphStore` is everything the pipeline needs from the store.
:class:`Neo4jGraphStore` writes through a single Neo4j transaction, so the
whole import is committed or rolled back as one unit by the caller. Reads go
through a separate session, one read transaction per query, so a failed
lookup never poisons the write transaction.

Physical ids are Neo4j internal node ids (``id(n)``); synthetic ids are the
Reactome ``dbId`` property.
"""

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Protocol

from neo4j import ManagedTransaction, Session, Transaction
from neo4j.exceptions import Neo4jError

from reactome_interactors.exceptions import GraphLookupError, GraphMutationError
from reactome_interactors.graph.schema import DB_ID, DISPLAY_NAME, IDENTIFIER, TAX_ID, VARIANT_IDENTIFIER

logger = logging.getLogger(__name__)

# Labels and relationship types are interpolated into Cypher
TOKEN_PATTERN = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


@dataclass(frozen=True)
class ReferenceEntityRecord:
    """Identifying properties of an existing reference entity."""

    db_id: int
    identifier: str | None = None
    variant_identifier: str | None = None

    @property
    def usable_identifier(self) -> str | None:
        """Variant identifier if set, otherwise the identifier."""
        return self.variant_identifier or self.identifier


class GraphStore(Protocol):
    """Store operations used by the pipeline."""

    def max_db_id(self) -> int: ...

    def physical_ids(self) -> dict[int, int]: ...

    def taxon_db_ids(self) -> dict[int, int]: ...

    def reference_entities(self) -> list[ReferenceEntityRecord]: ...

    def reference_database_name(self, db_id: int) -> str | None: ...

    def is_enrichment_target(self, db_id: int, relationship_types: Iterable[str]) -> bool: ...

    def create_node(self, labels: Iterable[str], properties: Mapping[str, Any]) -> int: ...

    def create_relationship(
        self,
        source: int,
        target: int,
        rel_type: str,
        properties: Mapping[str, Any] | None = None,
    ) -> None: ...


def _check_token(token: str) -> str:
    if not TOKEN_PATTERN.match(token):
        raise ValueError(f"Invalid label or relationship type: {token!r}")
    return token


def _fetch_all(tx: ManagedTransaction, query: str, params: dict[str, Any]) -> list[Any]:
    return list(tx.run(query, **params))


class Neo4jGraphStore:
    """GraphStore writing through one open Neo4j transaction.

    Example:
        >>> with driver.session(database="reactome") as reader, driver.session(database="reactome") as writer:
        ...     with writer.begin_transaction() as tx:
        ...         store = Neo4jGraphStore(tx, reader)
        ...         print(store.max_db_id())
    """

    def __init__(self, tx: Transaction, reader: Session):
        """Initialize the store.

        Args:
            tx: Open write transaction; committing it is the caller's job
            reader: Session used for lookups; must not be the one holding ``tx``
        """
        self.tx = tx
        self.reader = reader

    def _read(self, query: str, **params: Any) -> list[Any]:
        try:
            return self.reader.execute_read(_fetch_all, query, params)
        except Neo4jError as e:
            raise GraphLookupError(f"Graph query failed: {e}") from e

    # =========================================================================
    # Snapshot queries
    # =========================================================================

    def max_db_id(self) -> int:
        """Largest dbId currently in the graph (0 for an empty graph)."""
        records = self._read("MATCH (n:DatabaseObject) RETURN max(n.dbId) AS maxDbId")
        value = records[0]["maxDbId"] if records else None
        return int(value) if value is not None else 0

    def physical_ids(self) -> dict[int, int]:
        """Map every dbId to its Neo4j node id."""
        records = self._read(
            "MATCH (n:DatabaseObject) WHERE n.dbId IS NOT NULL RETURN n.dbId AS dbId, id(n) AS nodeId"
        )
        return {int(r["dbId"]): int(r["nodeId"]) for r in records}

    def taxon_db_ids(self) -> dict[int, int]:
        """Map NCBI taxonomy ids to the dbId of the Taxon node."""
        records = self._read(
            "MATCH (n:DatabaseObject:Taxon) WHERE n.taxId IS NOT NULL RETURN n.taxId AS taxId, n.dbId AS dbId"
        )
        taxa = {}
        for r in records:
            try:
                taxa[int(r[TAX_ID])] = int(r[DB_ID])
            except (TypeError, ValueError):
                logger.debug(f"Ignoring Taxon {r[DB_ID]} with non-numeric taxId {r[TAX_ID]!r}")
        return taxa

    def reference_entities(self) -> list[ReferenceEntityRecord]:
        """Every ReferenceEntity with its identifiers."""
        records = self._read(
            "MATCH (n:DatabaseObject:ReferenceEntity) "
            "RETURN n.dbId AS dbId, n.identifier AS identifier, n.variantIdentifier AS variantIdentifier"
        )
        return [
            ReferenceEntityRecord(
                db_id=int(r[DB_ID]),
                identifier=r[IDENTIFIER],
                variant_identifier=r[VARIANT_IDENTIFIER],
            )
            for r in records
            if r[DB_ID] is not None
        ]

    def reference_database_name(self, db_id: int) -> str | None:
        """displayName of the ReferenceDatabase an entity belongs to."""
        records = self._read(
            "MATCH (n:DatabaseObject {dbId: $dbId})-[:referenceDatabase]->(m:DatabaseObject:ReferenceDatabase) "
            "RETURN m.displayName AS displayName LIMIT 1",
            dbId=db_id,
        )
        return records[0][DISPLAY_NAME] if records else None

    def is_enrichment_target(self, db_id: int, relationship_types: Iterable[str]) -> bool:
        """True if an entity referring to ``db_id`` is reached by one of ``relationship_types``."""
        records = self._read(
            "MATCH (pe:DatabaseObject)-[:referenceEntity]->(re:DatabaseObject:ReferenceEntity {dbId: $dbId}) "
            "MATCH (:DatabaseObject)-[r]->(pe) WHERE type(r) IN $types "
            "RETURN pe.dbId AS dbId LIMIT 1",
            dbId=db_id,
            types=list(relationship_types),
        )
        return bool(records)

    # =========================================================================
    # Mutations
    # =========================================================================

    def create_node(self, labels: Iterable[str], properties: Mapping[str, Any]) -> int:
        """Create a node and return its Neo4j id.

        Raises:
            GraphMutationError: If the node could not be created
        """
        label_expr = ":".join(_check_token(label) for label in labels)
        try:
            record = self.tx.run(
                f"CREATE (n:{label_expr}) SET n = $props RETURN id(n) AS nodeId",
                props=dict(properties),
            ).single()
        except Neo4jError as e:
            raise GraphMutationError(f"Failed to create {label_expr} node {properties.get(DB_ID)}: {e}") from e
        if record is None:
            raise GraphMutationError(f"No id returned for {label_expr} node {properties.get(DB_ID)}")
        return int(record["nodeId"])

    def create_relationship(
        self,
        source: int,
        target: int,
        rel_type: str,
        properties: Mapping[str, Any] | None = None,
    ) -> None:
        """Create ``(source)-[rel_type]->(target)`` between two Neo4j node ids.

        Raises:
            GraphMutationError: If either node is missing or the query fails
        """
        _check_token(rel_type)
        try:
            record = self.tx.run(
                "MATCH (n1:DatabaseObject) WHERE id(n1) = $n1 "
                "MATCH (n2:DatabaseObject) WHERE id(n2) = $n2 "
                f"CREATE (n1)-[r:{rel_type}]->(n2) SET r = $props RETURN count(r) AS created",
                n1=source,
                n2=target,
                props=dict(properties or {}),
            ).single()
        except Neo4jError as e:
            raise GraphMutationError(f"Failed to create {rel_type} relationship {source}->{target}: {e}") from e
        if record is None or not record["created"]:
            raise GraphMutationError(f"Could not create {rel_type} relationship {source}->{target}: node not found")
