"""Run state shared by every pipeline component.

Everything that changes during an import (the dbId counter, the
dbId -> node map, the accession map, counters and the provenance singletons)
lives on one :class:`PipelineContext`. Nothing is kept at module level, so
two contexts never interfere.
"""

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field

from reactome_interactors.config import ImportConfig
from reactome_interactors.graph.store import GraphStore
from reactome_interactors.intact.models import InteractorResource
from reactome_interactors.intact.source import InteractionSource
from reactome_interactors.taxonomy.ncbi import fetch_lineage
from reactome_interactors.taxonomy.resolver import TaxonomyResolver

logger = logging.getLogger(__name__)


class IdentifierIndex:
    """Synthetic id allocation and dbId -> physical node id lookup.

    The counter starts at the largest dbId in the graph and is only ever
    pre-incremented. Not safe for concurrent use.

    Example:
        >>> index = IdentifierIndex(max_db_id=100, physical_ids={100: 7})
        >>> index.allocate()
        101
        >>> index.physical_of(100)
        7
    """

    def __init__(self, max_db_id: int, physical_ids: dict[int, int] | None = None):
        """Initialize the index.

        Args:
            max_db_id: Largest dbId observed in the graph at start
            physical_ids: dbId -> Neo4j node id for every existing node
        """
        self.baseline = max_db_id
        self._max_db_id = max_db_id
        self._physical_ids: dict[int, int] = dict(physical_ids or {})

    @property
    def max_db_id(self) -> int:
        """Last allocated (or observed) dbId."""
        return self._max_db_id

    def allocate(self) -> int:
        """Reserve the next dbId."""
        self._max_db_id += 1
        return self._max_db_id

    def physical_of(self, db_id: int) -> int | None:
        """Neo4j node id for a dbId, or None if unknown."""
        return self._physical_ids.get(db_id)

    def record(self, db_id: int, physical_id: int) -> None:
        """Remember the node created for a dbId."""
        self._physical_ids[db_id] = physical_id

    def __contains__(self, db_id: object) -> bool:
        return db_id in self._physical_ids

    def __len__(self) -> int:
        return len(self._physical_ids)


class ReferenceEntityMap:
    """``{database}:{identifier}`` -> dbIds of the reference entities known under it.

    One key can back several entities, e.g. a UniProt accession shared by
    entities in different species-specific databases.
    """

    def __init__(self) -> None:
        self._entries: dict[str, set[int]] = {}

    def register(self, key: str, db_id: int) -> None:
        """Add a dbId under a key."""
        self._entries.setdefault(key, set()).add(db_id)

    def get(self, key: str) -> set[int]:
        """dbIds known under a key (empty if none)."""
        return set(self._entries.get(key, ()))

    def __contains__(self, key: object) -> bool:
        return bool(self._entries.get(key))  # type: ignore[call-overload]

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)


@dataclass
class ImportStats:
    """Counters reported at the end of a run."""

    targets: int = 0
    targets_processed: int = 0
    interactions_added: int = 0
    reference_entities_added: int = 0


@dataclass
class PipelineContext:
    """State of one import run.

    Attributes:
        config: Run configuration
        store: Graph store bound to the run's transaction
        source: Interaction source
        index: dbId allocation and lookup
        reference_entities: Accession -> dbIds
        taxonomy: Taxonomy id -> Taxon dbId
        resources: Interactor resources keyed by id
        added_interactions: External interaction ids already written
        stats: Run counters
        person_node: Node id of the importer's Person, once created
        intact_database_node: Node id of the IntAct ReferenceDatabase, once created
        intact_database_db_id: dbId of the IntAct ReferenceDatabase, once created
    """

    config: ImportConfig
    store: GraphStore
    source: InteractionSource
    index: IdentifierIndex
    reference_entities: ReferenceEntityMap = field(default_factory=ReferenceEntityMap)
    taxonomy: TaxonomyResolver = field(default_factory=lambda: TaxonomyResolver({}))
    resources: dict[int, InteractorResource] = field(default_factory=dict)
    added_interactions: set[int] = field(default_factory=set)
    stats: ImportStats = field(default_factory=ImportStats)
    person_node: int | None = None
    intact_database_node: int | None = None
    intact_database_db_id: int | None = None

    @classmethod
    def from_store(cls, store: GraphStore, source: InteractionSource, config: ImportConfig) -> "PipelineContext":
        """Take the identifier snapshot and build a fresh context.

        Args:
            store: Graph store to snapshot
            source: Opened interaction source
            config: Run configuration

        Returns:
            A context ready for target selection
        """
        max_db_id = store.max_db_id()
        physical_ids = store.physical_ids()
        logger.info(f"Snapshot: {len(physical_ids):,} objects, max dbId {max_db_id}")
        lineage = fetch_lineage if config.resolve_lineage else None
        return cls(
            config=config,
            store=store,
            source=source,
            index=IdentifierIndex(max_db_id, physical_ids),
            taxonomy=TaxonomyResolver(store.taxon_db_ids(), lineage_lookup=lineage),
            resources=source.get_resource_registry(),
        )

    def resource(self, resource_id: int) -> InteractorResource | None:
        """Interactor resource by id, refreshing the cache from the source on a miss."""
        if resource_id not in self.resources:
            self.resources.update(self.source.get_resource_registry())
        return self.resources.get(resource_id)
