"""Pytest configuration for reactome-interactors tests.

Provides an in-memory graph store and interaction source so pipeline
components can be exercised without Neo4j or IntAct downloads.
"""

from collections.abc import Callable, Iterable, Mapping
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

from reactome_interactors.config import CHEBI_REFERENCE_DATABASE_DB_ID, UNIPROT_REFERENCE_DATABASE_DB_ID, ImportConfig
from reactome_interactors.exceptions import GraphLookupError, GraphMutationError, InteractionSourceError
from reactome_interactors.graph.store import ReferenceEntityRecord
from reactome_interactors.intact.models import Interaction, Interactor, InteractorResource

load_dotenv()

HUMAN_DB_ID = 48887

RESOURCES = {
    1: InteractorResource(id=1, name="UniProt", url="https://www.uniprot.org/uniprotkb/##ID##/entry"),
    2: InteractorResource(id=2, name="ChEBI", url="https://www.ebi.ac.uk/chebi/searchId.do?chebiId=CHEBI:##ID##"),
    3: InteractorResource(id=3, name="IntAct", url="https://www.ebi.ac.uk/intact/query/##ID##"),
}

SAMPLE_MITAB = "\n".join(
    [
        "#ID(s) interactor A\tID(s) interactor B\t...",
        "\t".join(
            [
                "uniprotkb:P12345",
                "uniprotkb:P67890",
                "intact:EBI-100",
                "intact:EBI-200",
                "psi-mi:gen1_human(display_long)|uniprotkb:GEN1(gene name)|uniprotkb:G1ALT(gene name synonym)",
                "uniprotkb:GEN2(gene name)",
                'psi-mi:"MI:0018"(two hybrid)',
                "Smith et al. (2020)",
                "pubmed:12345|imex:IM-1",
                "taxid:9606(human)|taxid:9606(Homo sapiens)",
                "taxid:9606(human)",
                'psi-mi:"MI:0915"(physical association)',
                'psi-mi:"MI:0469"(IntAct)',
                "intact:EBI-1111|intact:EBI-2222|imex:IM-1-1",
                "intact-miscore:0.56",
            ]
        ),
        "\t".join(
            [
                "uniprotkb:P67890",
                'chebi:"CHEBI:16236"',
                "intact:EBI-200",
                "intact:EBI-300",
                "uniprotkb:GEN2(gene name)",
                "psi-mi:ethanol(display_short)",
                'psi-mi:"MI:0018"(two hybrid)',
                "-",
                "-",
                "taxid:9606(human)",
                "taxid:-2(chemical synthesis)",
                'psi-mi:"MI:0915"(physical association)',
                'psi-mi:"MI:0469"(IntAct)',
                "intact:EBI-3333",
                "intact-miscore:0.4",
            ]
        ),
    ]
)


class InMemoryGraphStore:
    """GraphStore keeping nodes and relationships in dictionaries.

    Node ids start at 1000 so they never coincide with dbIds in tests.
    """

    def __init__(self) -> None:
        self.nodes: dict[int, dict[str, Any]] = {}
        self.relationships: list[tuple[int, int, str, dict[str, Any]]] = []
        self.fail_on_create_label: str | None = None
        self.lookup_failures: set[int] = set()
        self._next_id = 1000

    # Seeding helpers

    def add(self, labels: Iterable[str], **properties: Any) -> int:
        node_id = self._next_id
        self._next_id += 1
        self.nodes[node_id] = {"labels": tuple(labels), "props": dict(properties)}
        return node_id

    def link(self, source: int, target: int, rel_type: str, **properties: Any) -> None:
        self.relationships.append((source, target, rel_type, dict(properties)))

    # Inspection helpers

    def with_label(self, label: str) -> list[dict[str, Any]]:
        return [n["props"] for n in self.nodes.values() if label in n["labels"]]

    def node_id_of(self, db_id: int) -> int:
        return next(i for i, n in self.nodes.items() if n["props"].get("dbId") == db_id)

    def props_of(self, node_id: int) -> dict[str, Any]:
        return self.nodes[node_id]["props"]

    def rels(self, rel_type: str) -> list[tuple[int, int, dict[str, Any]]]:
        return [(s, t, p) for s, t, r, p in self.relationships if r == rel_type]

    def rels_from(self, node_id: int, rel_type: str) -> list[int]:
        return [t for s, t, _ in self.rels(rel_type) if s == node_id]

    # GraphStore

    def max_db_id(self) -> int:
        return max((n["props"].get("dbId", 0) for n in self.nodes.values()), default=0)

    def physical_ids(self) -> dict[int, int]:
        return {n["props"]["dbId"]: i for i, n in self.nodes.items() if "dbId" in n["props"]}

    def taxon_db_ids(self) -> dict[int, int]:
        return {int(n["props"]["taxId"]): n["props"]["dbId"] for n in self.nodes.values() if "Taxon" in n["labels"]}

    def reference_entities(self) -> list[ReferenceEntityRecord]:
        return [
            ReferenceEntityRecord(
                db_id=n["props"]["dbId"],
                identifier=n["props"].get("identifier"),
                variant_identifier=n["props"].get("variantIdentifier"),
            )
            for n in self.nodes.values()
            if "ReferenceEntity" in n["labels"]
        ]

    def reference_database_name(self, db_id: int) -> str | None:
        if db_id in self.lookup_failures:
            raise GraphLookupError(f"lookup failed for {db_id}")
        node_id = self.node_id_of(db_id)
        for target in self.rels_from(node_id, "referenceDatabase"):
            if "ReferenceDatabase" in self.nodes[target]["labels"]:
                return str(self.props_of(target)["displayName"])
        return None

    def is_enrichment_target(self, db_id: int, relationship_types: Iterable[str]) -> bool:
        types = set(relationship_types)
        node_id = self.node_id_of(db_id)
        referrers = {s for s, t, _ in self.rels("referenceEntity") if t == node_id}
        return any(t in referrers and r in types for _, t, r, _ in self.relationships)

    def create_node(self, labels: Iterable[str], properties: Mapping[str, Any]) -> int:
        labels = tuple(labels)
        if self.fail_on_create_label in labels:
            raise GraphMutationError(f"cannot create {labels[0]}")
        return self.add(labels, **properties)

    def create_relationship(
        self,
        source: int,
        target: int,
        rel_type: str,
        properties: Mapping[str, Any] | None = None,
    ) -> None:
        if source not in self.nodes or target not in self.nodes:
            raise GraphMutationError(f"missing node for {rel_type} {source}->{target}")
        self.link(source, target, rel_type, **dict(properties or {}))


class FakeInteractionSource:
    """InteractionSource serving canned interactions by accession."""

    def __init__(
        self,
        interactions: dict[str, list[Interaction]] | None = None,
        resources: dict[int, InteractorResource] | None = None,
        fail_on_open: bool = False,
    ):
        self.interactions = interactions or {}
        self.resources = dict(RESOURCES if resources is None else resources)
        self.fail_on_open = fail_on_open
        self.queried: list[str] = []
        self.opened = False
        self.closed = False
        self.cleaned_up = False
        self.reconnects = 0

    def open(self) -> None:
        if self.fail_on_open:
            raise InteractionSourceError("IntAct is unavailable")
        self.opened = True

    def get_interactions(self, composite_key: str) -> list[Interaction]:
        self.queried.append(composite_key)
        return list(self.interactions.get(composite_key, []))

    def get_resource_registry(self) -> dict[int, InteractorResource]:
        return dict(self.resources)

    def reconnect(self) -> None:
        self.reconnects += 1

    def close(self) -> None:
        self.closed = True

    def cleanup(self) -> None:
        self.cleaned_up = True


def _uniprot(accession: str, alias: str | None = None, taxid: int | None = 9606, **kwargs: Any) -> Interactor:
    return Interactor(acc=f"UniProt:{accession}", interactor_resource_id=1, alias=alias, taxid=taxid, **kwargs)


def _interaction(
    interaction_id: int,
    a: Interactor,
    b: Interactor,
    score: float | None = 0.56,
    acs: list[str] | None = None,
    pubmed: list[str] | None = None,
) -> Interaction:
    return Interaction(
        id=interaction_id,
        interactor_a=a,
        interactor_b=b,
        intact_score=score,
        interaction_acs=acs if acs is not None else [f"EBI-{interaction_id}"],
        pubmed_identifiers=pubmed,
    )


def _add_target(store: InMemoryGraphStore, db_id: int, identifier: str, used: bool = True) -> int:
    entity = store.add(
        ("ReferenceGeneProduct", "ReferenceSequence", "ReferenceEntity", "DatabaseObject"),
        dbId=db_id,
        displayName=f"UniProt:{identifier}",
        identifier=identifier,
    )
    store.link(entity, store.node_id_of(UNIPROT_REFERENCE_DATABASE_DB_ID), "referenceDatabase")
    physical_entity = store.add(("EntityWithAccessionedSequence", "DatabaseObject"), dbId=db_id + 1)
    store.link(physical_entity, entity, "referenceEntity")
    if used:
        reaction = store.add(("Reaction", "DatabaseObject"), dbId=db_id + 2)
        store.link(reaction, physical_entity, "input")
    return entity


@pytest.fixture
def make_uniprot() -> Callable[..., Interactor]:
    """Build a UniProt interactor: ``make_uniprot("P12345", alias="GENE1")``."""
    return _uniprot


@pytest.fixture
def make_interaction() -> Callable[..., Interaction]:
    """Build an interaction oriented with its first interactor as the queried side."""
    return _interaction


@pytest.fixture
def make_source() -> Callable[..., FakeInteractionSource]:
    """Build a canned interaction source: ``make_source({"UniProt:P12345": [...]})``."""
    return FakeInteractionSource


@pytest.fixture
def source() -> FakeInteractionSource:
    """An interaction source with no interactions."""
    return FakeInteractionSource()


@pytest.fixture
def add_target() -> Callable[..., int]:
    """Seed a UniProt reference entity, optionally referenced by a reaction input.

    Called as ``add_target(store, db_id, identifier, used=True)``; returns the entity's node id.
    """
    return _add_target


@pytest.fixture
def empty_graph() -> InMemoryGraphStore:
    """A graph with no nodes at all."""
    return InMemoryGraphStore()


@pytest.fixture
def graph() -> InMemoryGraphStore:
    """A small Reactome graph: UniProt/ChEBI databases, human, and P12345 used as a reaction input."""
    store = InMemoryGraphStore()
    store.add(("ReferenceDatabase", "DatabaseObject"), dbId=UNIPROT_REFERENCE_DATABASE_DB_ID, displayName="UniProt")
    store.add(("ReferenceDatabase", "DatabaseObject"), dbId=CHEBI_REFERENCE_DATABASE_DB_ID, displayName="ChEBI")
    store.add(("Taxon", "DatabaseObject"), dbId=HUMAN_DB_ID, displayName="Homo sapiens", taxId="9606")
    _add_target(store, 100, "P12345")
    return store


@pytest.fixture
def human_db_id() -> int:
    """dbId of the Homo sapiens Taxon in the graph fixture."""
    return HUMAN_DB_ID


@pytest.fixture
def config() -> ImportConfig:
    """Pipeline configuration without progress bars."""
    return ImportConfig(show_progress=False)


@pytest.fixture
def sample_mitab() -> str:
    """Header plus two IntAct MITAB lines: P12345-P67890 and P67890-ethanol."""
    return SAMPLE_MITAB


@pytest.fixture
def mitab_file(tmp_path: Path) -> Path:
    """A two-line IntAct MITAB file."""
    path = tmp_path / "intact-micluster.txt"
    path.write_text(SAMPLE_MITAB + "\n", encoding="utf-8")
    return path
