"""Create reference entities for interaction partners the graph does not know."""

import logging
from dataclasses import dataclass

from reactome_interactors.exceptions import GraphMutationError
from reactome_interactors.graph.models import ReferenceEntityNode
from reactome_interactors.graph.schema import REFERENCE_DATABASE, SPECIES, STANDARD_RELATIONSHIP_PROPERTIES, labels_for
from reactome_interactors.intact.models import Interactor
from reactome_interactors.pipeline.classification import CHEBI, INTACT, UNIPROT, Classification, classify_interactor
from reactome_interactors.pipeline.context import PipelineContext
from reactome_interactors.pipeline.provenance import ProvenanceStamper

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MaterializedEntity:
    """A reference entity written during the run."""

    db_id: int
    node_id: int


class EntityMaterializer:
    """Turns an unknown interactor into a reference entity node.

    The node is stamped, linked to its reference database and, when the
    interactor's taxon is in the graph, to its species.
    """

    def __init__(self, context: PipelineContext, stamper: ProvenanceStamper):
        self.context = context
        self.stamper = stamper

    def _reference_database_node(self, selector: str) -> int:
        ctx = self.context
        if selector == INTACT:
            return self.stamper.intact_database()
        db_id = {
            UNIPROT: ctx.config.uniprot_database_db_id,
            CHEBI: ctx.config.chebi_database_db_id,
        }[selector]
        node_id = ctx.index.physical_of(db_id)
        if node_id is None:
            raise GraphMutationError(f"ReferenceDatabase {db_id} ({selector}) is not in the graph")
        return node_id

    def build_node(
        self,
        db_id: int,
        interactor: Interactor,
        classification: Classification,
        resource_name: str | None,
    ) -> ReferenceEntityNode:
        """Property model of the reference entity for an interactor."""
        shape = classification.shape
        accession = interactor.acc.split(" ")[0].strip()
        gene_name = interactor.alias_without_species()

        return ReferenceEntityNode(
            db_id=db_id,
            display_name=f"{accession} {gene_name}" if gene_name else accession,
            schema_class=shape.schema_class,
            identifier=classification.identifier,
            variant_identifier=classification.variant_identifier,
            gene_name=[gene_name] if gene_name and shape.uses_gene_name else None,
            name=[interactor.alias] if interactor.alias and shape.uses_alias_as_name else None,
            secondary_identifier=list(interactor.synonyms) or None,
            database_name=shape.database_name or resource_name,
            url=classification.url,
        )

    def materialize(self, interactor: Interactor) -> MaterializedEntity:
        """Create the reference entity for ``interactor``.

        Args:
            interactor: Partner interactor with no matching entity in the graph

        Returns:
            dbId and node id of the new entity

        Raises:
            GraphMutationError: If the entity or one of its links cannot be written
        """
        ctx = self.context
        resource = ctx.resource(interactor.interactor_resource_id)
        resource_name = resource.name if resource is not None else None
        if resource is None:
            logger.debug(f"Unknown resource {interactor.interactor_resource_id} for {interactor.acc}")

        classification = classify_interactor(resource_name, interactor.identifier)
        reference_database = self._reference_database_node(classification.shape.reference_database)

        node = self.build_node(ctx.index.allocate(), interactor, classification, resource_name)
        node_id = ctx.store.create_node(labels_for(node.schema_class), node.properties())
        self.stamper.stamp(node_id)
        ctx.index.record(node.db_id, node_id)

        ctx.store.create_relationship(node_id, reference_database, REFERENCE_DATABASE, STANDARD_RELATIONSHIP_PROPERTIES)

        taxon_db_id = ctx.taxonomy.resolve(interactor.taxid)
        taxon_node = ctx.index.physical_of(taxon_db_id) if taxon_db_id is not None else None
        if taxon_node is not None:
            ctx.store.create_relationship(node_id, taxon_node, SPECIES, STANDARD_RELATIONSHIP_PROPERTIES)
        elif interactor.taxid is not None:
            logger.debug(f"No Taxon in the graph for {interactor.acc} (taxid {interactor.taxid})")

        ctx.stats.reference_entities_added += 1
        logger.debug(f"Created {node.schema_class} {node.db_id} for {interactor.acc}")
        return MaterializedEntity(db_id=node.db_id, node_id=node_id)
