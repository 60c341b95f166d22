"""Write the interactions of one target reference entity."""

import logging

from reactome_interactors.graph.models import InteractionNode
from reactome_interactors.graph.schema import INTERACTOR, ORDER, REFERENCE_DATABASE, STOICHIOMETRY, labels_for
from reactome_interactors.intact.models import Interaction
from reactome_interactors.pipeline.context import PipelineContext
from reactome_interactors.pipeline.entities import EntityMaterializer
from reactome_interactors.pipeline.provenance import ProvenanceStamper
from reactome_interactors.pipeline.targets import Target

logger = logging.getLogger(__name__)

INTACT_INTERACTION_URL = "https://www.ebi.ac.uk/intact/pages/interactions/interactions.xhtml?query="
ACCESSION_SEPARATOR = "%20OR%20"


def partner_accession(interaction: Interaction) -> str:
    """Accession of the partner, first whitespace-separated token only."""
    return interaction.interactor_b.acc.strip().split(" ")[0]


def interaction_url(accessions: list[str]) -> str:
    """IntAct query URL for a set of interaction accessions.

    Example:
        >>> interaction_url(["EBI-1", "EBI-2"])
        'https://www.ebi.ac.uk/intact/pages/interactions/interactions.xhtml?query=EBI-1%20OR%20EBI-2'
    """
    return INTACT_INTERACTION_URL + ACCESSION_SEPARATOR.join(accessions)


class InteractionMaterializer:
    """Creates interaction nodes between a target and its partners.

    An external interaction is written at most once per run, whichever side
    it is first reached from. Partners not yet in the graph are created
    through the :class:`EntityMaterializer` and registered so that later
    targets reuse them.
    """

    def __init__(self, context: PipelineContext, entities: EntityMaterializer, stamper: ProvenanceStamper):
        self.context = context
        self.entities = entities
        self.stamper = stamper

    def _partner_nodes(self, interaction: Interaction) -> list[int]:
        ctx = self.context
        accession = partner_accession(interaction)
        known = ctx.reference_entities.get(accession)
        if not known:
            entity = self.entities.materialize(interaction.interactor_b)
            ctx.reference_entities.register(accession, entity.db_id)
            return [entity.node_id]
        nodes = []
        for db_id in sorted(known):
            node_id = ctx.index.physical_of(db_id)
            if node_id is None:
                logger.debug(f"No node for ReferenceEntity {db_id} ({accession})")
                continue
            nodes.append(node_id)
        return nodes

    def process(self, target: Target, interactions: list[Interaction]) -> int:
        """Write the interactions reported for ``target``.

        Args:
            target: The queried reference entity (interactor A)
            interactions: Interactions oriented with the target as interactor A

        Returns:
            Number of interaction nodes created
        """
        ctx = self.context
        source_node = ctx.index.physical_of(target.db_id)
        if source_node is None:
            logger.warning(f"No node for target {target.db_id} ({target.composite_key})")
            return 0

        created = 0
        for interaction in interactions:
            partner = partner_accession(interaction)
            display_name = f"{target.composite_key} <-> {partner} (IntAct)"
            for partner_node in self._partner_nodes(interaction):
                if interaction.id in ctx.added_interactions:
                    continue
                ctx.added_interactions.add(interaction.id)
                self._create(interaction, display_name, source_node, partner_node)
                created += 1

        ctx.stats.interactions_added += created
        return created

    def _create(self, interaction: Interaction, display_name: str, source_node: int, partner_node: int) -> None:
        ctx = self.context
        accessions = list(interaction.interaction_acs)
        node = InteractionNode(
            db_id=ctx.index.allocate(),
            display_name=display_name,
            score=interaction.intact_score,
            accession=accessions,
            pubmed=list(interaction.pubmed_identifiers) if interaction.pubmed_identifiers else None,
            url=interaction_url(accessions),
        )
        node_id = ctx.store.create_node(labels_for(node.schema_class), node.properties())
        ctx.store.create_relationship(
            node_id,
            self.stamper.intact_database(),
            REFERENCE_DATABASE,
            {STOICHIOMETRY: 1, ORDER: 1},
        )
        self.stamper.stamp(node_id)
        ctx.index.record(node.db_id, node_id)

        ctx.store.create_relationship(node_id, source_node, INTERACTOR, {STOICHIOMETRY: 1, ORDER: 1})
        ctx.store.create_relationship(node_id, partner_node, INTERACTOR, {STOICHIOMETRY: 1, ORDER: 2})
        logger.debug(f"Created interaction {node.db_id}: {display_name}")
