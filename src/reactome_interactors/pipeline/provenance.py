"""Creation provenance for every node the importer writes.

Each created node gets its own InstanceEdit, linked ``(edit)-[:created]->(node)``
and ``(person)-[:author]->(edit)``. The Person and the IntAct ReferenceDatabase
are created at most once per run, on first use.
"""

import logging
from collections.abc import Callable
from datetime import datetime

from reactome_interactors.graph.models import InstanceEditNode, PersonNode, ReferenceDatabaseNode
from reactome_interactors.graph.schema import AUTHOR, CREATED, STANDARD_RELATIONSHIP_PROPERTIES, labels_for
from reactome_interactors.pipeline.context import PipelineContext

logger = logging.getLogger(__name__)

IMPORTER_NAME = "Interactions Importer"
IMPORTER_SURNAME = "Script"
IMPORTER_INITIAL = "AF"

INTACT_NAME = "IntAct"
INTACT_URL = "https://www.ebi.ac.uk/intact"
INTACT_ACCESS_URL = "https://www.ebi.ac.uk/intact/query/###ID###"

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class ProvenanceStamper:
    """Writes InstanceEdits and owns the run's Person and IntAct nodes."""

    def __init__(self, context: PipelineContext, clock: Callable[[], datetime] = datetime.now):
        """Initialize the stamper.

        Args:
            context: Run state; the singletons are kept there
            clock: Source of edit timestamps
        """
        self.context = context
        self.clock = clock

    def person(self) -> int:
        """Node id of the importer's Person, creating it on first use."""
        ctx = self.context
        if ctx.person_node is None:
            node = PersonNode(
                db_id=ctx.index.allocate(),
                display_name=IMPORTER_NAME,
                firstname=IMPORTER_NAME,
                surname=IMPORTER_SURNAME,
                initial=IMPORTER_INITIAL,
            )
            ctx.person_node = ctx.store.create_node(labels_for(node.schema_class), node.properties())
            ctx.index.record(node.db_id, ctx.person_node)
            logger.debug(f"Created Person {node.db_id}")
        return ctx.person_node

    def intact_database(self) -> int:
        """Node id of the IntAct ReferenceDatabase, creating and stamping it on first use."""
        ctx = self.context
        if ctx.intact_database_node is None:
            node = ReferenceDatabaseNode(
                db_id=ctx.index.allocate(),
                display_name=INTACT_NAME,
                name=[INTACT_NAME],
                url=INTACT_URL,
                access_url=INTACT_ACCESS_URL,
            )
            physical_id = ctx.store.create_node(labels_for(node.schema_class), node.properties())
            ctx.index.record(node.db_id, physical_id)
            ctx.intact_database_node = physical_id
            ctx.intact_database_db_id = node.db_id
            self.stamp(physical_id)
            logger.debug(f"Created ReferenceDatabase {node.db_id} for {INTACT_NAME}")
        return ctx.intact_database_node

    def stamp(self, node_id: int) -> int:
        """Record the creation of ``node_id``.

        Args:
            node_id: Neo4j id of the node just created

        Returns:
            Neo4j id of the new InstanceEdit
        """
        ctx = self.context
        author = self.person()
        timestamp = self.clock().strftime(TIMESTAMP_FORMAT)
        edit = InstanceEditNode(
            db_id=ctx.index.allocate(),
            display_name=f"{IMPORTER_NAME}, {timestamp}",
            date_time=timestamp,
        )
        edit_id = ctx.store.create_node(labels_for(edit.schema_class), edit.properties())
        ctx.index.record(edit.db_id, edit_id)
        ctx.store.create_relationship(edit_id, node_id, CREATED, STANDARD_RELATIONSHIP_PROPERTIES)
        ctx.store.create_relationship(author, edit_id, AUTHOR, STANDARD_RELATIONSHIP_PROPERTIES)
        return edit_id
