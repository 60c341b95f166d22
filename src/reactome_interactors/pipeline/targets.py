"""Find the reference entities whose interactions should be imported."""

import logging
from dataclasses import dataclass

from reactome_interactors.exceptions import GraphLookupError
from reactome_interactors.pipeline.context import PipelineContext

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Target:
    """A reference entity used in a modelled process.

    Attributes:
        db_id: dbId of the reference entity
        database_name: displayName of its ReferenceDatabase
        identifier: Variant identifier if present, otherwise identifier
    """

    db_id: int
    database_name: str
    identifier: str

    @property
    def composite_key(self) -> str:
        """``{database}:{identifier}``, the key interactions are looked up by."""
        return f"{self.database_name}:{self.identifier}"


class TargetSelector:
    """Scans the graph's reference entities.

    Every entity with an identifier and a reference database is registered
    in the context's accession map, target or not, so that partners already
    in the graph are reused. Entities referred to through one of the
    configured relationship types are returned as targets.
    """

    def __init__(self, context: PipelineContext):
        self.context = context

    def select(self) -> list[Target]:
        """Register known accessions and return the enrichment targets.

        A lookup failure for a single entity is logged and the entity skipped.
        """
        ctx = self.context
        relationship_types = ctx.config.target_relationship_types
        records = ctx.store.reference_entities()
        logger.info(f"Scanning {len(records):,} reference entities")

        targets: list[Target] = []
        for record in records:
            identifier = record.usable_identifier
            if not identifier:
                logger.debug(f"ReferenceEntity {record.db_id} has no identifier, skipping")
                continue
            try:
                database_name = ctx.store.reference_database_name(record.db_id)
                if database_name is None:
                    logger.debug(f"ReferenceEntity {record.db_id} has no reference database, skipping")
                    continue
                target = Target(db_id=record.db_id, database_name=database_name, identifier=identifier)
                ctx.reference_entities.register(target.composite_key, record.db_id)
                if ctx.store.is_enrichment_target(record.db_id, relationship_types):
                    targets.append(target)
            except GraphLookupError as e:
                logger.warning(f"Skipping ReferenceEntity {record.db_id}: {e}")

        ctx.stats.targets = len(targets)
        logger.info(f"{len(targets):,} target reference entities, {len(ctx.reference_entities):,} known accessions")
        return targets
