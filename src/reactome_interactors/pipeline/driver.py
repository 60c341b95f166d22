"""One-pass orchestration of an interaction import.

IDLE -> INITIALIZING -> SCANNING -> EXPANDING -> FINALIZING -> DONE

Any error before FINALIZING moves the driver to FAILED; the interaction
source is still closed and its temporary files removed, then the error is
re-raised so the caller can roll the transaction back.
"""

import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from tqdm import tqdm  # type: ignore[import-untyped]

from reactome_interactors.config import ImportConfig
from reactome_interactors.graph.store import GraphStore
from reactome_interactors.intact.source import InteractionSource
from reactome_interactors.pipeline.context import PipelineContext
from reactome_interactors.pipeline.entities import EntityMaterializer
from reactome_interactors.pipeline.interactions import InteractionMaterializer
from reactome_interactors.pipeline.provenance import ProvenanceStamper
from reactome_interactors.pipeline.targets import Target, TargetSelector

logger = logging.getLogger(__name__)


class PipelineState(Enum):
    """Lifecycle of a pipeline run."""

    IDLE = "idle"
    INITIALIZING = "initializing"
    SCANNING = "scanning"
    EXPANDING = "expanding"
    FINALIZING = "finalizing"
    DONE = "done"
    FAILED = "failed"


def format_elapsed(seconds: float) -> str:
    """Format a duration as ``H:MM:SS``.

    Example:
        >>> format_elapsed(3725.4)
        '1:02:05'
    """
    minutes, secs = divmod(int(seconds), 60)
    hours, minutes = divmod(minutes, 60)
    return f"{hours}:{minutes:02d}:{secs:02d}"


@dataclass
class ImportReport:
    """Outcome of a completed run."""

    interactions_added: int
    reference_entities_added: int
    targets: int
    elapsed: float

    @property
    def elapsed_formatted(self) -> str:
        return format_elapsed(self.elapsed)

    def summary(self) -> str:
        """One-line completion message."""
        return (
            f"{self.interactions_added:,} interactions and {self.reference_entities_added:,} "
            f"ReferenceEntity objects have been added to the graph ({self.elapsed_formatted})"
        )


class InteractionImportPipeline:
    """Drives one import over a graph store and an interaction source.

    Example:
        >>> pipeline = InteractionImportPipeline(Neo4jGraphStore(tx, reader), IntActInteractionSource(config), config)
        >>> report = pipeline.run()
        >>> print(report.summary())
    """

    def __init__(
        self,
        store: GraphStore,
        source: InteractionSource,
        config: ImportConfig | None = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize the pipeline.

        Args:
            store: Graph store; all mutations go through it
            source: Interaction source, not yet opened
            config: Run configuration
            clock: Timestamp source for provenance edits
        """
        self.store = store
        self.source = source
        self.config = config or ImportConfig()
        self.clock = clock
        self.state = PipelineState.IDLE
        self.context: PipelineContext | None = None

    def _transition(self, state: PipelineState) -> None:
        logger.debug(f"Pipeline {self.state.value} -> {state.value}")
        self.state = state

    def run(self) -> ImportReport:
        """Execute the import.

        Returns:
            Counters and elapsed time of the run

        Raises:
            InteractionImportError: On a fatal source or store error
        """
        if self.state is not PipelineState.IDLE:
            raise RuntimeError(f"Pipeline already ran (state: {self.state.value})")
        started = time.monotonic()

        try:
            self._transition(PipelineState.INITIALIZING)
            self.source.open()
            context = PipelineContext.from_store(self.store, self.source, self.config)
            self.context = context

            self._transition(PipelineState.SCANNING)
            targets = TargetSelector(context).select()

            self._transition(PipelineState.EXPANDING)
            self._expand(context, targets)
        except Exception:
            self._transition(PipelineState.FAILED)
            logger.error("Interaction import failed, cleaning up")
            self._finalize()
            raise

        self._transition(PipelineState.FINALIZING)
        self._finalize()
        self._transition(PipelineState.DONE)

        report = ImportReport(
            interactions_added=context.stats.interactions_added,
            reference_entities_added=context.stats.reference_entities_added,
            targets=context.stats.targets,
            elapsed=time.monotonic() - started,
        )
        logger.info(report.summary())
        return report

    def _expand(self, context: PipelineContext, targets: list[Target]) -> None:
        stamper = ProvenanceStamper(context, clock=self.clock)
        entities = EntityMaterializer(context, stamper)
        interactions = InteractionMaterializer(context, entities, stamper)
        reconnect_every = self.config.reconnect_every

        for target in tqdm(targets, desc="Adding interactions", unit="target", disable=not self.config.show_progress):
            if reconnect_every > 0 and context.stats.targets_processed and (
                context.stats.targets_processed % reconnect_every == 0
            ):
                logger.debug(f"Reconnecting to the interaction source after {context.stats.targets_processed} targets")
                self.source.reconnect()
            records = self.source.get_interactions(target.composite_key)
            interactions.process(target, records)
            context.stats.targets_processed += 1

    def _finalize(self) -> None:
        self.source.close()
        self.source.cleanup()
        logger.info("Interaction source closed")
