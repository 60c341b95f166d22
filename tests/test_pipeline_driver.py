"""End-to-end tests for the pipeline driver."""

from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest

from reactome_interactors.config import ImportConfig
from reactome_interactors.exceptions import GraphMutationError, InteractionSourceError
from reactome_interactors.intact.models import Interaction, Interactor
from reactome_interactors.pipeline.driver import (
    ImportReport,
    InteractionImportPipeline,
    PipelineState,
    format_elapsed,
)


def clock() -> datetime:
    return datetime(2024, 5, 6, 7, 8, 9)


@pytest.fixture
def p12345_source(
    make_source: Callable[..., Any],
    make_uniprot: Callable[..., Interactor],
    make_interaction: Callable[..., Interaction],
) -> Callable[[], Any]:
    """P12345 interacts with P67890, which the graph does not know."""

    def _p12345_source() -> Any:
        return make_source(
            {
                "UniProt:P12345": [
                    make_interaction(
                        999,
                        make_uniprot("P12345", alias="GENE1"),
                        make_uniprot("P67890", alias="GENE2_HUMAN"),
                        score=0.9,
                        acs=["EBI-1111"],
                        pubmed=["12345"],
                    )
                ]
            }
        )

    return _p12345_source


class TestFormatElapsed:
    """Tests for format_elapsed()."""

    def test_format(self) -> None:
        """Test hours, minutes and seconds formatting."""
        assert format_elapsed(0) == "0:00:00"
        assert format_elapsed(65.9) == "0:01:05"
        assert format_elapsed(3725) == "1:02:05"


class TestImportReport:
    """Tests for ImportReport."""

    def test_summary(self) -> None:
        """Test the completion message."""
        report = ImportReport(interactions_added=12345, reference_entities_added=67, targets=10, elapsed=2)

        assert report.summary() == (
            "12,345 interactions and 67 ReferenceEntity objects have been added to the graph (0:00:02)"
        )


class TestInteractionImportPipeline:
    """Tests for InteractionImportPipeline.run()."""

    def test_end_to_end(self, graph: Any, config: ImportConfig, p12345_source: Callable[[], Any]) -> None:
        """Test one target with one unknown partner."""
        source = p12345_source()
        pipeline = InteractionImportPipeline(graph, source, config, clock=clock)

        report = pipeline.run()

        assert pipeline.state is PipelineState.DONE
        assert report.interactions_added == 1
        assert report.reference_entities_added == 1
        assert report.targets == 1
        assert source.queried == ["UniProt:P12345"]

        partner = next(p for p in graph.with_label("ReferenceEntity") if p["identifier"] == "P67890")
        assert partner["displayName"] == "UniProt:P67890 GENE2"
        assert partner["schemaClass"] == "ReferenceGeneProduct"

        interactions = graph.with_label("UndirectedInteraction")
        assert len(interactions) == 1
        assert interactions[0]["displayName"] == "UniProt:P12345 <-> UniProt:P67890 (IntAct)"
        assert interactions[0]["score"] == 0.9

        interaction_node = graph.node_id_of(interactions[0]["dbId"])
        partner_node = graph.node_id_of(partner["dbId"])
        participants = {t: p["order"] for s, t, p in graph.rels("interactor") if s == interaction_node}
        assert participants == {graph.node_id_of(100): 1, partner_node: 2}

        stamped = [t for _, t, _ in graph.rels("created")]
        assert interaction_node in stamped
        assert partner_node in stamped
        # one edit each for the IntAct database, the partner and the interaction
        assert len(graph.with_label("InstanceEdit")) == 3
        assert len(graph.with_label("Person")) == 1
        assert all(e["dateTime"] == "2024-05-06 07:08:09" for e in graph.with_label("InstanceEdit"))

    def test_new_ids_are_monotonic_and_unique(
        self, graph: Any, config: ImportConfig, p12345_source: Callable[[], Any]
    ) -> None:
        """Test every created node gets a fresh dbId above the starting maximum."""
        baseline = graph.max_db_id()
        before = {p["dbId"] for p in graph.with_label("DatabaseObject")}

        InteractionImportPipeline(graph, p12345_source(), config, clock=clock).run()

        created = [p["dbId"] for p in graph.with_label("DatabaseObject") if p["dbId"] not in before]
        assert len(created) == len(set(created))
        assert sorted(created) == list(range(baseline + 1, baseline + 1 + len(created)))

    def test_source_closed_and_cleaned(
        self, graph: Any, config: ImportConfig, p12345_source: Callable[[], Any]
    ) -> None:
        """Test finalizing closes the source and removes its files."""
        source = p12345_source()

        InteractionImportPipeline(graph, source, config).run()

        assert source.opened
        assert source.closed
        assert source.cleaned_up

    def test_interaction_seen_from_both_sides(
        self,
        graph: Any,
        config: ImportConfig,
        add_target: Callable[..., int],
        make_source: Callable[..., Any],
        make_uniprot: Callable[..., Interactor],
        make_interaction: Callable[..., Interaction],
    ) -> None:
        """Test an interaction between two targets is written once."""
        add_target(graph, 200, "P67890")
        a, b = make_uniprot("P12345"), make_uniprot("P67890")
        source = make_source(
            {
                "UniProt:P12345": [make_interaction(1, a, b)],
                "UniProt:P67890": [make_interaction(1, b, a)],
            }
        )

        report = InteractionImportPipeline(graph, source, config).run()

        assert report.targets == 2
        assert report.interactions_added == 1
        assert report.reference_entities_added == 0
        assert len(graph.with_label("UndirectedInteraction")) == 1

    def test_no_targets(self, empty_graph: Any, config: ImportConfig, source: Any) -> None:
        """Test an empty graph completes with nothing added."""
        report = InteractionImportPipeline(empty_graph, source, config).run()

        assert report.interactions_added == 0
        assert report.reference_entities_added == 0
        assert source.queried == []
        assert empty_graph.nodes == {}

    def test_periodic_reconnect(self, graph: Any, source: Any, add_target: Callable[..., int]) -> None:
        """Test the source is reconnected after every batch of targets."""
        for i in range(4):
            add_target(graph, 1000 + 10 * i, f"Q0000{i}")
        config = ImportConfig(reconnect_every=2, show_progress=False)

        InteractionImportPipeline(graph, source, config).run()

        assert len(source.queried) == 5
        assert source.reconnects == 2

    def test_reconnect_disabled(self, graph: Any, source: Any) -> None:
        """Test reconnect_every=0 never reconnects."""
        InteractionImportPipeline(graph, source, ImportConfig(reconnect_every=0, show_progress=False)).run()

        assert source.reconnects == 0

    def test_rerun_duplicates_interactions(
        self, graph: Any, config: ImportConfig, p12345_source: Callable[[], Any]
    ) -> None:
        """Test that a second run writes every interaction again.

        Deduplication only spans one run; repeating an import against an
        unchanged graph is a known source of duplicate interactions.
        """
        first = InteractionImportPipeline(graph, p12345_source(), config).run()
        second = InteractionImportPipeline(graph, p12345_source(), config).run()

        assert first.interactions_added == 1
        assert second.interactions_added == 1
        # the partner written by the first run is reused
        assert second.reference_entities_added == 0
        assert len(graph.with_label("UndirectedInteraction")) == 2
        assert len([p for p in graph.with_label("ReferenceEntity") if p["identifier"] == "P67890"]) == 1

    def test_source_unavailable(self, graph: Any, config: ImportConfig, make_source: Callable[..., Any]) -> None:
        """Test a source failure aborts before any mutation."""
        nodes_before = len(graph.nodes)
        source = make_source(fail_on_open=True)
        pipeline = InteractionImportPipeline(graph, source, config)

        with pytest.raises(InteractionSourceError):
            pipeline.run()

        assert pipeline.state is PipelineState.FAILED
        assert len(graph.nodes) == nodes_before
        assert source.closed
        assert source.cleaned_up

    def test_mutation_failure(self, graph: Any, config: ImportConfig, p12345_source: Callable[[], Any]) -> None:
        """Test a store failure while expanding fails the run but still cleans up."""
        graph.fail_on_create_label = "UndirectedInteraction"
        source = p12345_source()
        pipeline = InteractionImportPipeline(graph, source, config)

        with pytest.raises(GraphMutationError):
            pipeline.run()

        assert pipeline.state is PipelineState.FAILED
        assert source.closed
        assert source.cleaned_up

    def test_pipeline_runs_once(self, graph: Any, config: ImportConfig, source: Any) -> None:
        """Test a finished pipeline cannot be run again."""
        pipeline = InteractionImportPipeline(graph, source, config)
        pipeline.run()

        with pytest.raises(RuntimeError):
            pipeline.run()
