"""The interaction import pipeline."""

from reactome_interactors.pipeline.classification import EntityShape, classify_interactor
from reactome_interactors.pipeline.context import IdentifierIndex, PipelineContext, ReferenceEntityMap
from reactome_interactors.pipeline.driver import ImportReport, InteractionImportPipeline, PipelineState
from reactome_interactors.pipeline.entities import EntityMaterializer
from reactome_interactors.pipeline.interactions import InteractionMaterializer
from reactome_interactors.pipeline.provenance import ProvenanceStamper
from reactome_interactors.pipeline.targets import Target, TargetSelector

__all__ = [
    "EntityMaterializer",
    "EntityShape",
    "IdentifierIndex",
    "ImportReport",
    "InteractionImportPipeline",
    "InteractionMaterializer",
    "PipelineContext",
    "PipelineState",
    "ProvenanceStamper",
    "ReferenceEntityMap",
    "Target",
    "TargetSelector",
    "classify_interactor",
]
