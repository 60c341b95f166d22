"""IntAct interaction data: record models, MITAB parsing and SQLite staging."""

from reactome_interactors.intact.database import InteractorsDatabase, build_interactors_database
from reactome_interactors.intact.models import Interaction, Interactor, InteractorResource
from reactome_interactors.intact.source import IntActInteractionSource, InteractionSource

__all__ = [
    "IntActInteractionSource",
    "Interaction",
    "InteractionSource",
    "Interactor",
    "InteractorResource",
    "InteractorsDatabase",
    "build_interactors_database",
]
