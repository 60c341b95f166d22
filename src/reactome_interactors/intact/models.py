"""Record types served by the IntAct interaction source.

These are read-only views over the staged interaction data. Accessions are
stored as ``{ResourceName}:{raw identifier}`` (e.g. ``UniProt:P12345``,
``ChEBI:16236``) so they can be matched directly against the
``{database}:{identifier}`` keys built from the graph.
"""

from dataclasses import dataclass, field

SPECIES_SUFFIX_SEPARATOR = "_"


@dataclass
class InteractorResource:
    """A database that interactor accessions belong to.

    Attributes:
        id: Internal resource id
        name: Registry name (e.g. "UniProt", "ChEBI", "IntAct")
        url: Access URL template, if known
    """

    id: int
    name: str
    url: str | None = None


@dataclass
class Interactor:
    """One side of an interaction.

    Attributes:
        acc: Prefixed accession, e.g. "UniProt:P12345"
        interactor_resource_id: Id of the owning InteractorResource
        alias: Gene name or short label (may carry a species suffix)
        taxid: NCBI taxonomy id, None for non-organism interactors
        synonyms: Alternative names
    """

    acc: str
    interactor_resource_id: int
    alias: str | None = None
    taxid: int | None = None
    synonyms: list[str] = field(default_factory=list)

    @property
    def identifier(self) -> str:
        """Accession without the resource prefix."""
        token = self.acc.split(" ")[0].strip()
        return token.split(":", 1)[1] if ":" in token else token

    def alias_without_species(self) -> str | None:
        """Alias with a trailing ``_SPECIES`` mnemonic removed (``EGFR_HUMAN`` -> ``EGFR``)."""
        if not self.alias:
            return None
        head, sep, tail = self.alias.rpartition(SPECIES_SUFFIX_SEPARATOR)
        if sep and head and tail.isupper() and tail.isalpha():
            return head
        return self.alias


@dataclass
class Interaction:
    """A clustered binary interaction.

    ``interactor_a`` is always the interactor the interaction was looked up by.

    Attributes:
        id: Internal interaction id, unique within the source
        interactor_a: Queried interactor
        interactor_b: Partner interactor
        intact_score: IntAct MI-score
        interaction_acs: IntAct interaction accessions (EBI-...)
        pubmed_identifiers: Supporting PubMed ids, if any
    """

    id: int
    interactor_a: Interactor
    interactor_b: Interactor
    intact_score: float | None = None
    interaction_acs: list[str] = field(default_factory=list)
    pubmed_identifiers: list[str] | None = None
