"""Decide what kind of reference entity an unknown interactor becomes.

The decision is a lookup in :data:`CLASSIFICATION_RULES`: the first rule whose
marker occurs in the interactor's resource name wins, and anything unmatched
falls back to :data:`GENERIC`. Each :class:`EntityShape` carries, as data, the
schema class to create, the reference database to link to, how to parse the
identifier and how to build the cross-reference URL.
"""

from dataclasses import dataclass

from reactome_interactors.graph.schema import REFERENCE_GENE_PRODUCT, REFERENCE_ISOFORM, REFERENCE_MOLECULE

# Reference database selectors
UNIPROT = "uniprot"
CHEBI = "chebi"
INTACT = "intact"

VARIANT_SEPARATOR = "-"
PROCESSED_CHAIN_MARKER = "PRO"


@dataclass(frozen=True)
class EntityShape:
    """How an interactor of one kind is written to the graph.

    Attributes:
        schema_class: Reactome schema class of the new node
        reference_database: Which ReferenceDatabase node to link (UNIPROT, CHEBI or INTACT)
        url_template: Cross-reference URL; ``{raw}``, ``{identifier}`` and ``{variant}`` are filled in
        database_name: Fixed databaseName; None uses the interactor's resource name
        splits_variant: Whether ``-`` separates the canonical identifier from a variant suffix
        processed_chain_url_template: URL used instead when the variant suffix names a processed chain
        uses_alias_as_name: Store the alias as ``name``
        uses_gene_name: Store the alias without species as ``geneName``
    """

    schema_class: str
    reference_database: str
    url_template: str
    database_name: str | None = None
    splits_variant: bool = False
    processed_chain_url_template: str | None = None
    uses_alias_as_name: bool = False
    uses_gene_name: bool = True


@dataclass(frozen=True)
class Classification:
    """Result of classifying one interactor."""

    shape: EntityShape
    identifier: str
    variant_identifier: str | None
    url: str


@dataclass(frozen=True)
class ClassificationRule:
    """Maps a resource-name marker to a shape (and a shape for variant accessions)."""

    marker: str
    shape: EntityShape
    variant_shape: EntityShape | None = None


GENE_PRODUCT = EntityShape(
    schema_class=REFERENCE_GENE_PRODUCT,
    reference_database=UNIPROT,
    url_template="https://www.uniprot.org/uniprotkb/{identifier}/entry",
    splits_variant=True,
)

ISOFORM = EntityShape(
    schema_class=REFERENCE_ISOFORM,
    reference_database=UNIPROT,
    url_template="https://www.uniprot.org/uniprotkb/{raw}/entry",
    splits_variant=True,
    processed_chain_url_template="https://www.uniprot.org/uniprotkb/{identifier}/entry#{variant}",
)

MOLECULE = EntityShape(
    schema_class=REFERENCE_MOLECULE,
    reference_database=CHEBI,
    url_template="https://www.ebi.ac.uk/chebi/searchId.do?chebiId=CHEBI:{raw}",
    uses_alias_as_name=True,
    uses_gene_name=False,
)

GENERIC = EntityShape(
    schema_class=REFERENCE_GENE_PRODUCT,
    reference_database=INTACT,
    url_template="https://www.ebi.ac.uk/intact/query/{raw}",
    database_name="IntAct",
)

CLASSIFICATION_RULES: tuple[ClassificationRule, ...] = (
    ClassificationRule(marker="uniprot", shape=GENE_PRODUCT, variant_shape=ISOFORM),
    ClassificationRule(marker="chebi", shape=MOLECULE),
)


def select_shape(resource_name: str | None, raw_identifier: str) -> EntityShape:
    """Pick the entity shape for an interactor.

    Args:
        resource_name: Name of the interactor's resource (e.g. "UniProt"); None if unknown
        raw_identifier: Accession without its resource prefix

    Returns:
        The matching shape, :data:`GENERIC` if no rule applies

    Example:
        >>> select_shape("UniProt", "P12345-2").schema_class
        'ReferenceIsoform'
        >>> select_shape("ChEBI", "16236").schema_class
        'ReferenceMolecule'
        >>> select_shape("IntAct", "EBI-1234").reference_database
        'intact'
    """
    name = (resource_name or "").lower()
    for rule in CLASSIFICATION_RULES:
        if rule.marker in name:
            if rule.variant_shape is not None and VARIANT_SEPARATOR in raw_identifier:
                return rule.variant_shape
            return rule.shape
    return GENERIC


def classify_interactor(resource_name: str | None, raw_identifier: str) -> Classification:
    """Classify an interactor and derive its identifiers and URL.

    Args:
        resource_name: Name of the interactor's resource; None if unknown
        raw_identifier: Accession without its resource prefix, e.g. "P12345-2"

    Returns:
        Shape plus the identifier, variant identifier and URL to store

    Example:
        >>> c = classify_interactor("UniProt", "P12345-2")
        >>> c.identifier, c.variant_identifier
        ('P12345', 'P12345-2')
        >>> classify_interactor("UniProt", "P12345-PRO_0000001").url
        'https://www.uniprot.org/uniprotkb/P12345/entry#PRO_0000001'
    """
    shape = select_shape(resource_name, raw_identifier)
    identifier = raw_identifier
    variant_identifier = None
    variant = ""
    if shape.splits_variant and VARIANT_SEPARATOR in raw_identifier:
        identifier, _, variant = raw_identifier.partition(VARIANT_SEPARATOR)
        variant_identifier = raw_identifier

    template = shape.url_template
    if shape.processed_chain_url_template and PROCESSED_CHAIN_MARKER in variant:
        template = shape.processed_chain_url_template
    url = template.format(raw=raw_identifier, identifier=identifier, variant=variant)
    return Classification(shape=shape, identifier=identifier, variant_identifier=variant_identifier, url=url)
