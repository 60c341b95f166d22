"""Graph schema constants: labels, relationship types and property names.

Labels follow the Reactome data model, where a node carries its own schema
class plus every ancestor class as labels.
"""

# Property names
DB_ID = "dbId"
DISPLAY_NAME = "displayName"
IDENTIFIER = "identifier"
VARIANT_IDENTIFIER = "variantIdentifier"
SCHEMA_CLASS = "schemaClass"
STOICHIOMETRY = "stoichiometry"
ORDER = "order"
TAX_ID = "taxId"

# Relationship types
INTERACTOR = "interactor"
REFERENCE_DATABASE = "referenceDatabase"
REFERENCE_ENTITY = "referenceEntity"
SPECIES = "species"
AUTHOR = "author"
CREATED = "created"

# Schema classes
REFERENCE_GENE_PRODUCT = "ReferenceGeneProduct"
REFERENCE_ISOFORM = "ReferenceIsoform"
REFERENCE_MOLECULE = "ReferenceMolecule"
UNDIRECTED_INTERACTION = "UndirectedInteraction"
REFERENCE_DATABASE_CLASS = "ReferenceDatabase"
PERSON = "Person"
INSTANCE_EDIT = "InstanceEdit"

DATABASE_OBJECT = "DatabaseObject"
REFERENCE_ENTITY_CLASS = "ReferenceEntity"
TAXON = "Taxon"

# Schema class -> labels (the class followed by its ancestors)
LABELS: dict[str, tuple[str, ...]] = {
    REFERENCE_GENE_PRODUCT: (REFERENCE_GENE_PRODUCT, "ReferenceSequence", REFERENCE_ENTITY_CLASS, DATABASE_OBJECT),
    REFERENCE_ISOFORM: (
        REFERENCE_ISOFORM,
        REFERENCE_GENE_PRODUCT,
        "ReferenceSequence",
        REFERENCE_ENTITY_CLASS,
        DATABASE_OBJECT,
    ),
    REFERENCE_MOLECULE: (REFERENCE_MOLECULE, REFERENCE_ENTITY_CLASS, DATABASE_OBJECT),
    UNDIRECTED_INTERACTION: (UNDIRECTED_INTERACTION, "Interaction", DATABASE_OBJECT),
    REFERENCE_DATABASE_CLASS: (REFERENCE_DATABASE_CLASS, DATABASE_OBJECT),
    PERSON: (PERSON, DATABASE_OBJECT),
    INSTANCE_EDIT: (INSTANCE_EDIT, DATABASE_OBJECT),
}

# Properties set on every edge the importer creates
STANDARD_RELATIONSHIP_PROPERTIES: dict[str, int] = {STOICHIOMETRY: 1, ORDER: 1}


def labels_for(schema_class: str) -> tuple[str, ...]:
    """Get the Neo4j labels for a schema class.

    Args:
        schema_class: Reactome schema class name

    Returns:
        The class name followed by its ancestor class names

    Raises:
        KeyError: If the schema class is not one the importer creates
    """
    return LABELS[schema_class]
