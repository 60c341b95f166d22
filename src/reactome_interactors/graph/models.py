"""
Property models for the nodes the importer writes.

Python attribute names are snake_case; the stored property names are the
Reactome camelCase names given as aliases. Use :meth:`GraphNode.properties`
to obtain the property map handed to the store.
"""

from pydantic import BaseModel, Field

from reactome_interactors.graph.schema import (
    INSTANCE_EDIT,
    PERSON,
    REFERENCE_DATABASE_CLASS,
    UNDIRECTED_INTERACTION,
)


class GraphNode(BaseModel):
    """
    Properties shared by every DatabaseObject.

    Examples
    --------
    >>> node = PersonNode(db_id=10, display_name="Interactions Importer")
    >>> node.properties()["dbId"]
    10
    >>> node.properties()["schemaClass"]
    'Person'
    """

    db_id: int = Field(..., alias="dbId", description="Synthetic identifier, unique across the graph")
    display_name: str = Field(..., alias="displayName", description="Human-readable name")
    schema_class: str = Field(..., alias="schemaClass", description="Reactome schema class")

    model_config = {"populate_by_name": True}

    def properties(self) -> dict:
        """Property map as stored in the graph, without unset values."""
        return self.model_dump(by_alias=True, exclude_none=True)


class ReferenceEntityNode(GraphNode):
    """
    A gene product, isoform or small molecule created for an interactor.

    Examples
    --------
    >>> node = ReferenceEntityNode(
    ...     db_id=101,
    ...     display_name="UniProt:P67890 GENE",
    ...     schema_class="ReferenceGeneProduct",
    ...     identifier="P67890",
    ...     gene_name=["GENE"],
    ... )
    >>> sorted(node.properties())
    ['dbId', 'displayName', 'geneName', 'identifier', 'schemaClass']
    """

    identifier: str = Field(..., description="Canonical identifier without variant suffix")
    variant_identifier: str | None = Field(None, alias="variantIdentifier")
    gene_name: list[str] | None = Field(None, alias="geneName")
    name: list[str] | None = Field(None, description="Names (molecules only)")
    secondary_identifier: list[str] | None = Field(None, alias="secondaryIdentifier")
    database_name: str | None = Field(None, alias="databaseName")
    url: str | None = Field(None, description="Cross-reference URL")


class InteractionNode(GraphNode):
    """An undirected interaction between two reference entities."""

    schema_class: str = Field(UNDIRECTED_INTERACTION, alias="schemaClass")
    database_name: str = Field("IntAct", alias="databaseName")
    score: float | None = Field(None, description="IntAct MI-score")
    accession: list[str] = Field(default_factory=list, description="IntAct interaction accessions")
    pubmed: list[str] | None = Field(None, description="Supporting PubMed identifiers")
    url: str | None = Field(None, description="IntAct query URL for the accessions")


class ReferenceDatabaseNode(GraphNode):
    """A reference database descriptor."""

    schema_class: str = Field(REFERENCE_DATABASE_CLASS, alias="schemaClass")
    name: list[str] = Field(default_factory=list)
    url: str | None = None
    access_url: str | None = Field(None, alias="accessUrl")


class PersonNode(GraphNode):
    """The author recorded on every creation edit."""

    schema_class: str = Field(PERSON, alias="schemaClass")
    firstname: str | None = None
    surname: str | None = None
    initial: str | None = None


class InstanceEditNode(GraphNode):
    """A timestamped creation edit."""

    schema_class: str = Field(INSTANCE_EDIT, alias="schemaClass")
    date_time: str = Field(..., alias="dateTime")
