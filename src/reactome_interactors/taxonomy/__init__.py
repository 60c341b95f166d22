"""Taxonomy resolution for newly created reference entities."""

from reactome_interactors.taxonomy.ncbi import fetch_lineage
from reactome_interactors.taxonomy.resolver import TaxonomyResolver

__all__ = ["TaxonomyResolver", "fetch_lineage"]
