"""Resolve NCBI taxonomy ids to the organism nodes present in the graph."""

import logging
from collections.abc import Callable

logger = logging.getLogger(__name__)


class TaxonomyResolver:
    """Maps a taxonomy id to the dbId of a Taxon node.

    A direct match wins. Otherwise, if a lineage lookup is configured, the
    closest ancestor present in the graph is used. Results are memoized for
    the run.

    Example:
        >>> resolver = TaxonomyResolver({9606: 48887})
        >>> resolver.resolve(9606)
        48887
        >>> resolver.resolve(10090) is None
        True
    """

    def __init__(
        self,
        taxon_db_ids: dict[int, int],
        lineage_lookup: Callable[[int], list[int]] | None = None,
    ):
        """Initialize the resolver.

        Args:
            taxon_db_ids: NCBI taxonomy id -> Taxon dbId, from the graph
            lineage_lookup: Returns ancestors of a taxon, most specific first
        """
        self.taxon_db_ids = taxon_db_ids
        self.lineage_lookup = lineage_lookup
        self._resolved: dict[int, int | None] = {}

    def resolve(self, taxid: int | None) -> int | None:
        """Get the Taxon dbId for a taxonomy id, or None."""
        if taxid is None:
            return None
        if taxid in self.taxon_db_ids:
            return self.taxon_db_ids[taxid]
        if self.lineage_lookup is None:
            return None
        if taxid not in self._resolved:
            self._resolved[taxid] = next(
                (self.taxon_db_ids[a] for a in self.lineage_lookup(taxid) if a in self.taxon_db_ids),
                None,
            )
            if self._resolved[taxid] is not None:
                logger.debug(f"Taxon {taxid} resolved through lineage to {self._resolved[taxid]}")
        return self._resolved[taxid]
