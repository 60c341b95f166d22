"""Exceptions raised by the interaction importer.

Fatal conditions (source unavailable, store mutation failure) propagate to the
CLI, which reports them and exits non-zero. Lookup failures are caught by the
pipeline and only cause the affected entity to be skipped.
"""


class InteractionImportError(Exception):
    """Base class for all importer errors."""


class InteractionSourceError(InteractionImportError):
    """The interaction data could not be downloaded, parsed or opened."""


class GraphLookupError(InteractionImportError):
    """A read query against the graph failed for a single entity."""


class GraphMutationError(InteractionImportError):
    """Creating a node or relationship failed.

    The run cannot continue: the in-memory dedup state would no longer
    match what was written.
    """
