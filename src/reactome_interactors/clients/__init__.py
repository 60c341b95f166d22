"""HTTP clients for external data sources."""

from reactome_interactors.clients.base import HTTPClientBase
from reactome_interactors.clients.intact import IntActDownloadClient

__all__ = ["HTTPClientBase", "IntActDownloadClient"]
