"""Download client for the IntAct bulk interaction export.

References:
    - IntAct: https://www.ebi.ac.uk/intact
    - Downloads: https://ftp.ebi.ac.uk/pub/databases/intact/current/psimitab/
"""

import logging
from pathlib import Path

import requests
from tqdm import tqdm  # type: ignore[import-untyped]

from reactome_interactors.clients.base import HTTPClientBase
from reactome_interactors.config import INTACT_MICLUSTER_URL
from reactome_interactors.exceptions import InteractionSourceError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class IntActDownloadClient(HTTPClientBase):
    """Fetches the clustered IntAct interactions in PSI-MITAB format.

    Example:
        >>> with IntActDownloadClient() as client:
        ...     path = client.download_micluster(Path("intact-micluster.txt"))
    """

    BASE_URL = INTACT_MICLUSTER_URL

    def download_micluster(self, destination: Path, url: str | None = None, show_progress: bool = True) -> Path:
        """Stream the MITAB file to disk.

        A partially written file is removed on failure.

        Args:
            destination: Where to write the file
            url: Override for the download location
            show_progress: Display a byte progress bar

        Returns:
            The destination path

        Raises:
            InteractionSourceError: If the download fails
        """
        url = url or self.BASE_URL
        logger.info(f"Downloading interaction data from {url}")
        try:
            response = self._get(url, stream=True)
            total = int(response.headers.get("content-length", 0)) or None
            with (
                destination.open("wb") as f,
                tqdm(total=total, unit="B", unit_scale=True, desc="Downloading", disable=not show_progress) as pbar,
            ):
                for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
                    f.write(chunk)
                    pbar.update(len(chunk))
        except (requests.RequestException, OSError) as e:
            destination.unlink(missing_ok=True)
            raise InteractionSourceError(f"Failed to download interaction data from {url}: {e}") from e

        logger.info(f"Interaction data written to {destination}")
        return destination
