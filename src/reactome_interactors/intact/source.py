"""The interaction source consumed by the pipeline.

The pipeline only sees :class:`InteractionSource`. :class:`IntActInteractionSource`
decides once, at :meth:`~IntActInteractionSource.open`, where the data comes from:

- a pre-built SQLite database (used in place, never deleted)
- a local MITAB file (staged into a temporary SQLite database)
- a fresh download of the IntAct MITAB export (downloaded, then staged)
"""

import logging
import sqlite3
from pathlib import Path
from typing import Protocol

from reactome_interactors.clients.intact import IntActDownloadClient
from reactome_interactors.config import ImportConfig
from reactome_interactors.exceptions import InteractionSourceError
from reactome_interactors.intact.database import InteractorsDatabase, build_interactors_database
from reactome_interactors.intact.models import Interaction, InteractorResource

logger = logging.getLogger(__name__)


class InteractionSource(Protocol):
    """Boundary of the external interaction provider."""

    def open(self) -> None: ...

    def get_interactions(self, composite_key: str) -> list[Interaction]: ...

    def get_resource_registry(self) -> dict[int, InteractorResource]: ...

    def reconnect(self) -> None: ...

    def close(self) -> None: ...

    def cleanup(self) -> None: ...


class IntActInteractionSource:
    """IntAct interactions served from a local SQLite database."""

    def __init__(self, config: ImportConfig, downloader: IntActDownloadClient | None = None):
        """Initialize the source.

        Args:
            config: Run configuration (file locations and flags)
            downloader: Client used when no local file is supplied
        """
        self.config = config
        self._downloader = downloader
        self._database: InteractorsDatabase | None = None
        self._temporary_files: list[Path] = []

    @property
    def database(self) -> InteractorsDatabase:
        """The open interaction database."""
        if self._database is None:
            raise InteractionSourceError("Interaction source has not been opened")
        return self._database

    def open(self) -> None:
        """Load the interaction data and connect to it.

        Raises:
            InteractionSourceError: If the data cannot be obtained
        """
        config = self.config
        if config.intact_file is not None and config.is_sqlite:
            logger.info(f"Connecting to the provided interaction database {config.intact_file}")
            self._database = InteractorsDatabase(config.intact_file)
        else:
            mitab_path = config.intact_file
            if mitab_path is None:
                logger.info("Retrieving interaction data")
                self._temporary_files.append(config.download_file)
                downloader = self._downloader or IntActDownloadClient()
                try:
                    mitab_path = downloader.download_micluster(
                        config.download_file,
                        url=config.download_url,
                        show_progress=config.show_progress,
                    )
                finally:
                    if self._downloader is None:
                        downloader.close()
            else:
                logger.info(f"Using the provided interaction data {mitab_path}")
            self._temporary_files.append(config.staging_db)
            self._database = build_interactors_database(mitab_path, config.staging_db, config.show_progress)

        self._database.connect()
        logger.info("Connected to the interaction data")

    def get_interactions(self, composite_key: str) -> list[Interaction]:
        """Interactions for ``{resource}:{identifier}``; lookup errors yield no interactions."""
        try:
            return self.database.get_interactions(composite_key)
        except sqlite3.Error as e:
            logger.warning(f"Interaction lookup failed for {composite_key}: {e}")
            return []

    def get_resource_registry(self) -> dict[int, InteractorResource]:
        """All interactor resources keyed by id."""
        try:
            return self.database.get_resource_registry()
        except sqlite3.Error as e:
            raise InteractionSourceError(f"Cannot read interactor resources: {e}") from e

    def reconnect(self) -> None:
        """Reopen the database connection to release its cache."""
        try:
            self.database.reconnect()
        except InteractionSourceError:
            logger.error("An error occurred while reconnecting to the interaction database")
            raise

    def close(self) -> None:
        """Close the database connection."""
        if self._database is not None:
            self._database.close()

    def cleanup(self) -> None:
        """Remove downloaded and staged files created by this source."""
        for path in self._temporary_files:
            try:
                path.unlink(missing_ok=True)
                logger.debug(f"Removed temporary file {path}")
            except OSError as e:
                logger.warning(f"Could not remove temporary file {path}: {e}")
        self._temporary_files.clear()
