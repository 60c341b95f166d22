"""SQLite staging database for IntAct interaction data.

The MITAB file is loaded once into a local SQLite file so that interactions
can be looked up by interactor accession during the import. The same schema
is accepted when a pre-built database is supplied with ``--sqlite``.
"""

import logging
import sqlite3
from pathlib import Path
from typing import Any

from tqdm import tqdm  # type: ignore[import-untyped]

from reactome_interactors.exceptions import InteractionSourceError
from reactome_interactors.intact.models import Interaction, Interactor, InteractorResource
from reactome_interactors.intact.parse import ParsedInteractor, iter_mitab

logger = logging.getLogger(__name__)

SYNONYM_SEPARATOR = "$"
PUBMED_SEPARATOR = "|"
COMMIT_EVERY = 10000

RESOURCE_URLS: dict[str, str] = {
    "UniProt": "https://www.uniprot.org/uniprotkb/##ID##/entry",
    "ChEBI": "https://www.ebi.ac.uk/chebi/searchId.do?chebiId=CHEBI:##ID##",
    "IntAct": "https://www.ebi.ac.uk/intact/query/##ID##",
}

SCHEMA = """
CREATE TABLE IF NOT EXISTS interactor_resource (
    id INTEGER PRIMARY KEY,
    name TEXT NOT NULL UNIQUE,
    url TEXT
);
CREATE TABLE IF NOT EXISTS interactor (
    id INTEGER PRIMARY KEY,
    acc TEXT NOT NULL UNIQUE,
    interactor_resource_id INTEGER NOT NULL REFERENCES interactor_resource(id),
    alias TEXT,
    taxid INTEGER,
    synonyms TEXT
);
CREATE TABLE IF NOT EXISTS interaction (
    id INTEGER PRIMARY KEY,
    interactor_a INTEGER NOT NULL REFERENCES interactor(id),
    interactor_b INTEGER NOT NULL REFERENCES interactor(id),
    score REAL,
    pubmed TEXT
);
CREATE TABLE IF NOT EXISTS interaction_details (
    interaction_id INTEGER NOT NULL REFERENCES interaction(id),
    interaction_ac TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_interaction_a ON interaction(interactor_a);
CREATE INDEX IF NOT EXISTS idx_interaction_b ON interaction(interactor_b);
CREATE INDEX IF NOT EXISTS idx_details_interaction ON interaction_details(interaction_id);
"""

INTERACTIONS_QUERY = """
SELECT i.id, i.score, i.pubmed,
       a.acc, a.interactor_resource_id, a.alias, a.taxid, a.synonyms,
       b.acc, b.interactor_resource_id, b.alias, b.taxid, b.synonyms
FROM interaction i
JOIN interactor a ON a.id = i.interactor_a
JOIN interactor b ON b.id = i.interactor_b
WHERE a.acc = ? OR b.acc = ?
ORDER BY i.id
"""


def _split(value: str | None, separator: str) -> list[str]:
    return [v for v in value.split(separator) if v] if value else []


def _interactor_from_row(row: tuple[Any, ...]) -> Interactor:
    acc, resource_id, alias, taxid, synonyms = row
    return Interactor(
        acc=acc,
        interactor_resource_id=resource_id,
        alias=alias,
        taxid=taxid,
        synonyms=_split(synonyms, SYNONYM_SEPARATOR),
    )


class InteractorsDatabase:
    """Read access to a staged interaction database.

    The connection holds SQLite's page cache for the whole run, so the driver
    periodically calls :meth:`reconnect` to release it.

    Example:
        >>> db = InteractorsDatabase(Path("interaction-data.tmp.db"))
        >>> for interaction in db.get_interactions("UniProt:P12345"):
        ...     print(interaction.interactor_b.acc, interaction.intact_score)
        >>> db.close()
    """

    def __init__(self, path: Path):
        """Initialize the database wrapper.

        Args:
            path: SQLite file holding the staged interactions
        """
        self.path = Path(path)
        self._connection: sqlite3.Connection | None = None

    def connect(self) -> sqlite3.Connection:
        """Get or open the SQLite connection."""
        if self._connection is None:
            if not self.path.is_file():
                raise InteractionSourceError(f"Interaction database not found: {self.path}")
            try:
                self._connection = sqlite3.connect(self.path)
            except sqlite3.Error as e:
                raise InteractionSourceError(f"Cannot open interaction database {self.path}: {e}") from e
        return self._connection

    def close(self) -> None:
        """Close the connection if open."""
        if self._connection is not None:
            self._connection.close()
            self._connection = None

    def reconnect(self) -> None:
        """Close and reopen the connection to drop its cache."""
        logger.debug("Cleaning interactors cache")
        self.close()
        self.connect()
        logger.debug("Interactors cache cleaned")

    def get_interactions(self, acc: str) -> list[Interaction]:
        """Get all interactions an interactor takes part in.

        Args:
            acc: Prefixed accession, e.g. "UniProt:P12345"

        Returns:
            Interactions oriented so that ``interactor_a.acc == acc``
        """
        connection = self.connect()
        interactions = []
        for row in connection.execute(INTERACTIONS_QUERY, (acc, acc)).fetchall():
            interaction_id, score, pubmed = row[0], row[1], row[2]
            a = _interactor_from_row(row[3:8])
            b = _interactor_from_row(row[8:13])
            if a.acc != acc:
                a, b = b, a
            acs = [
                r[0]
                for r in connection.execute(
                    "SELECT interaction_ac FROM interaction_details WHERE interaction_id = ? ORDER BY rowid",
                    (interaction_id,),
                )
            ]
            interactions.append(
                Interaction(
                    id=interaction_id,
                    interactor_a=a,
                    interactor_b=b,
                    intact_score=score,
                    interaction_acs=acs,
                    pubmed_identifiers=_split(pubmed, PUBMED_SEPARATOR) or None,
                )
            )
        return interactions

    def get_resource_registry(self) -> dict[int, InteractorResource]:
        """Get every interactor resource keyed by id."""
        connection = self.connect()
        return {
            row[0]: InteractorResource(id=row[0], name=row[1], url=row[2])
            for row in connection.execute("SELECT id, name, url FROM interactor_resource")
        }


def _resource_id(connection: sqlite3.Connection, cache: dict[str, int], name: str) -> int:
    if name not in cache:
        cursor = connection.execute(
            "INSERT INTO interactor_resource (name, url) VALUES (?, ?)",
            (name, RESOURCE_URLS.get(name)),
        )
        cache[name] = int(cursor.lastrowid or 0)
    return cache[name]


def _interactor_id(
    connection: sqlite3.Connection,
    resources: dict[str, int],
    interactors: dict[str, int],
    parsed: ParsedInteractor,
) -> int:
    if parsed.acc not in interactors:
        cursor = connection.execute(
            "INSERT INTO interactor (acc, interactor_resource_id, alias, taxid, synonyms) VALUES (?, ?, ?, ?, ?)",
            (
                parsed.acc,
                _resource_id(connection, resources, parsed.resource_name),
                parsed.alias,
                parsed.taxid,
                SYNONYM_SEPARATOR.join(parsed.synonyms) or None,
            ),
        )
        interactors[parsed.acc] = int(cursor.lastrowid or 0)
    return interactors[parsed.acc]


def build_interactors_database(
    mitab_path: Path,
    db_path: Path,
    show_progress: bool = True,
) -> InteractorsDatabase:
    """Stage a MITAB file into a fresh SQLite database.

    Any existing file at ``db_path`` is replaced.

    Args:
        mitab_path: IntAct MITAB file
        db_path: Destination SQLite file
        show_progress: Display a progress bar while staging

    Returns:
        InteractorsDatabase over the staged file

    Raises:
        InteractionSourceError: If the file cannot be read or staged
    """
    logger.info(f"Staging interaction data from {mitab_path} into {db_path}")
    db_path.unlink(missing_ok=True)

    resources: dict[str, int] = {}
    interactors: dict[str, int] = {}
    count = 0
    try:
        connection = sqlite3.connect(db_path)
        try:
            connection.executescript(SCHEMA)
            for parsed in tqdm(iter_mitab(mitab_path), desc="Staging", unit=" interactions", disable=not show_progress):
                a = _interactor_id(connection, resources, interactors, parsed.interactor_a)
                b = _interactor_id(connection, resources, interactors, parsed.interactor_b)
                cursor = connection.execute(
                    "INSERT INTO interaction (interactor_a, interactor_b, score, pubmed) VALUES (?, ?, ?, ?)",
                    (a, b, parsed.score, PUBMED_SEPARATOR.join(parsed.pubmed_identifiers) or None),
                )
                connection.executemany(
                    "INSERT INTO interaction_details (interaction_id, interaction_ac) VALUES (?, ?)",
                    [(cursor.lastrowid, ac) for ac in parsed.interaction_acs],
                )
                count += 1
                if count % COMMIT_EVERY == 0:
                    connection.commit()
            connection.commit()
        finally:
            connection.close()
    except (OSError, UnicodeDecodeError, sqlite3.Error) as e:
        raise InteractionSourceError(f"Failed to stage interaction data from {mitab_path}: {e}") from e

    logger.info(f"Staged {count:,} interactions and {len(interactors):,} interactors")
    return InteractorsDatabase(db_path)
