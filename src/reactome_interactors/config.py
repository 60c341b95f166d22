"""Run configuration for the interaction importer.

Connection settings come from the environment (a ``.env`` file is honoured)
and can be overridden on the command line. Pipeline tunables are grouped in
:class:`ImportConfig`.
"""

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()

# IntAct clustered interactions, PSI-MITAB 2.5
INTACT_MICLUSTER_URL = "https://ftp.ebi.ac.uk/pub/databases/intact/current/psimitab/intact-micluster.txt"

DEFAULT_STAGING_DB = Path("./interaction-data.tmp.db")
DEFAULT_DOWNLOAD_FILE = Path("./intact-micluster.tmp.txt")

# Reactome ReferenceDatabase dbIds
UNIPROT_REFERENCE_DATABASE_DB_ID = 2
CHEBI_REFERENCE_DATABASE_DB_ID = 114984

# Edge types whose target marks a physical entity as used in a modelled process
DEFAULT_TARGET_RELATIONSHIP_TYPES: tuple[str, ...] = (
    "input",
    "output",
    "physicalEntity",
    "diseaseEntity",
    "regulator",
)

# Targets processed between two reconnections of the interaction database
DEFAULT_RECONNECT_EVERY = 1000


@dataclass
class Neo4jSettings:
    """Neo4j connection settings.

    Attributes:
        host: Database host
        port: Bolt port
        database: Database name
        user: Database user
        password: Database password
    """

    host: str = field(default_factory=lambda: os.environ.get("NEO4J_HOST", "localhost"))
    port: int = field(default_factory=lambda: int(os.environ.get("NEO4J_PORT", "7687")))
    database: str = field(default_factory=lambda: os.environ.get("NEO4J_DATABASE", "reactome"))
    user: str = field(default_factory=lambda: os.environ.get("NEO4J_USER", "neo4j"))
    password: str = field(default_factory=lambda: os.environ.get("NEO4J_PASSWORD", "neo4j"))

    @property
    def uri(self) -> str:
        """Bolt URI for the driver."""
        return f"bolt://{self.host}:{self.port}"


@dataclass
class ImportConfig:
    """Tunables for one import run.

    Attributes:
        intact_file: Pre-supplied interaction data; downloaded when None
        is_sqlite: True if intact_file is an already built SQLite database
        staging_db: Where the MITAB data is staged as SQLite
        download_file: Where a fresh MITAB download is written
        download_url: Source of the MITAB download
        target_relationship_types: Edge types that qualify a referrer as a target
        reconnect_every: Targets between interaction-database reconnections
        uniprot_database_db_id: dbId of the UniProt ReferenceDatabase node
        chebi_database_db_id: dbId of the ChEBI ReferenceDatabase node
        resolve_lineage: Walk NCBI lineage for taxa absent from the graph
        show_progress: Display a progress bar while expanding targets
    """

    intact_file: Path | None = None
    is_sqlite: bool = False
    staging_db: Path = DEFAULT_STAGING_DB
    download_file: Path = DEFAULT_DOWNLOAD_FILE
    download_url: str = INTACT_MICLUSTER_URL
    target_relationship_types: tuple[str, ...] = DEFAULT_TARGET_RELATIONSHIP_TYPES
    reconnect_every: int = DEFAULT_RECONNECT_EVERY
    uniprot_database_db_id: int = UNIPROT_REFERENCE_DATABASE_DB_ID
    chebi_database_db_id: int = CHEBI_REFERENCE_DATABASE_DB_ID
    resolve_lineage: bool = False
    show_progress: bool = True
