#!/usr/bin/env python3
"""Import IntAct interactions into a Reactome graph database.

Reference entities used in curated processes are looked up in IntAct; every
interaction found is added as an UndirectedInteraction, together with any
partner entity the graph does not have yet. The whole import runs in a single
Neo4j transaction and is rolled back on any fatal error.

Usage:
    uv run import-interactions --name reactome --user neo4j --password secret
    uv run import-interactions --intact-file intact-micluster.txt --no-bar
    uv run import-interactions --intact-file interaction-data.db --sqlite -v
"""

import logging
import sys
from pathlib import Path

import click
from neo4j import READ_ACCESS, Driver, GraphDatabase
from neo4j.exceptions import DriverError, Neo4jError

from reactome_interactors.config import (
    DEFAULT_RECONNECT_EVERY,
    DEFAULT_TARGET_RELATIONSHIP_TYPES,
    ImportConfig,
    Neo4jSettings,
)
from reactome_interactors.exceptions import InteractionImportError
from reactome_interactors.graph.store import Neo4jGraphStore
from reactome_interactors.intact.source import InteractionSource, IntActInteractionSource
from reactome_interactors.pipeline.driver import ImportReport, InteractionImportPipeline

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging based on verbosity."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def run_import(
    driver: Driver,
    database: str,
    config: ImportConfig,
    source: InteractionSource | None = None,
) -> ImportReport:
    """Run the pipeline inside one write transaction.

    The transaction is committed only if the pipeline completes; any
    exception rolls it back. Lookups run in a second, read-only session.

    Args:
        driver: Neo4j driver
        database: Name of the Reactome database
        config: Run configuration
        source: Interaction source; IntAct by default

    Returns:
        The pipeline's completion report
    """
    source = source or IntActInteractionSource(config)
    with (
        driver.session(database=database, default_access_mode=READ_ACCESS) as reader,
        driver.session(database=database) as writer,
    ):
        with writer.begin_transaction() as tx:
            report = InteractionImportPipeline(Neo4jGraphStore(tx, reader), source, config).run()
            logger.info("Committing changes")
            tx.commit()
    return report


@click.command()
@click.option("--host", help="Neo4j host (default: $NEO4J_HOST or localhost)")
@click.option("--port", type=int, help="Neo4j bolt port (default: $NEO4J_PORT or 7687)")
@click.option("--name", "-d", help="Neo4j database name (default: $NEO4J_DATABASE or reactome)")
@click.option("--user", "-u", help="Neo4j user (default: $NEO4J_USER or neo4j)")
@click.option("--password", "-p", help="Neo4j password (default: $NEO4J_PASSWORD or neo4j)")
@click.option(
    "--intact-file",
    "-f",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="Local IntAct PSI-MITAB file (downloaded from IntAct when omitted)",
)
@click.option(
    "--sqlite",
    "is_sqlite",
    is_flag=True,
    help="The --intact-file is an already built interaction database",
)
@click.option(
    "--target-relationship",
    "-r",
    "target_relationships",
    multiple=True,
    help="Relationship type marking a physical entity as used (repeatable; "
    f"default: {', '.join(DEFAULT_TARGET_RELATIONSHIP_TYPES)})",
)
@click.option(
    "--reconnect-every",
    type=click.IntRange(min=0),
    default=DEFAULT_RECONNECT_EVERY,
    show_default=True,
    help="Targets processed between reconnections to the interaction database (0 disables)",
)
@click.option(
    "--resolve-lineage",
    is_flag=True,
    help="Link species through the closest NCBI ancestor when a taxon is not in the graph",
)
@click.option("--bar/--no-bar", default=True, show_default=True, help="Show a progress bar")
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging",
)
def main(
    host: str | None,
    port: int | None,
    name: str | None,
    user: str | None,
    password: str | None,
    intact_file: Path | None,
    is_sqlite: bool,
    target_relationships: tuple[str, ...],
    reconnect_every: int,
    resolve_lineage: bool,
    bar: bool,
    verbose: bool,
) -> None:
    """Add IntAct interactions to a Reactome graph database.

    Example:
        # Download the current IntAct release and import it
        uv run import-interactions --name reactome --password secret

        # Reuse an interaction database built by a previous run
        uv run import-interactions -f interaction-data.db --sqlite
    """
    setup_logging(verbose)

    if is_sqlite and intact_file is None:
        click.echo("ERROR: --sqlite requires --intact-file")
        sys.exit(1)

    options = {"host": host, "port": port, "database": name, "user": user, "password": password}
    settings = Neo4jSettings(**{key: value for key, value in options.items() if value is not None})
    config = ImportConfig(
        intact_file=intact_file,
        is_sqlite=is_sqlite,
        target_relationship_types=target_relationships or DEFAULT_TARGET_RELATIONSHIP_TYPES,
        reconnect_every=reconnect_every,
        resolve_lineage=resolve_lineage,
        show_progress=bar,
    )

    click.echo(f"Connecting to {settings.uri} (database: {settings.database})")
    driver = GraphDatabase.driver(settings.uri, auth=(settings.user, settings.password))
    try:
        report = run_import(driver, settings.database, config)
    except InteractionImportError as e:
        click.echo(f"ERROR: {e}", err=True)
        sys.exit(1)
    except (Neo4jError, DriverError) as e:
        click.echo(f"ERROR: Neo4j: {e}", err=True)
        sys.exit(1)
    finally:
        driver.close()

    click.echo(report.summary())


if __name__ == "__main__":
    main()
