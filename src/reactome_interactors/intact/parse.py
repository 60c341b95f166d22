"""PSI-MITAB 2.5 parsing for the IntAct clustered interaction file.

Each non-header line of ``intact-micluster.txt`` is one clustered binary
interaction. Columns used (0-based):

    0/1   unique identifiers of A/B      uniprotkb:P12345
    4/5   aliases of A/B                 uniprotkb:EGFR(gene name)|...
    8     publication identifiers        pubmed:1234|imex:IM-1
    9/10  NCBI taxonomy of A/B           taxid:9606(human)|taxid:9606(Homo sapiens)
    13    interaction identifiers        intact:EBI-1234|intact:EBI-5678
    14    confidence values              intact-miscore:0.56

Field entries have the shape ``db:value(description)`` joined by ``|``;
values may be double quoted and ``-`` marks an empty field.
"""

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

MITAB_COLUMNS = 15
EMPTY_FIELD = "-"

ENTRY_PATTERN = re.compile(r'^(?P<db>[^:]+):(?P<value>"[^"]*"|[^(]*)(?:\((?P<description>.*)\))?$')
FIELD_SEPARATOR = re.compile(r'\|(?=(?:[^"]*"[^"]*")*[^"]*$)')

# MITAB database prefix -> interactor resource name
RESOURCE_NAMES: dict[str, str] = {
    "uniprotkb": "UniProt",
    "chebi": "ChEBI",
    "intact": "IntAct",
}

GENE_NAME = "gene name"
GENE_NAME_SYNONYM = "gene name synonym"
DISPLAY_SHORT = "display_short"
MISCORE = "intact-miscore"


@dataclass
class MitabEntry:
    """One ``db:value(description)`` entry of a MITAB field."""

    db: str
    value: str
    description: str | None = None


@dataclass
class ParsedInteractor:
    """Interactor as read from a MITAB line, before staging."""

    acc: str
    resource_name: str
    alias: str | None = None
    taxid: int | None = None
    synonyms: list[str] = field(default_factory=list)


@dataclass
class ParsedInteraction:
    """Interaction as read from a MITAB line, before staging."""

    interactor_a: ParsedInteractor
    interactor_b: ParsedInteractor
    score: float | None = None
    interaction_acs: list[str] = field(default_factory=list)
    pubmed_identifiers: list[str] = field(default_factory=list)


def parse_field(value: str) -> list[MitabEntry]:
    """Split a MITAB field into its entries.

    Args:
        value: Raw column text

    Returns:
        Parsed entries; empty for ``-`` or blank fields
    """
    value = value.strip()
    if not value or value == EMPTY_FIELD:
        return []

    entries = []
    for part in FIELD_SEPARATOR.split(value):
        match = ENTRY_PATTERN.match(part.strip())
        if not match:
            logger.debug(f"Unparseable MITAB entry: {part!r}")
            continue
        raw_value = match.group("value").strip().strip('"')
        entries.append(MitabEntry(db=match.group("db"), value=raw_value, description=match.group("description")))
    return entries


def resource_name_for(db: str) -> str:
    """Map a MITAB database prefix to the interactor resource name."""
    return RESOURCE_NAMES.get(db.lower(), db)


def normalize_identifier(db: str, value: str) -> str:
    """Strip redundant prefixes carried inside the value (``CHEBI:16236`` -> ``16236``)."""
    if db.lower() == "chebi" and value.upper().startswith("CHEBI:"):
        return value.split(":", 1)[1]
    return value


def parse_taxid(value: str) -> int | None:
    """Extract the NCBI taxonomy id; non-organism codes (-1 in vitro, -2 chemical...) give None."""
    for entry in parse_field(value):
        if entry.db != "taxid":
            continue
        try:
            taxid = int(entry.value)
        except ValueError:
            continue
        return taxid if taxid > 0 else None
    return None


def parse_interactor(identifier: str, aliases: str, taxid: str) -> ParsedInteractor | None:
    """Build a ParsedInteractor from its three MITAB columns."""
    ids = parse_field(identifier)
    if not ids:
        return None
    primary = ids[0]
    resource_name = resource_name_for(primary.db)
    acc = f"{resource_name}:{normalize_identifier(primary.db, primary.value)}"

    alias = None
    fallback_alias = None
    synonyms = []
    for entry in parse_field(aliases):
        if entry.description == GENE_NAME and alias is None:
            alias = entry.value
        elif entry.description == GENE_NAME_SYNONYM:
            synonyms.append(entry.value)
        elif entry.description == DISPLAY_SHORT and fallback_alias is None:
            fallback_alias = entry.value

    return ParsedInteractor(
        acc=acc,
        resource_name=resource_name,
        alias=alias or fallback_alias,
        taxid=parse_taxid(taxid),
        synonyms=synonyms,
    )


def parse_score(value: str) -> float | None:
    """Extract the IntAct MI-score from the confidence column."""
    for entry in parse_field(value):
        if entry.db == MISCORE:
            try:
                return float(entry.value)
            except ValueError:
                return None
    return None


def parse_mitab_line(line: str) -> ParsedInteraction | None:
    """Parse one MITAB line.

    Args:
        line: A tab-separated MITAB 2.5 (or later) line

    Returns:
        ParsedInteraction, or None if the line is a header or malformed
    """
    if not line.strip() or line.startswith("#"):
        return None
    columns = line.rstrip("\n").split("\t")
    if len(columns) < MITAB_COLUMNS:
        logger.debug(f"Skipping MITAB line with {len(columns)} columns")
        return None

    interactor_a = parse_interactor(columns[0], columns[4], columns[9])
    interactor_b = parse_interactor(columns[1], columns[5], columns[10])
    if interactor_a is None or interactor_b is None:
        logger.debug("Skipping MITAB line without interactor identifiers")
        return None

    return ParsedInteraction(
        interactor_a=interactor_a,
        interactor_b=interactor_b,
        score=parse_score(columns[14]),
        interaction_acs=[e.value for e in parse_field(columns[13]) if e.db == "intact"],
        pubmed_identifiers=[e.value for e in parse_field(columns[8]) if e.db == "pubmed"],
    )


def iter_mitab(path: Path) -> Iterator[ParsedInteraction]:
    """Yield every parseable interaction in a MITAB file."""
    with path.open(encoding="utf-8") as f:
        for line in f:
            parsed = parse_mitab_line(line)
            if parsed is not None:
                yield parsed
