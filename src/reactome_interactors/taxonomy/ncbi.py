"""NCBI Taxonomy lineage lookups.

Used to place an interactor whose own taxon is not in the graph under the
closest ancestor that is. Responses are cached as JSON files so repeated runs
do not hit the Entrez API again.

Supports NCBI API key via NCBI_API_KEY environment variable to increase
rate limit from 3 requests/second to 10 requests/second.
"""

from __future__ import annotations

import json
import logging
import os
import time
import xml.etree.ElementTree as ET
from pathlib import Path

import requests
from dotenv import load_dotenv

load_dotenv()

logger = logging.getLogger(__name__)

NCBI_EFETCH_URL = "https://eutils.ncbi.nlm.nih.gov/entrez/eutils/efetch.fcgi"
NCBI_REQUEST_TIMEOUT = 10  # seconds

NCBI_API_KEY = os.getenv("NCBI_API_KEY")

DEFAULT_CACHE_DIR = Path("cache") / "ncbi" / "lineage"


def _cache_path(cache_dir: Path, taxon_id: int) -> Path:
    return cache_dir / f"{taxon_id}.json"


def _load_from_cache(cache_dir: Path, taxon_id: int) -> list[int] | None:
    path = _cache_path(cache_dir, taxon_id)
    if path.exists():
        try:
            with path.open() as f:
                return [int(t) for t in json.load(f)]
        except (json.JSONDecodeError, OSError, TypeError, ValueError) as e:
            logger.debug(f"Failed to load lineage cache for {taxon_id}: {e}")
    return None


def _save_to_cache(cache_dir: Path, taxon_id: int, lineage: list[int]) -> None:
    try:
        cache_dir.mkdir(parents=True, exist_ok=True)
        with _cache_path(cache_dir, taxon_id).open("w") as f:
            json.dump(lineage, f)
    except OSError as e:
        logger.debug(f"Failed to save lineage cache for {taxon_id}: {e}")


def _make_request(params: dict, max_retries: int = 3) -> requests.Response | None:
    """Make an efetch request, backing off when rate limited.

    Args:
        params: Query parameters
        max_retries: Maximum number of attempts when rate limited

    Returns:
        Response object or None if the request failed
    """
    if NCBI_API_KEY:
        params = {**params, "api_key": NCBI_API_KEY}

    for attempt in range(max_retries):
        try:
            response = requests.get(NCBI_EFETCH_URL, params=params, timeout=NCBI_REQUEST_TIMEOUT)
        except requests.RequestException as e:
            logger.debug(f"Request error fetching from NCBI: {e}")
            return None

        if response.status_code == 429:
            wait_time = 2**attempt
            logger.warning(f"Rate limited (429), waiting {wait_time}s before retry {attempt + 1}/{max_retries}")
            time.sleep(wait_time)
            continue

        try:
            response.raise_for_status()
        except requests.HTTPError as e:
            logger.debug(f"HTTP error fetching from NCBI: {e}")
            return None
        return response

    logger.warning(f"Failed to fetch from NCBI after {max_retries} retries (rate limited)")
    return None


def parse_lineage(xml_content: bytes) -> list[int]:
    """Extract ancestor taxon ids from an efetch taxonomy response.

    Args:
        xml_content: efetch XML for a single taxon

    Returns:
        Ancestor ids ordered from the most specific to the root
    """
    root = ET.fromstring(xml_content)
    taxon = root.find(".//Taxon")
    if taxon is None:
        return []
    lineage_ex = taxon.find("LineageEx")
    if lineage_ex is None:
        return []
    ancestors = []
    for ancestor in lineage_ex.findall("Taxon"):
        tax_id = ancestor.find("TaxId")
        if tax_id is not None and tax_id.text and tax_id.text.isdigit():
            ancestors.append(int(tax_id.text))
    # LineageEx lists root first
    return list(reversed(ancestors))


def fetch_lineage(taxon_id: int, cache_dir: Path = DEFAULT_CACHE_DIR) -> list[int]:
    """Fetch the ancestors of an NCBI taxon, most specific first.

    Args:
        taxon_id: NCBI Taxonomy ID
        cache_dir: Directory for cached responses

    Returns:
        Ancestor taxon ids; empty if the lookup failed
    """
    cached = _load_from_cache(cache_dir, taxon_id)
    if cached is not None:
        logger.debug(f"Using cached NCBI lineage for {taxon_id}")
        return cached

    response = _make_request({"db": "taxonomy", "id": str(taxon_id), "retmode": "xml"})
    if response is None:
        return []
    try:
        lineage = parse_lineage(response.content)
    except ET.ParseError as e:
        logger.debug(f"Unparseable NCBI response for {taxon_id}: {e}")
        return []

    _save_to_cache(cache_dir, taxon_id, lineage)
    return lineage
