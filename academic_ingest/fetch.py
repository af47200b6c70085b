"""
Document download (index page -> cached files in data/raw).

Reads one HTML page (e.g. a faculty "downloads" page), collects every link to
a supported document and stores each file under the raw data directory so that
`academic_ingest ingest` can pick it up.
"""

from __future__ import annotations

import re
import time
from pathlib import Path
from typing import List, Tuple
from urllib.parse import unquote, urljoin, urlparse

import requests
from bs4 import BeautifulSoup

from academic_ingest.config import PACKAGE_DIR
from academic_ingest.errors import FetchError
from academic_ingest.ingest import SUPPORTED_EXTENSIONS
from academic_ingest.log import get_logger


logger = get_logger(__name__)

RAW_DIR = PACKAGE_DIR / "data" / "raw"

UNSAFE_FILENAME_RE = re.compile(r"[^\w.\-+]")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def safe_filename(name: str) -> str:
    """
    Replace everything but word characters, dots, dashes and plus signs.
    """
    return UNSAFE_FILENAME_RE.sub("_", name.strip()) or "document"


def _find_document_links(html: str, base_url: str) -> List[Tuple[str, str]]:
    """
    Extract (filename, absolute_url) for every supported document link.

    Returns:
        List of tuples: [("ICT_Timetable.pdf", "https://.../ICT%20Timetable.pdf"), ...]
    """
    soup = BeautifulSoup(html, "html.parser")

    links: List[Tuple[str, str]] = []
    for a in soup.select("a[href]"):
        href = (a.get("href") or "").strip()
        if not href:
            continue

        url = urljoin(base_url, href)
        name = unquote(Path(urlparse(url).path).name)
        if Path(name).suffix.lower() not in SUPPORTED_EXTENSIONS:
            continue

        links.append((safe_filename(name), url))

    # Deduplicate & sort for stable output
    return sorted(set(links))


# ---------------------------------------------------------------------------
# Core logic
# ---------------------------------------------------------------------------


def fetch_documents(
    index_url: str,
    raw_dir: Path = RAW_DIR,
    refresh: bool = False,
    sleep_seconds: float = 0.2,
) -> List[Path]:
    """
    Download all documents linked from index_url into raw_dir.

    Already cached files are skipped unless refresh is set. A document that
    fails to download is logged and skipped; a failing index page raises FetchError.
    """
    raw_dir = Path(raw_dir)
    raw_dir.mkdir(parents=True, exist_ok=True)

    try:
        resp = requests.get(index_url, timeout=30)
        resp.raise_for_status()
    except requests.RequestException as e:
        raise FetchError(f"cannot read index page {index_url}: {e}") from e

    documents = _find_document_links(resp.text, index_url)
    logger.info("documents_found", url=index_url, count=len(documents))

    saved: List[Path] = []
    for filename, url in documents:
        out_file = raw_dir / filename

        if out_file.exists() and not refresh:
            logger.info("document_cached", source=filename)
            continue

        try:
            doc = requests.get(url, timeout=60)
            doc.raise_for_status()
        except requests.RequestException as e:
            logger.warning("document_download_failed", source=filename, url=url, error=str(e))
            continue

        out_file.write_bytes(doc.content)
        saved.append(out_file)
        logger.info("document_saved", source=filename, size=len(doc.content))
        time.sleep(sleep_seconds)

    return saved
