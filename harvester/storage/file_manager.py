"""
File I/O for harvest results.

This module is the result sink: it names, places and serializes a
CrawlResult. The pipeline only hands over the value.
"""

import csv
import json
from pathlib import Path
from typing import List

from harvester.core.logging import get_logger
from harvester.records.models import CrawlResult
from harvester.utils.date_utils import file_timestamp
from harvester.utils.url_utils import sanitize_url

logger = get_logger(__name__)


def ensure_dir(folder: Path) -> Path:
    """Create the output directory if needed and return it."""
    folder = Path(folder)
    folder.mkdir(parents=True, exist_ok=True)
    return folder


def build_file_path(url: str, timestamp: str, folder: Path, suffix: str = ".json") -> Path:
    """
    Build the output path for a result.

    Example:
        >>> build_file_path("https://www.igdb.com/games/coming_soon",
        ...                 "2026-10-19T08:30:00+00:00", Path("results"))
        PosixPath('results/results_www_igdb_com_games_coming_soon_2026-10-19T08-30-00-00-00.json')
    """
    return Path(folder) / f"results_{sanitize_url(url)}_{file_timestamp(timestamp)}{suffix}"


def write_json_file(path: Path, data) -> Path:
    """Write a value as indented UTF-8 JSON."""
    path.write_text(json.dumps(data, ensure_ascii=False, indent=2), "utf-8")
    logger.info(f"Results saved to {path}")
    return path


def persist_result(result: CrawlResult, out_dir: Path) -> Path:
    """
    Persist a CrawlResult under out_dir.

    Args:
        result: Finished (or partial) crawl result
        out_dir: Output directory, created on demand

    Returns:
        Path of the written JSON document
    """
    folder = ensure_dir(out_dir)
    path = build_file_path(result.url, result.timestamp, folder)
    return write_json_file(path, result.to_document())


def _csv_cell(value) -> str:
    if isinstance(value, list):
        return ", ".join(str(v) for v in value)
    return "" if value is None else str(value)


def write_csv(result: CrawlResult, path: Path) -> Path:
    """
    Write the result's records as CSV next to the JSON document.

    Header row uses the field names of the first record; list values are
    joined with commas.
    """
    rows: List[dict] = result.to_document()["data"]
    fieldnames = list(rows[0].keys()) if rows else []
    with open(path, "w", encoding="utf-8", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames, quoting=csv.QUOTE_ALL)
        writer.writeheader()
        for row in rows:
            writer.writerow({k: _csv_cell(row.get(k)) for k in fieldnames})
    logger.info(f"CSV saved to {path}")
    return path
