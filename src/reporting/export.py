"""Export resolved records to JSON, CSV or chunked JSON files."""
import csv
import json
import logging
import os
import sys
from typing import Any, Dict, List, Sequence

from constants import Constants, ExitCodes
from analysis.categories import platform_category
from resolution.models import PackageRecord

CSV_HEADERS = [
    "name",
    "android",
    "ios",
    "androidVersion",
    "iosVersion",
    "version",
    "source",
    "category",
]
CSV_DEPENDENCY_HEADERS = ["dependencies", "allDepsSupported"]
CHUNKS_DIRNAME = "json-chunks"
CHUNK_INDEX_FILENAME = "index.json"


def record_to_export(record: PackageRecord) -> Dict[str, Any]:
    """Flat export dict for one record, including the platform category."""
    data = record.to_dict()
    data["category"] = platform_category(record).value
    return data


def export_json(records: Sequence[PackageRecord], path: str) -> None:
    """Exports the records to a JSON file.

    Args:
        records (list): Resolved package records.
        path (str): File path to export the JSON.
    """
    data = [record_to_export(r) for r in records]
    try:
        with open(path, "w", encoding="utf-8") as file:
            json.dump(data, file, ensure_ascii=False, indent=4)
        logging.info("JSON file has been successfully exported at: %s", path)
    except OSError as e:
        logging.error("JSON file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def export_csv(records: Sequence[PackageRecord], path: str) -> None:
    """Exports the records to a CSV file.

    Dependency columns are added only when dependency checking ran.

    Args:
        records (list): Resolved package records.
        path (str): File path to export the CSV.
    """
    with_deps = any(r.dependencies is not None for r in records)
    headers = CSV_HEADERS + (CSV_DEPENDENCY_HEADERS if with_deps else [])
    rows: List[List[Any]] = [headers]

    def _nv(v):
        return "" if v is None else v

    for record in records:
        data = record_to_export(record)
        row = [_nv(data.get(h)) for h in CSV_HEADERS]
        if with_deps:
            row.append(";".join(data.get("dependencies", [])))
            row.append(_nv(data.get("allDepsSupported")))
        rows.append(row)
    try:
        with open(path, "w", newline="", encoding="utf-8") as file:
            export = csv.writer(file)
            export.writerows(rows)
        logging.info("CSV file has been successfully exported at: %s", path)
    except (OSError, csv.Error) as e:
        logging.error("CSV file couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)


def chunk_filename(index: int, total: int) -> str:
    return f"chunk-{index}-of-{total}.json"


def export_json_chunks(
    records: Sequence[PackageRecord],
    output_dir: str,
    chunk_size: int = Constants.DEFAULT_CHUNK_SIZE,
) -> List[str]:
    """Exports the records as numbered JSON chunks plus an index file.

    Files land in ``<output_dir>/json-chunks/``. Returns the chunk paths.
    """
    if chunk_size < 1:
        raise ValueError("chunk_size must be at least 1")
    chunks_dir = os.path.join(output_dir, CHUNKS_DIRNAME)
    total = (len(records) + chunk_size - 1) // chunk_size
    written: List[str] = []
    index_entries = []
    try:
        os.makedirs(chunks_dir, exist_ok=True)
        for position in range(total):
            start = position * chunk_size
            chunk = records[start:start + chunk_size]
            filename = chunk_filename(position + 1, total)
            path = os.path.join(chunks_dir, filename)
            with open(path, "w", encoding="utf-8") as file:
                json.dump([record_to_export(r) for r in chunk], file, ensure_ascii=False, indent=4, sort_keys=True)
            written.append(path)
            index_entries.append({
                "filename": filename,
                "start_index": start,
                "end_index": start + len(chunk) - 1,
                "count": len(chunk),
            })
        with open(os.path.join(chunks_dir, CHUNK_INDEX_FILENAME), "w", encoding="utf-8") as file:
            json.dump(
                {
                    "total_packages": len(records),
                    "chunk_size": chunk_size,
                    "total_chunks": total,
                    "chunks": index_entries,
                },
                file,
                indent=4,
            )
        logging.info("Exported %d packages in %d JSON chunks at: %s", len(records), total, chunks_dir)
    except OSError as e:
        logging.error("JSON chunks couldn't be written to disk: %s", e)
        sys.exit(ExitCodes.FILE_ERROR.value)
    return written
