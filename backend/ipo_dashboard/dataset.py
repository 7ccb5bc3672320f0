import csv
import json
import logging
import re
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

from pydantic import ValidationError

from .config import settings
from .schemas import IPORecord

log = logging.getLogger(__name__)

TAG_SPLIT_RE = re.compile(r"\s*[|;]\s*")


class DatasetError(Exception):
    """Raised when an IPO data file cannot be read or a row fails validation."""


def build_records(rows: Iterable[Dict[str, Any]], source: str = "<memory>") -> List[IPORecord]:
    records: List[IPORecord] = []
    for index, row in enumerate(rows):
        try:
            records.append(IPORecord.model_validate(row))
        except ValidationError as exc:
            raise DatasetError(f"{source}: row {index} is not a valid IPO record: {exc}") from exc
    return records


def load_records_from_json(file_path: Union[str, Path]) -> List[IPORecord]:
    """
    Loads IPO records from a JSON file holding a list of objects
    (camelCase keys, as exported from the dashboard data module).
    """
    path = Path(file_path)
    try:
        with open(path, "r", encoding="utf-8") as fh:
            data = json.load(fh)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise DatasetError(f"{path}: {exc}") from exc

    if not isinstance(data, list):
        raise DatasetError(f"{path}: expected a JSON list of records, got {type(data).__name__}")
    return build_records(data, source=str(path))


def _clean_csv_row(row: Dict[str, Optional[str]]) -> Dict[str, Any]:
    cleaned: Dict[str, Any] = {}
    for key, value in row.items():
        if key is None:
            continue
        value = value.strip() if isinstance(value, str) else value
        cleaned[key.strip()] = value if value != "" else None

    tags = cleaned.get("tags")
    cleaned["tags"] = [t for t in TAG_SPLIT_RE.split(tags) if t] if tags else []
    if cleaned.get("status") is None:
        cleaned.pop("status", None)
    if cleaned.get("firstDayPop") is None:
        cleaned.pop("firstDayPop", None)
    return cleaned


def load_records_from_csv(file_path: Union[str, Path]) -> List[IPORecord]:
    """
    Loads IPO records from a CSV file.
    Blank cells become None and the tags column is split on "|" or ";".
    """
    path = Path(file_path)
    try:
        with open(path, "r", encoding="utf-8", newline="") as csvfile:
            rows = [_clean_csv_row(row) for row in csv.DictReader(csvfile)]
    except (OSError, UnicodeDecodeError, csv.Error) as exc:
        raise DatasetError(f"{path}: {exc}") from exc
    return build_records(rows, source=str(path))


def load_records(file_path: Optional[Union[str, Path]] = None) -> List[IPORecord]:
    if file_path is None:
        file_path = settings.data_file
    if file_path is None:
        raise DatasetError("No data file given and IPO_DATA_FILE is not set")

    path = Path(file_path)
    suffix = path.suffix.lower()
    if suffix == ".json":
        records = load_records_from_json(path)
    elif suffix == ".csv":
        records = load_records_from_csv(path)
    else:
        raise DatasetError(f"{path}: unsupported data file type {suffix!r}")

    log.info("Loaded %d IPO records from %s", len(records), path)
    return records
