"""
logo_importer/services/input_source.py

Reads website rows from the input CSV.
"""

from __future__ import annotations

import csv
from pathlib import Path

from logo_importer.domain import WebsiteRecord


class InputSourceError(RuntimeError):
    """
    Raised when the input file is missing or unreadable.
    """


def read_website_rows(path: str | Path) -> list[WebsiteRecord]:
    """
    Return one record per CSV row with a `name` or `url`; other columns are ignored.
    """

    input_path = Path(path)
    if not input_path.is_file():
        raise InputSourceError(f'The input file "{input_path}" doesn\'t exist.')

    try:
        with input_path.open("r", encoding="utf-8-sig", newline="") as handle:
            reader = csv.DictReader(handle)
            if not reader.fieldnames:
                raise InputSourceError(f'The input file "{input_path}" has no header row.')
            records: list[WebsiteRecord] = []
            for row in reader:
                name = (row.get("name") or "").strip()
                url = (row.get("url") or "").strip()
                if not name and not url:
                    continue
                records.append(WebsiteRecord(name=name, url=url))
    except UnicodeDecodeError as exc:
        raise InputSourceError(f'The input file "{input_path}" must be UTF-8 encoded.') from exc
    except (OSError, csv.Error) as exc:
        raise InputSourceError(f'Could not read the input file "{input_path}": {exc}') from exc

    return records
