"""Record input files for the CLI.

Records are read from a JSON array of objects, or from JSON Lines (one
object per line) when the file name ends in ``.jsonl``.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path

from feedgen.core.result import Err, Ok, Result
from feedgen.core.structured import StrDict, as_str_dict

__all__ = ["RecordsError", "load_records"]


@dataclass(frozen=True, slots=True)
class RecordsError:
    message: str
    path: Path


def _parse_jsonl(text: str, path: Path) -> Result[list[StrDict], RecordsError]:
    records: list[StrDict] = []
    for lineno, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            obj = as_str_dict(json.loads(line))
        except json.JSONDecodeError as e:
            return Err(RecordsError(f"{path}:{lineno}: invalid JSON: {e.msg}", path))
        if obj is None:
            return Err(RecordsError(f"{path}:{lineno}: expected a JSON object", path))
        records.append(obj)
    return Ok(records)


def _parse_json_array(text: str, path: Path) -> Result[list[StrDict], RecordsError]:
    try:
        data: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(RecordsError(f"{path}: invalid JSON: {e.msg}", path))
    if not isinstance(data, list):
        return Err(RecordsError(f"{path}: expected a JSON array of objects", path))

    records: list[StrDict] = []
    for index, item in enumerate(data):
        obj = as_str_dict(item)
        if obj is None:
            return Err(RecordsError(f"{path}: item {index} is not a JSON object", path))
        records.append(obj)
    return Ok(records)


def load_records(path: Path) -> Result[list[StrDict], RecordsError]:
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(RecordsError(f"input file not found: {path}", path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(RecordsError(f"cannot read {path}: {e}", path))

    if path.suffix == ".jsonl":
        return _parse_jsonl(text, path)
    return _parse_json_array(text, path)
