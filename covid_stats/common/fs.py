"""Filesystem helpers."""

from __future__ import annotations

import csv
import json
from pathlib import Path


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def write_json(path: Path, payload, *, compact: bool = False, sort_keys: bool = True) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        if compact:
            json.dump(payload, f, ensure_ascii=False, separators=(",", ":"), sort_keys=sort_keys)
        else:
            json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=sort_keys)
            f.write("\n")


def read_json(path: Path):
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def read_csv_dicts(path: Path) -> tuple[list[str], list[dict[str, str]]]:
    # utf-8-sig drops the byte-order mark some daily reports start with.
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        return list(reader.fieldnames or []), list(reader)


def write_bytes(path: Path, content: bytes) -> None:
    ensure_dir(path.parent)
    tmp_path = path.with_suffix(path.suffix + ".part")
    tmp_path.write_bytes(content)
    tmp_path.replace(path)
