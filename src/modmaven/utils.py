from __future__ import annotations

"""Config loading and small accessors over the parsed params dict."""

from pathlib import Path
from typing import Dict, Tuple

import yaml

from .version import DEFAULT_REJECTED_MARKERS


def load_config(path: str | Path | None) -> dict:
    if path is None:
        return {}
    p = Path(path)
    with open(p, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def _get(d: Dict, *keys, default=None):
    cur = d
    for k in keys:
        if not isinstance(cur, dict):
            return default
        cur = cur.get(k)
        if cur is None:
            return default
    return cur


def slugify(s: str) -> str:
    return (
        (s or "")
        .strip()
        .lower()
        .replace(" ", "_")
        .replace(":", "-")
        .replace("/", "-")
        .replace("\\", "-")
    )


def output_dir(p: Dict) -> Path:
    return Path(_get(p, "output", "dir", default="output"))


def cache_dir(p: Dict) -> Path:
    return Path(_get(p, "cache", "dir", default="cache"))


def hash_algorithm(p: Dict) -> str:
    return str(_get(p, "output", "hash_algorithm", default="sha1")).lower()


def rejected_markers(p: Dict) -> Tuple[str, ...]:
    return tuple(_get(p, "versions", "rejected_markers", default=DEFAULT_REJECTED_MARKERS))


def default_minecraft(p: Dict) -> str | None:
    return _get(p, "parchment", "minecraft")


def local_modules(p: Dict) -> Dict[str, Dict]:
    return _get(p, "local", default={})


def report_file(p: Dict) -> Path | None:
    value = _get(p, "output", "report")
    return Path(value) if value else None
