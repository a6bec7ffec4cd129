from __future__ import annotations

import hashlib
import json
import shutil
from pathlib import Path
from typing import Iterable, Optional


CACHE_ALGORITHM = "sha256"


def sha256_bytes(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def file_digest(path: Path, algorithm: str = CACHE_ALGORITHM) -> str:
    h = hashlib.new(algorithm)
    with open(path, "rb") as f:
        for chunk in iter(lambda: f.read(1024 * 1024), b""):
            h.update(chunk)
    return h.hexdigest()


def compute_task_hash(name: str, input_paths: Iterable[Path], config: dict | None = None) -> str:
    """Key a task on its name, the content of its inputs and its settings."""
    payload: dict = {"name": name, "inputs": [], "config": config or {}}
    for p in sorted({str(p) for p in input_paths}):
        pp = Path(p)
        entry = {"path": p}
        if pp.exists() and pp.is_file():
            entry["digest"] = file_digest(pp)
        else:
            entry["digest"] = None
        payload["inputs"].append(entry)
    data = json.dumps(payload, sort_keys=True).encode("utf-8")
    return sha256_bytes(data)


def hash_file_for(path: Path, algorithm: str) -> Path:
    return path.with_name(f"{path.name}.{algorithm}")


def update_hash(path: Path, algorithm: str = "sha1") -> str:
    """(Re)write the `<file>.<algorithm>` sidecar and return the digest."""
    digest = file_digest(path, algorithm)
    hash_file_for(path, algorithm).write_text(digest, encoding="utf-8")
    return digest


def verify_hash(path: Path, algorithm: str = "sha1") -> bool:
    hf = hash_file_for(path, algorithm)
    if not path.is_file() or not hf.is_file():
        return False
    return hf.read_text(encoding="utf-8").strip() == file_digest(path, algorithm)


class Cache:
    """Directory-backed store of task results.

    Entries live at ``<root>/entries/<key[:2]>/<key>/<file>`` next to a
    ``<file>.hash`` sidecar. An entry is only served while the file still
    matches its sidecar. Writes are last-write-wins and the store assumes a
    single writer.
    """

    def __init__(self, root: Path):
        self.root = Path(root)

    @property
    def build_root(self) -> Path:
        return self.root / "build"

    def entry_dir(self, key: str) -> Path:
        return self.root / "entries" / key[:2] / key

    def get(self, key: str) -> Optional[Path]:
        entry = self.entry_dir(key)
        if not entry.is_dir():
            return None
        # The cached file is the one with a sibling sidecar; its name may itself end in .hash
        files = [p for p in entry.iterdir() if p.is_file() and (entry / (p.name + ".hash")).is_file()]
        if len(files) != 1:
            return None
        cached = files[0]
        hf = entry / (cached.name + ".hash")
        try:
            recorded = hf.read_text(encoding="utf-8").strip()
        except OSError:
            return None
        if recorded != file_digest(cached):
            return None
        return cached

    def put(self, key: str, file: Path) -> Path:
        file = Path(file)
        entry = self.entry_dir(key)
        self.clear(key)
        entry.mkdir(parents=True, exist_ok=True)
        target = entry / file.name
        shutil.copyfile(file, target)
        (entry / (file.name + ".hash")).write_text(file_digest(target), encoding="utf-8")
        return target

    def clear(self, key: str) -> None:
        entry = self.entry_dir(key)
        if entry.exists():
            shutil.rmtree(entry)
