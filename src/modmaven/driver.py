from __future__ import annotations

import importlib
import json
import pkgutil
import sys
import time
from pathlib import Path
from typing import Dict, List, Optional

from . import cache as cache_mod
from .cache import Cache
from .errors import UnsupportedModuleError
from .logging import get_logger
from .repo import OutputArtifact, Repo
from .utils import cache_dir, hash_algorithm, output_dir, report_file


REPOS_PACKAGE = "modmaven.repos"


def discover_repositories(package: str = REPOS_PACKAGE) -> Dict[str, type]:
    """Import all modules in the repos package and collect registered repositories."""
    found: Dict[str, type] = {}
    pkg = importlib.import_module(package)
    for m in pkgutil.iter_modules(pkg.__path__, prefix=f"{package}."):
        mod = importlib.import_module(m.name)
        for attr_name in dir(mod):
            obj = getattr(mod, attr_name)
            if (
                isinstance(obj, type)
                and issubclass(obj, Repo)
                and obj.__dict__.get("_repo_spec")
            ):
                found[obj.__name__] = obj
    return found


class Mavenizer:
    """Dispatches a module request to the repository that handles it."""

    def __init__(self, params: dict, repositories: Optional[Dict[str, type]] = None):
        self.params = params
        self.repositories = repositories if repositories is not None else discover_repositories()
        self.output = output_dir(params)
        self.cache = Cache(cache_dir(params))
        self.logger = get_logger("modmaven.driver")

    def select(self, module: str) -> type:
        for name in sorted(self.repositories):
            repo_cls = self.repositories[name]
            if repo_cls.handles(module, self.params):
                return repo_cls
        raise UnsupportedModuleError(f"Module '{module}' is currently unsupported")

    def run(self, module: str, version: str) -> List[OutputArtifact]:
        repo_cls = self.select(module)
        self.logger.info("Processing: %s:%s", module, version)
        with self.logger.nested():
            self.logger.info("Repository: %s", repo_cls.__name__)
            self.logger.info("Output:     %s", self.output.resolve())
            self.logger.info("Cache:      %s", self.cache.root.resolve())

        repo = repo_cls(self.cache, self.output, self.params, self.logger)
        started = time.time()
        outputs = repo.process(module, version)
        self.logger.info("Published %d artifact(s) in %.2fs", len(outputs), time.time() - started)

        report = report_file(self.params)
        if report is not None:
            _write_report(report, self._report(module, version, repo_cls, outputs))
        return outputs

    def _report(self, module: str, version: str, repo_cls: type, outputs: List[OutputArtifact]) -> dict:
        algorithm = hash_algorithm(self.params)
        return {
            "spec": 1,
            "module": module,
            "version": version,
            "repository": repo_cls.__name__,
            "python": sys.version,
            "artifacts": [
                {
                    "descriptor": o.artifact.descriptor,
                    "path": o.artifact.path,
                    "file": str(o.file),
                    algorithm: cache_mod.file_digest(o.file, algorithm),
                }
                for o in outputs
            ],
        }


def _write_report(path: Path, state: dict) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(state, f, indent=2)
