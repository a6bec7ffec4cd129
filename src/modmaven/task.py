from __future__ import annotations

import threading
from enum import Enum
from pathlib import Path
from typing import Callable, Iterable, Optional, Union

from .cache import Cache
from .errors import TaskNotResolvedError
from .logging import NestedLogger, get_logger


# A cache key can be fixed up front or derived once dependencies have run
KeySpec = Union[str, Callable[[], str], None]


class TaskState(Enum):
    UNRESOLVED = "unresolved"
    RESOLVED = "resolved"


class Task:
    """Deferred computation that always produces a file.

    The callable runs at most once per task: after the first successful
    `execute()` the file is kept and returned directly. With a `cache` and a
    `key`, a valid cache entry is used instead of running the callable, and a
    fresh result is stored for later runs. A failed run leaves the task
    unresolved so it can be executed again.
    """

    def __init__(
        self,
        name: str,
        fn: Callable[[], Path],
        deps: Iterable["Task"] = (),
        key: KeySpec = None,
        cache: Optional[Cache] = None,
    ):
        self.name = name
        self.fn = fn
        self.deps = tuple(deps)
        self.key = key
        self.cache = cache
        self.state = TaskState.UNRESOLVED
        self._file: Optional[Path] = None
        self._lock = threading.Lock()

    @classmethod
    def named(cls, name: str, fn: Callable[[], Path], deps: Iterable["Task"] = (), **kwargs) -> "Task":
        return cls(name, fn, deps, **kwargs)

    def resolved(self) -> bool:
        return self.state is TaskState.RESOLVED

    def get(self) -> Path:
        if self._file is None:
            raise TaskNotResolvedError(f"Task has not been executed: {self.name}")
        return self._file

    def execute(self, log: Optional[NestedLogger] = None) -> Path:
        if self.resolved():
            return self.get()
        log = log or get_logger("modmaven.task")
        with self._lock:
            if self.resolved():
                return self.get()
            for dep in self.deps:
                dep.execute(log)

            key = self._resolve_key()
            if key is not None and self.cache is not None:
                cached = self.cache.get(key)
                if cached is not None:
                    log.debug("%s: cached -> %s", self.name, cached)
                    return self._resolve(cached)

            log.info(self.name)
            with log.nested():
                file = Path(self.fn())
                log.debug("-> %s", file.resolve())

            if key is not None and self.cache is not None:
                self.cache.put(key, file)
            return self._resolve(file)

    def _resolve_key(self) -> Optional[str]:
        if callable(self.key):
            return self.key()
        return self.key

    def _resolve(self, file: Path) -> Path:
        self._file = file
        self.state = TaskState.RESOLVED
        return file

    def __repr__(self) -> str:
        return f"Task[{self.name}]"
