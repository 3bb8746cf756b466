from __future__ import annotations
from contextlib import contextmanager
from datetime import date, datetime, time
from decimal import Decimal
from typing import Any, Dict, Iterator, Mapping, Set
import logging

logger = logging.getLogger(__name__)

# Values returned as-is even when deep cloning
_ATOMIC = (bool, int, float, complex, str, bytes, Decimal)


class CircularReferenceError(ValueError):
    def __init__(self, message: str = "Circular reference detected during deep cloning"):
        super().__init__(message)


class CloneContext:
    """Traversal state for a single top-level mapping call.

    Tracks the identities of containers currently being copied on the call
    stack. A container met again while it is still active is a cycle; the
    same container reached twice through separate branches is not.
    """

    def __init__(self, deep: bool = False):
        self.deep = deep
        self._active: Set[int] = set()

    @property
    def depth(self) -> int:
        return len(self._active)

    @contextmanager
    def visiting(self, value: Any) -> Iterator[None]:
        if not self.deep:
            yield
            return
        marker = id(value)
        if marker in self._active:
            logger.debug(f"Cycle detected on {type(value).__name__} at depth {self.depth}")
            raise CircularReferenceError()
        self._active.add(marker)
        try:
            yield
        finally:
            self._active.discard(marker)

    def clone(self, value: Any) -> Any:
        """Copy `value` when deep cloning is on, otherwise hand back the same object."""
        if not self.deep or value is None or isinstance(value, _ATOMIC):
            return value
        # datetime is a subclass of date, check it first; type(value) keeps subclasses
        if isinstance(value, datetime):
            return type(value)(
                value.year, value.month, value.day,
                value.hour, value.minute, value.second, value.microsecond,
                tzinfo=value.tzinfo, fold=value.fold,
            )
        if isinstance(value, date):
            return type(value)(value.year, value.month, value.day)
        if isinstance(value, time):
            return type(value)(
                value.hour, value.minute, value.second, value.microsecond,
                tzinfo=value.tzinfo, fold=value.fold,
            )
        if isinstance(value, Mapping):
            with self.visiting(value):
                out: Dict[Any, Any] = {}
                for k, v in value.items():
                    out[k] = self.clone(v)
                return out
        if isinstance(value, list):
            with self.visiting(value):
                return [self.clone(v) for v in value]
        if isinstance(value, tuple):
            with self.visiting(value):
                return tuple(self.clone(v) for v in value)
        # opaque objects (class instances, sets, ...) are shared
        return value
