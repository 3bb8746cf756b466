from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Union
import logging

from shapemap.config.env import ProfileConfig
from shapemap.mapper.clone import CircularReferenceError, CloneContext
from shapemap.mapper.options import Leaf, MapOptions, Transform, coerce_options
from shapemap.mapper.profiles import load_profile

logger = logging.getLogger(__name__)

_NO_EXCLUDE: FrozenSet[str] = frozenset()
_NO_RENAMES: Mapping[str, str] = {}


def _apply(transform: Optional[Transform], value: Any, ctx: CloneContext) -> Any:
    if transform is None:
        return ctx.clone(value)
    if isinstance(transform, Leaf):
        return transform.fn(ctx.clone(value))
    # Nested: only mappings (or sequences of them) are reshaped
    if isinstance(value, Mapping):
        return _map_fields(value, ctx, transform.transforms)
    if isinstance(value, (list, tuple)):
        # only mapping elements are reshaped; nested sequences go through clone
        with ctx.visiting(value):
            items = [
                _map_fields(item, ctx, transform.transforms) if isinstance(item, Mapping) else ctx.clone(item)
                for item in value
            ]
        return items if isinstance(value, list) else tuple(items)
    return ctx.clone(value)


def _map_fields(
    source: Mapping[Any, Any],
    ctx: CloneContext,
    transforms: Mapping[str, Transform],
    exclude: FrozenSet[str] = _NO_EXCLUDE,
    renames: Mapping[str, str] = _NO_RENAMES,
) -> Dict[Any, Any]:
    target: Dict[Any, Any] = {}
    with ctx.visiting(source):
        for key, value in source.items():
            if key in exclude:
                continue
            target_key = renames.get(key, key)
            target[target_key] = _apply(transforms.get(target_key), value, ctx)
    return target


def map_record(
    source: Mapping[Any, Any],
    options: Union[MapOptions, Mapping[str, Any], None] = None,
) -> Dict[Any, Any]:
    """Build a new record from `source`.
    - Drops keys listed in `exclude`
    - Renames keys through `field_mappings` (target -> source)
    - Applies leaf or nested `transforms` keyed by the target name
    - Copies nested dicts/lists/dates when `deep` is set, rejecting cycles
    """
    if not isinstance(source, Mapping):
        raise TypeError(f"source must be a mapping, got {type(source).__name__}")
    opts = coerce_options(options)
    ctx = CloneContext(deep=opts.deep)
    try:
        return _map_fields(source, ctx, opts.transforms, opts.exclude, opts.renames)
    except CircularReferenceError:
        logger.warning(f"Aborted mapping of record with {len(source)} fields: circular reference")
        raise


@dataclass(frozen=True)
class Mapper:
    options: MapOptions = field(default_factory=MapOptions)

    @staticmethod
    def from_options(**kwargs: Any) -> "Mapper":
        return Mapper(MapOptions.from_dict(kwargs))

    @staticmethod
    def from_json_path(path: str | Path) -> "Mapper":
        return Mapper(MapOptions.from_json_path(path))

    @staticmethod
    def from_profile(name: str, config: Optional[ProfileConfig] = None) -> "Mapper":
        return Mapper(load_profile(name, config))

    def map(self, source: Mapping[Any, Any]) -> Dict[Any, Any]:
        return map_record(source, self.options)

    def map_many(self, sources: Iterable[Mapping[Any, Any]]) -> List[Dict[Any, Any]]:
        # each record gets its own traversal context
        return [self.map(s) for s in sources]

    def __call__(self, source: Mapping[Any, Any]) -> Dict[Any, Any]:
        return self.map(source)
