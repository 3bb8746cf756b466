from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Callable, Dict, FrozenSet, Mapping, Union
import json
import logging

from shapemap.mapper.converters import get_converter

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Leaf:
    fn: Callable[[Any], Any]


@dataclass(frozen=True)
class Nested:
    transforms: Mapping[str, "Transform"]


Transform = Union[Leaf, Nested]

# option keys accepted by from_dict; camelCase and snake_case spellings both work
_OPTION_KEYS = {
    "exclude": "exclude",
    "fieldMappings": "field_mappings",
    "field_mappings": "field_mappings",
    "transforms": "transforms",
    "deep": "deep",
}


def compile_transform(entry: Any, path: str = "") -> Transform:
    """Turn a raw transform entry into the tagged variant.
    - Leaf / Nested: kept as-is
    - callable: Leaf
    - mapping: Nested, compiled recursively
    """
    if isinstance(entry, (Leaf, Nested)):
        return entry
    if callable(entry):
        return Leaf(entry)
    if isinstance(entry, Mapping):
        return Nested(MappingProxyType(compile_transforms(entry, path)))
    raise ValueError(
        f"transform for {path!r} must be a callable or a mapping of transforms, "
        f"got {type(entry).__name__}"
    )


def compile_transforms(raw: Mapping[str, Any], prefix: str = "") -> Dict[str, Transform]:
    out: Dict[str, Transform] = {}
    for key, entry in raw.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        out[key] = compile_transform(entry, path)
    return out


def invert_field_mappings(field_mappings: Mapping[str, str]) -> Dict[str, str]:
    """Build the source -> target lookup. First declared target key wins."""
    renames: Dict[str, str] = {}
    for target_key, source_key in field_mappings.items():
        if source_key in renames:
            logger.debug(
                f"Ignoring rename {source_key!r} -> {target_key!r}; "
                f"already mapped to {renames[source_key]!r}"
            )
            continue
        renames[source_key] = target_key
    return renames


def converters_from_json(raw: Mapping[str, Any], prefix: str = "") -> Dict[str, Any]:
    """Resolve converter names in a JSON transform table into callables."""
    if not isinstance(raw, Mapping):
        where = f"transforms for {prefix!r}" if prefix else "transforms"
        raise ValueError(f"{where} must be a JSON object, got {type(raw).__name__}")
    out: Dict[str, Any] = {}
    for key, entry in raw.items():
        path = f"{prefix}.{key}" if prefix else str(key)
        if isinstance(entry, str):
            out[key] = get_converter(entry)
        elif isinstance(entry, Mapping):
            out[key] = converters_from_json(entry, path)
        else:
            raise ValueError(f"transform for {path!r} must be a converter name or an object")
    return out


@dataclass(frozen=True)
class MapOptions:
    exclude: FrozenSet[str] = frozenset()
    field_mappings: Mapping[str, str] = field(default_factory=dict)
    transforms: Mapping[str, Transform] = field(default_factory=dict)
    deep: bool = False
    renames: Mapping[str, str] = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        if isinstance(self.exclude, str):
            raise ValueError("exclude must be a collection of field names, not a string")
        # frozen: normalise through object.__setattr__
        object.__setattr__(self, "exclude", frozenset(self.exclude or ()))
        object.__setattr__(self, "field_mappings", MappingProxyType(dict(self.field_mappings or {})))
        object.__setattr__(self, "transforms", MappingProxyType(compile_transforms(self.transforms or {})))
        object.__setattr__(self, "deep", bool(self.deep))
        object.__setattr__(self, "renames", MappingProxyType(invert_field_mappings(self.field_mappings)))
        logger.debug(
            f"Compiled map options: {len(self.exclude)} excluded, "
            f"{len(self.renames)} renames, {len(self.transforms)} transforms, deep={self.deep}"
        )

    @staticmethod
    def from_dict(data: Mapping[str, Any]) -> "MapOptions":
        kwargs: Dict[str, Any] = {}
        for k, v in data.items():
            name = _OPTION_KEYS.get(k)
            if name is None:
                raise ValueError(f"Unknown map option: {k!r}")
            kwargs[name] = v
        return MapOptions(**kwargs)

    @staticmethod
    def from_json_path(path: str | Path) -> "MapOptions":
        data = json.loads(Path(path).read_text())
        if not isinstance(data, dict):
            raise ValueError(f"mapping profile {path} must contain a JSON object")
        if data.get("transforms") is not None:
            data["transforms"] = converters_from_json(data["transforms"])
        return MapOptions.from_dict(data)

    def with_overrides(self, **changes: Any) -> "MapOptions":
        """Copy with some fields replaced; the original is left untouched."""
        fields: Dict[str, Any] = {
            "exclude": self.exclude,
            "field_mappings": self.field_mappings,
            "transforms": self.transforms,
            "deep": self.deep,
        }
        for k in changes:
            if k not in fields:
                raise ValueError(f"Unknown map option: {k!r}")
        fields.update(changes)
        return MapOptions(**fields)


def coerce_options(options: Union[MapOptions, Mapping[str, Any], None]) -> MapOptions:
    if options is None:
        return MapOptions()
    if isinstance(options, MapOptions):
        return options
    if isinstance(options, Mapping):
        return MapOptions.from_dict(options)
    raise TypeError(f"options must be MapOptions or a mapping, got {type(options).__name__}")
