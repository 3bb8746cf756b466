from __future__ import annotations
import os
from dataclasses import dataclass
from pathlib import Path

BUNDLED_PROFILES_DIR = Path(__file__).resolve().parents[1] / "mapper" / "mappings"


@dataclass(frozen=True)
class ProfileConfig:
    profiles_dir: Path = BUNDLED_PROFILES_DIR


def get_profile_config() -> ProfileConfig:
    d = os.getenv("SHAPEMAP_PROFILES_DIR")
    if not d:
        return ProfileConfig()
    return ProfileConfig(profiles_dir=Path(d).expanduser())
