from __future__ import annotations
from typing import List, Optional
import logging

from shapemap.config.env import ProfileConfig, get_profile_config
from shapemap.mapper.options import MapOptions

logger = logging.getLogger(__name__)


def list_profiles(config: Optional[ProfileConfig] = None) -> List[str]:
    cfg = config or get_profile_config()
    if not cfg.profiles_dir.is_dir():
        return []
    return sorted(p.stem for p in cfg.profiles_dir.glob("*.json") if p.is_file())


def load_profile(name: str, config: Optional[ProfileConfig] = None) -> MapOptions:
    """Load `<profiles_dir>/<name>.json` as MapOptions.
    Transform leaves in the file are converter names (see converters.py).
    """
    cfg = config or get_profile_config()
    path = cfg.profiles_dir / f"{name}.json"
    if not path.is_file():
        raise FileNotFoundError(f"mapping profile {name!r} not found at {path}")
    opts = MapOptions.from_json_path(path)
    logger.info(f"Loaded mapping profile {name!r} from {path}")
    return opts
