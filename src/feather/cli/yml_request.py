import logging
import os
from importlib.resources import files
from pathlib import Path
from typing import Optional

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from ..errors import RequestError
from ..models.request import JobRequest

logger = logging.getLogger(__name__)


def merge_defaults(default_data: dict, user_data: dict) -> dict:
    """Overlay user sections on the defaults, one level deep."""
    merged = {k: dict(v) if isinstance(v, dict) else v for k, v in default_data.items()}
    for key, value in (user_data or {}).items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key].update(value)
        else:
            merged[key] = value
    return merged


def load_request(yaml_file: Path, text: Optional[str] = None) -> JobRequest:
    """Load and validate a job request, merging with packaged defaults.

    Relative geometry and workdir paths are taken relative to the YAML file.
    """
    yaml = YAML(typ="safe")
    yaml_file = Path(yaml_file).resolve()
    prefix = str(yaml_file.parent)

    try:
        if text is None:
            with yaml_file.open("r") as f:
                user_data = yaml.load(f)
        else:
            user_data = yaml.load(text)
    except YAMLError as e:
        logger.error(f"Failed to load YAML {yaml_file}: {e}")
        raise RequestError(f"malformed job request {yaml_file}: {e}") from e
    if user_data is not None and not isinstance(user_data, dict):
        raise RequestError(f"job request {yaml_file} must be a mapping of sections")

    default_path = files("feather.models") / "defaults.yaml"
    with default_path.open("r") as f:
        default_data = yaml.load(f)

    merged_data = merge_defaults(default_data, user_data)

    geometry = merged_data.get("geometry")
    if isinstance(geometry, dict) and geometry.get("path"):
        geometry["path"] = os.path.join(prefix, geometry["path"])
    general = merged_data.get("general") or {}
    if general.get("workdir"):
        general["workdir"] = os.path.join(prefix, general["workdir"])

    try:
        request = JobRequest(**merged_data)
    except Exception as e:
        logger.error(f"YAML validation failed: {e}")
        raise

    logger.info(f"Loaded and validated YAML from {yaml_file}")
    return request

