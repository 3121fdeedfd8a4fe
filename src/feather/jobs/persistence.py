"""Write job artifacts to the handoff directory."""

import json
import logging
from pathlib import Path
from typing import List, Optional, Set, Type

from pydantic import BaseModel, TypeAdapter

from ..errors import IOFailure
from ..models.descriptor import (
    HollowDescriptor,
    JobDescriptor,
    LightenDescriptor,
    PrintableDescriptor,
)
from ..models.points import LoadPoint, RestraintPoint
from ..models.scenario import Scenario
from .layout import HandoffLayout

logger = logging.getLogger(__name__)

DESCRIPTOR_TYPES = {
    Scenario.LIGHTEN: LightenDescriptor,
    Scenario.PRINTABLE: PrintableDescriptor,
    Scenario.HOLLOW: HollowDescriptor,
}


class JobArtifacts(BaseModel):
    """Everything the plugin hands to the worker for one job."""

    descriptor: JobDescriptor
    loads: Optional[List[LoadPoint]] = None
    restraints: Optional[List[RestraintPoint]] = None


def dump_points(points: List[BaseModel]) -> str:
    return json.dumps([p.model_dump(by_alias=True) for p in points], indent=2)


def _write(path: Path, text: str) -> Path:
    try:
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        logger.error(f"Failed to write {path}: {e}")
        raise IOFailure(f"cannot write {path}: {e.strerror or e}") from e
    logger.info(f"Written: {path}")
    return path


def persist(artifacts: JobArtifacts, directory) -> Set[Path]:
    """Write each artifact as its own file, overwriting same-named files.

    Datasets go first and the descriptor last, so a descriptor on disk always
    refers to datasets that exist.
    """
    layout = directory if isinstance(directory, HandoffLayout) else HandoffLayout(directory)
    try:
        layout.directory.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise IOFailure(f"cannot create handoff directory {layout.directory}: {e}") from e

    written = set()
    if artifacts.loads is not None:
        written.add(_write(layout.load_points, dump_points(artifacts.loads)))
    if artifacts.restraints is not None:
        written.add(_write(layout.restraint_points, dump_points(artifacts.restraints)))
    written.add(_write(layout.descriptor, artifacts.descriptor.to_json()))
    return written


def load_descriptor(path, scenario: Scenario) -> JobDescriptor:
    """Parse a persisted descriptor back through its scenario's schema."""
    descriptor_type: Type[JobDescriptor] = DESCRIPTOR_TYPES[Scenario(scenario)]
    return descriptor_type.model_validate_json(Path(path).read_text(encoding="utf-8"))


def load_points(path) -> List[LoadPoint]:
    return TypeAdapter(List[LoadPoint]).validate_json(Path(path).read_text(encoding="utf-8"))


def load_restraints(path) -> List[RestraintPoint]:
    return TypeAdapter(List[RestraintPoint]).validate_json(
        Path(path).read_text(encoding="utf-8")
    )
