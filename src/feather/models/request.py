"""Pydantic models for a job request file."""

from pydantic import BaseModel, Field, StrictInt, field_validator
from typing import List, Optional

from ..units import UnitSystem


class GeneralConfig(BaseModel):
    """Where artifacts go and which worker runs them."""

    workdir: Optional[str] = Field(
        default=None, description="Handoff directory, system temp directory if unset"
    )
    worker: str = Field(default="Cotton.exe", description="Worker executable")
    with_log: bool = Field(default=False, description="Tee worker output to a log file")
    timeout: Optional[float] = Field(
        default=None, gt=0, description="Seconds before the worker is terminated"
    )


class GeometryConfig(BaseModel):
    """Geometry exported by the host, and the units it was saved in."""

    path: str
    model_unit_system: UnitSystem = UnitSystem.MILLIMETERS
    saved_unit_system: UnitSystem = UnitSystem.MILLIMETERS


class SelectorConfig(BaseModel):
    """User answers; unset means the table's default."""

    material: Optional[StrictInt] = None
    use_case: Optional[StrictInt] = None
    precision: Optional[StrictInt] = None


class PickConfig(BaseModel):
    load_points: List[List[float]] = Field(default_factory=list)
    restraint_points: List[List[float]] = Field(default_factory=list)

    @field_validator("load_points", "restraint_points")
    def validate_xyz(cls, v):
        for point in v:
            if len(point) != 3:
                raise ValueError("picked points must be [x, y, z] coordinates")
        return v


class HollowConfig(BaseModel):
    wall_thickness: float = Field(default=1.8, gt=0, le=100)
    infill: bool = False


class JobRequest(BaseModel):
    """Top-level job request."""

    general: GeneralConfig = Field(default_factory=GeneralConfig)
    geometry: GeometryConfig
    selectors: SelectorConfig = Field(default_factory=SelectorConfig)
    picks: PickConfig = Field(default_factory=PickConfig)
    hollow: HollowConfig = Field(default_factory=HollowConfig)
