"""Pydantic models for resolved parameter profiles."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional


class MaterialProfile(BaseModel):
    """Physical constants of one material, in millimeter-based units."""

    model_config = ConfigDict(frozen=True)

    name: str
    mass_density: float = Field(gt=0)  # N*s2/mm4
    young_modulus: float = Field(gt=0)  # MPa (N/mm2)
    poisson_ratio: float = Field(ge=0, lt=1)
    tensile_strength: Optional[float] = Field(default=None, gt=0)  # MPa (N/mm2)


class UseCaseProfile(BaseModel):
    """Load scenario of a piece, e.g. a ring or a crown."""

    model_config = ConfigDict(frozen=True)

    name: str
    load_magnitude: float = Field(ge=0)  # N


class PrecisionProfile(BaseModel):
    """Voxel count on the longest axis of the model's bounding box."""

    model_config = ConfigDict(frozen=True)

    name: str
    resolution: int = Field(gt=0)
