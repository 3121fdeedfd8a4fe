"""Pydantic models for picked sample points and the datasets built from them."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, Tuple

Vec3 = Tuple[float, float, float]


class SamplePoint(BaseModel):
    """A picked location, with the unit surface normal when one was asked for."""

    location: Vec3
    normal: Optional[Vec3] = None
    degenerate: bool = False  # normal could not be normalized


class LoadPoint(BaseModel):
    """Point force, serialized as LocX..MagZ."""

    model_config = ConfigDict(populate_by_name=True)

    loc_x: float = Field(alias="LocX")
    loc_y: float = Field(alias="LocY")
    loc_z: float = Field(alias="LocZ")
    mag_x: float = Field(alias="MagX")
    mag_y: float = Field(alias="MagY")
    mag_z: float = Field(alias="MagZ")

    @classmethod
    def from_vectors(cls, location: Vec3, magnitude: Vec3) -> "LoadPoint":
        return cls(
            loc_x=location[0],
            loc_y=location[1],
            loc_z=location[2],
            mag_x=magnitude[0],
            mag_y=magnitude[1],
            mag_z=magnitude[2],
        )

    @property
    def location(self) -> Vec3:
        return (self.loc_x, self.loc_y, self.loc_z)

    @property
    def magnitude(self) -> Vec3:
        return (self.mag_x, self.mag_y, self.mag_z)


class RestraintPoint(BaseModel):
    """Fixed support, serialized as LocX..IsFixedZ."""

    model_config = ConfigDict(populate_by_name=True)

    loc_x: float = Field(alias="LocX")
    loc_y: float = Field(alias="LocY")
    loc_z: float = Field(alias="LocZ")
    is_fixed_x: bool = Field(default=True, alias="IsFixedX")
    is_fixed_y: bool = Field(default=True, alias="IsFixedY")
    is_fixed_z: bool = Field(default=True, alias="IsFixedZ")

    @classmethod
    def fixed_at(cls, location: Vec3) -> "RestraintPoint":
        """Restraint with all three axes fixed."""
        return cls(loc_x=location[0], loc_y=location[1], loc_z=location[2])

    @property
    def location(self) -> Vec3:
        return (self.loc_x, self.loc_y, self.loc_z)
