"""Pydantic models for the job descriptor handed to the worker.

Each scenario has its own descriptor model. Field aliases are the JSON keys
the worker reads, so ``model_dump_json(by_alias=True)`` is the wire format
and ``model_validate_json`` parses it back through the same schema.
"""

import math
from pathlib import PurePath
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..units import UnitSystem

LAYER_PLACEHOLDER = "#"


def _check_absolute(v):
    if v is not None and not PurePath(v).is_absolute():
        raise ValueError(f"path {v} must be absolute")
    return v


class JobDescriptor(BaseModel):
    """Fields every worker mode reads."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    path_stl: str = Field(alias="PathStl")
    resolution: int = Field(alias="Resolution", gt=0)
    model_unit_system: UnitSystem = Field(alias="ModelUnitSystem")
    model_unit_system_of_saved_stl_file: UnitSystem = Field(
        alias="ModelUnitSystemOfSavedStlFile"
    )

    @field_validator("path_stl")
    def validate_path_stl(cls, v):
        return _check_absolute(v)

    @field_validator("model_unit_system_of_saved_stl_file")
    def validate_saved_unit(cls, v):
        # material constants are authored per millimeter
        if v is not UnitSystem.MILLIMETERS:
            raise ValueError("unit of STL file must be set to mm")
        return v

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


class AnalysisDescriptor(JobDescriptor):
    """Material, gravity and solver flags shared by the FEA modes."""

    mass_density: float = Field(alias="MassDensity", gt=0)  # N*s2/mm4
    young_modulus: float = Field(alias="YoungModulus", gt=0)  # MPa
    poisson_ratio: float = Field(alias="PoissonRatio", ge=0, lt=1)
    gravity_direction_x: float = Field(alias="GravityDirectionX")
    gravity_direction_y: float = Field(alias="GravityDirectionY")
    gravity_direction_z: float = Field(alias="GravityDirectionZ")
    gravity_magnitude: float = Field(alias="GravityMagnitude", ge=0)
    gravity_is_needed: bool = Field(alias="GravityIsNeeded")
    nonlinear_considered: bool = Field(default=False, alias="NonlinearConsidered")
    exact_surface_considered: bool = Field(
        default=True, alias="ExactSurfaceConsidered"
    )

    @model_validator(mode="after")
    def validate_gravity_direction(self):
        norm = math.sqrt(
            self.gravity_direction_x**2
            + self.gravity_direction_y**2
            + self.gravity_direction_z**2
        )
        if not math.isclose(norm, 1.0, rel_tol=1e-9):
            raise ValueError(f"gravity direction must be a unit vector, got norm {norm}")
        return self


class LightenDescriptor(AnalysisDescriptor):
    path_load_points: str = Field(alias="PathLoadPoints")
    path_restraint_points: str = Field(alias="PathRestraintPoints")

    @field_validator("path_load_points", "path_restraint_points")
    def validate_paths(cls, v):
        return _check_absolute(v)


class PrintableDescriptor(AnalysisDescriptor):
    path_result_with_placeholder: str = Field(alias="PathResultWithPlaceholder")
    path_result_info: str = Field(alias="PathResultInfo")
    path_log_fea: str = Field(alias="PathLogFea")
    layer_to_start_fea: int = Field(default=3, alias="LayerToStartFea", ge=0)
    tensile_strength: float = Field(alias="TensileStrength", gt=0)  # MPa

    @field_validator("path_result_with_placeholder", "path_result_info", "path_log_fea")
    def validate_paths(cls, v):
        return _check_absolute(v)

    @field_validator("path_result_with_placeholder")
    def validate_placeholder(cls, v):
        if LAYER_PLACEHOLDER not in PurePath(v).name:
            raise ValueError(
                f"result path {v} must contain '{LAYER_PLACEHOLDER}' as layer number placeholder"
            )
        return v


class HollowDescriptor(JobDescriptor):
    path_result: str = Field(alias="PathResult")
    wall_thickness: float = Field(alias="WallThickness", gt=0, le=100)
    infill: bool = Field(default=False, alias="Infill")

    @field_validator("path_result")
    def validate_path_result(cls, v):
        return _check_absolute(v)
