"""Assemble resolved parameters into a job descriptor."""

import logging
from pathlib import Path
from typing import Dict, Optional, Tuple

from pydantic import BaseModel, ConfigDict

from ..errors import UnitPreconditionViolation
from ..models.descriptor import (
    HollowDescriptor,
    JobDescriptor,
    LightenDescriptor,
    PrintableDescriptor,
)
from ..models.profiles import MaterialProfile, PrecisionProfile, UseCaseProfile
from ..models.scenario import Scenario
from ..units import UnitSystem, convert
from .layout import HandoffLayout

logger = logging.getLogger(__name__)

GRAVITY = 9.810  # m/s2
GRAVITY_UNIT = UnitSystem.METERS
REQUIRED_SAVED_UNIT = UnitSystem.MILLIMETERS


class GravityPolicy(BaseModel):
    """Fixed per scenario, never a user input."""

    model_config = ConfigDict(frozen=True)

    direction: Tuple[float, float, float]
    needed: bool


GRAVITY_POLICIES: Dict[Scenario, GravityPolicy] = {
    # point loads dominate, gravity is left out
    Scenario.LIGHTEN: GravityPolicy(direction=(0.0, 0.0, -1.0), needed=False),
    # SLA printing is done upside-down
    Scenario.PRINTABLE: GravityPolicy(direction=(0.0, 0.0, 1.0), needed=True),
}


def check_saved_unit(saved_unit) -> UnitSystem:
    saved_unit = UnitSystem.parse(saved_unit)
    if saved_unit is not REQUIRED_SAVED_UNIT:
        logger.error(
            f"Unit of STL file must be set to mm but it is {saved_unit.value.lower()}"
        )
        raise UnitPreconditionViolation("unit of STL file must be set to mm")
    return saved_unit


def assemble(
    scenario: Scenario,
    layout: HandoffLayout,
    geometry_path,
    model_unit,
    saved_unit,
    precision: PrecisionProfile,
    material: Optional[MaterialProfile] = None,
    use_case: Optional[UseCaseProfile] = None,
    wall_thickness: Optional[float] = None,
    infill: bool = False,
) -> JobDescriptor:
    """Build the descriptor for one job.

    The geometry must have been saved in millimeters, since every material
    constant is expressed per millimeter. Anything else is a hard stop.
    """
    scenario = Scenario(scenario)
    saved_unit = check_saved_unit(saved_unit)
    model_unit = UnitSystem.parse(model_unit)
    common = dict(
        path_stl=str(Path(geometry_path).resolve()),
        resolution=precision.resolution,
        model_unit_system=model_unit,
        model_unit_system_of_saved_stl_file=saved_unit,
    )

    if scenario is Scenario.HOLLOW:
        if wall_thickness is None:
            raise ValueError("hollowing needs a wall thickness")
        return HollowDescriptor(
            **common,
            path_result=str(layout.result_hollow),
            wall_thickness=wall_thickness,
            infill=infill,
        )

    if material is None:
        raise ValueError(f"{scenario.value} needs a material profile")
    policy = GRAVITY_POLICIES[scenario]
    analysis = dict(
        common,
        mass_density=material.mass_density,
        young_modulus=material.young_modulus,
        poisson_ratio=material.poisson_ratio,
        gravity_direction_x=policy.direction[0],
        gravity_direction_y=policy.direction[1],
        gravity_direction_z=policy.direction[2],
        gravity_magnitude=convert(GRAVITY, GRAVITY_UNIT, saved_unit),
        gravity_is_needed=policy.needed,
        nonlinear_considered=False,
        exact_surface_considered=True,
    )

    if scenario is Scenario.LIGHTEN:
        if use_case is None:
            raise ValueError("lighten needs a use case profile")
        logger.info(
            f"Lightening for {use_case.name} ({use_case.load_magnitude} N) in {material.name}"
        )
        return LightenDescriptor(
            **analysis,
            path_load_points=str(layout.load_points),
            path_restraint_points=str(layout.restraint_points),
        )

    if material.tensile_strength is None:
        raise ValueError(f"material {material.name} has no tensile strength")
    logger.info(
        "First voxel layer on Z axis is considered restraint i.e. in contact with 3D print floor."
    )
    return PrintableDescriptor(
        **analysis,
        path_result_with_placeholder=str(layout.result_layers),
        path_result_info=str(layout.result_info),
        path_log_fea=str(layout.log_fea),
        tensile_strength=material.tensile_strength,
    )
