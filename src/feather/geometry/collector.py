"""Turn picked points into typed load and restraint records."""

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np
import pyvista as pv

from ..errors import EmptySelection
from ..models.points import LoadPoint, RestraintPoint, SamplePoint

logger = logging.getLogger(__name__)

NORMAL_TOLERANCE = 1e-12


def load_surface(path) -> pv.PolyData:
    """Read a surface mesh (STL, OBJ, PLY, VTP) and compute its cell normals."""
    mesh = pv.read(str(path))
    if not isinstance(mesh, pv.PolyData):
        mesh = mesh.extract_surface()
    return with_normals(mesh)


def with_normals(mesh: pv.PolyData) -> pv.PolyData:
    if "Normals" in mesh.cell_data:
        return mesh
    return mesh.compute_normals(
        cell_normals=True,
        point_normals=False,
        split_vertices=False,
        auto_orient_normals=False,
    )


def unitize(vector) -> tuple:
    """Return the unit vector and whether normalization succeeded."""
    v = np.asarray(vector, dtype=float)
    norm = np.linalg.norm(v)
    if not np.isfinite(norm) or norm < NORMAL_TOLERANCE:
        return v, False
    return v / norm, True


def collect(
    surface: Optional[pv.PolyData],
    picks: Iterable[Sequence[float]],
    prompt: str = "",
) -> List[SamplePoint]:
    """Collect sample points, with surface normals when a surface is given.

    ``picks`` is consumed once. A normal that cannot be normalized is logged
    and kept as-is so that the number of records matches the picks.
    """
    if prompt:
        logger.info(prompt)
    if surface is not None:
        surface = with_normals(surface)
        normals = surface.cell_data["Normals"]

    samples = []
    for pick in picks:
        location = np.asarray(pick, dtype=float)
        if location.shape != (3,):
            raise ValueError(f"picked point must have 3 coordinates, got {list(pick)}")
        if surface is None:
            samples.append(SamplePoint(location=tuple(location)))
            continue
        cell_id = surface.find_closest_cell(location)
        normal, good = unitize(normals[cell_id])
        if not good:
            logger.warning(f"Cannot normalize the surface normal {normal} at {location}")
        samples.append(
            SamplePoint(
                location=tuple(location), normal=tuple(normal), degenerate=not good
            )
        )

    if not samples:
        raise EmptySelection("No points are selected")
    logger.info(f"Collected {len(samples)} sample points")
    return samples


def load_points(samples: Sequence[SamplePoint], magnitude: float) -> List[LoadPoint]:
    """Scale each sample's normal by the scenario load magnitude."""
    loads = []
    for s in samples:
        if s.normal is None:
            raise ValueError(f"sample at {s.location} has no surface normal")
        loads.append(
            LoadPoint.from_vectors(s.location, tuple(np.asarray(s.normal) * magnitude))
        )
    logger.info(f"Load/force points count: {len(loads)}")
    return loads


def restraint_points(samples: Sequence[SamplePoint]) -> List[RestraintPoint]:
    """Fix all three axes at every sample location."""
    restraints = [RestraintPoint.fixed_at(s.location) for s in samples]
    logger.info(f"Restraint points count: {len(restraints)}")
    return restraints
