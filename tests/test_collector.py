import logging

import numpy as np
import pytest
from feather.errors import EmptySelection
from feather.geometry import collector
from feather.models.points import SamplePoint


def test_collect_one_record_per_pick(plane_surface):
    picks = [[0.0, 0.0, 0.0], [1.0, 2.0, 0.5], [-3.0, 4.0, -0.2]]
    samples = collector.collect(plane_surface, picks, "pick loads")
    assert len(samples) == len(picks)
    for pick, sample in zip(picks, samples):
        assert sample.location == pytest.approx(tuple(pick))
        assert np.linalg.norm(sample.normal) == pytest.approx(1.0)
        assert abs(sample.normal[2]) == pytest.approx(1.0)
        assert not sample.degenerate


def test_collect_consumes_generator(plane_surface):
    picks = (p for p in [[0.0, 0.0, 0.0], [1.0, 1.0, 0.0]])
    assert len(collector.collect(plane_surface, picks)) == 2


def test_empty_selection(plane_surface):
    with pytest.raises(EmptySelection):
        collector.collect(plane_surface, [])
    with pytest.raises(EmptySelection):
        collector.collect(None, iter([]))


def test_bad_pick_shape():
    with pytest.raises(ValueError, match="3 coordinates"):
        collector.collect(None, [[1.0, 2.0]])


def test_load_points_follow_normals(plane_surface):
    samples = collector.collect(plane_surface, [[0.5, 0.5, 0.0], [2.0, -1.0, 0.0]])
    loads = collector.load_points(samples, 200.0)
    assert len(loads) == 2
    for load in loads:
        magnitude = np.array(load.magnitude)
        assert np.linalg.norm(magnitude) == pytest.approx(200.0)
        assert np.allclose(np.cross(magnitude, [0, 0, 1]), 0.0)


def test_unitize_zero_vector():
    vector, good = collector.unitize([0.0, 0.0, 0.0])
    assert not good
    assert np.allclose(vector, 0.0)


def test_degenerate_normal_is_kept(plane_surface, caplog):
    """A normal that cannot be normalized is flagged but still yields a record."""
    surface = collector.with_normals(plane_surface)
    surface.cell_data["Normals"] = np.zeros((surface.n_cells, 3))
    picks = [[0.0, 0.0, 0.0], [1.0, 2.0, 0.0]]
    with caplog.at_level(logging.WARNING, logger="feather.geometry.collector"):
        samples = collector.collect(surface, picks)
    assert len(samples) == len(picks)
    assert all(s.degenerate for s in samples)
    assert "Cannot normalize" in caplog.text

    loads = collector.load_points(samples, 800.0)
    assert len(loads) == len(picks)
    assert loads[0].magnitude == (0.0, 0.0, 0.0)
    assert loads[1].location == (1.0, 2.0, 0.0)


def test_load_points_need_normals():
    with pytest.raises(ValueError, match="no surface normal"):
        collector.load_points([SamplePoint(location=(0, 0, 0))], 200.0)


def test_restraints_fix_all_axes():
    samples = collector.collect(None, [[1, 2, 3], [4, 5, 6], [7, 8, 9]])
    restraints = collector.restraint_points(samples)
    assert [r.location for r in restraints] == [(1, 2, 3), (4, 5, 6), (7, 8, 9)]
    assert all(r.is_fixed_x and r.is_fixed_y and r.is_fixed_z for r in restraints)


def test_load_surface_from_stl(stl_file):
    surface = collector.load_surface(stl_file)
    assert surface.n_cells > 0
    assert "Normals" in surface.cell_data
