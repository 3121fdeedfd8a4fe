import pytest
from feather.errors import UnitPreconditionViolation
from feather.jobs.assembler import GRAVITY_POLICIES, assemble, check_saved_unit
from feather.jobs.layout import HandoffLayout
from feather.models.paramdb import resolve
from feather.models.scenario import Category, Scenario
from feather.units import UnitSystem


@pytest.fixture
def metal():
    return resolve(Category.MATERIAL, 3, Scenario.LIGHTEN)


@pytest.fixture
def ring():
    return resolve(Category.USE_CASE, 4, Scenario.LIGHTEN)


@pytest.fixture
def medium():
    return resolve(Category.PRECISION, 3, Scenario.LIGHTEN)


def test_lighten_gravity_points_down(handoff, stl_file, metal, ring, medium):
    descriptor = assemble(
        Scenario.LIGHTEN,
        HandoffLayout(handoff),
        stl_file,
        UnitSystem.CENTIMETERS,
        UnitSystem.MILLIMETERS,
        precision=medium,
        material=metal,
        use_case=ring,
    )
    assert (
        descriptor.gravity_direction_x,
        descriptor.gravity_direction_y,
        descriptor.gravity_direction_z,
    ) == (0.0, 0.0, -1.0)
    assert descriptor.gravity_is_needed is False
    assert descriptor.gravity_magnitude == pytest.approx(9810.0)
    assert descriptor.model_unit_system is UnitSystem.CENTIMETERS
    assert descriptor.mass_density == metal.mass_density


def test_printable_gravity_points_up(handoff, stl_file, medium):
    resin = resolve(Category.MATERIAL, 3, Scenario.PRINTABLE)
    descriptor = assemble(
        Scenario.PRINTABLE,
        HandoffLayout(handoff),
        stl_file,
        "mm",
        "mm",
        precision=medium,
        material=resin,
    )
    assert descriptor.gravity_direction_z == 1.0
    assert descriptor.gravity_is_needed is True
    assert descriptor.tensile_strength == resin.tensile_strength
    assert GRAVITY_POLICIES[Scenario.PRINTABLE].direction == (0.0, 0.0, 1.0)


def test_geometry_path_made_absolute(handoff, stl_file, medium, monkeypatch):
    monkeypatch.chdir(stl_file.parent)
    descriptor = assemble(
        Scenario.HOLLOW,
        HandoffLayout(handoff),
        stl_file.name,
        "mm",
        "mm",
        precision=medium,
        wall_thickness=2.0,
    )
    assert descriptor.path_stl == str(stl_file.resolve())


@pytest.mark.parametrize("unit", ["Inches", "Meters", "Centimeters"])
def test_non_millimeter_geometry_is_fatal(handoff, stl_file, metal, ring, medium, unit):
    with pytest.raises(UnitPreconditionViolation, match="must be set to mm"):
        assemble(
            Scenario.LIGHTEN,
            HandoffLayout(handoff),
            stl_file,
            "mm",
            unit,
            precision=medium,
            material=metal,
            use_case=ring,
        )
    assert not handoff.exists()


def test_check_saved_unit_accepts_abbreviation():
    assert check_saved_unit("mm") is UnitSystem.MILLIMETERS


def test_missing_profiles(handoff, stl_file, medium):
    with pytest.raises(ValueError, match="material profile"):
        assemble(Scenario.LIGHTEN, HandoffLayout(handoff), stl_file, "mm", "mm", precision=medium)
