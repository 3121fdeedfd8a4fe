import stat
import sys
import textwrap
from pathlib import Path

import pytest
import pyvista as pv

WORKER_SOURCE = """\
import json
import os
import sys
from pathlib import Path

mode, descriptor = sys.argv[1], sys.argv[2]
specs = json.loads(Path(descriptor).read_text())
print(f"worker mode {mode}")
print(f"resolution {specs['Resolution']}")
if mode == "printable":
    template = specs["PathResultWithPlaceholder"]
    for layer in (1, 2):
        Path(template.replace("#", str(layer))).write_text("*HEADING\\n")
    Path(specs["PathResultInfo"]).write_text(json.dumps({"layers": 2}))
elif mode == "hollow":
    Path(specs["PathResult"]).write_text("solid hollowed\\nendsolid\\n")
sys.exit(int(os.environ.get("FEATHER_TEST_EXIT", "0")))
"""


def make_script(path: Path, body: str) -> Path:
    """Write an executable python script using the running interpreter."""
    path.write_text(f"#!{sys.executable}\n" + textwrap.dedent(body))
    path.chmod(path.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return path


@pytest.fixture
def plane_surface():
    """Flat 10x10 surface in the XY plane, normals along +Z."""
    return pv.Plane(
        center=(0, 0, 0), direction=(0, 0, 1), i_size=10, j_size=10
    ).triangulate()


@pytest.fixture
def stl_file(tmp_path, plane_surface):
    path = tmp_path / "input.stl"
    plane_surface.save(str(path))
    return path


@pytest.fixture
def worker(tmp_path):
    """Stand-in worker that reads the descriptor and writes results."""
    return make_script(tmp_path / "worker.py", WORKER_SOURCE)


@pytest.fixture
def request_yml(tmp_path, stl_file, worker):
    """Factory writing a job request YAML next to the geometry."""

    def _write(extra="", saved_unit="Millimeters", name="request.yml"):
        content = f"""\
general:
  workdir: handoff
  worker: {worker}
geometry:
  path: {stl_file.name}
  model_unit_system: Millimeters
  saved_unit_system: {saved_unit}
"""
        path = tmp_path / name
        path.write_text(content + textwrap.dedent(extra))
        return path

    return _write


@pytest.fixture
def handoff(tmp_path):
    return tmp_path / "handoff"


@pytest.fixture(autouse=True)
def clear_exit_env(monkeypatch):
    monkeypatch.delenv("FEATHER_TEST_EXIT", raising=False)
