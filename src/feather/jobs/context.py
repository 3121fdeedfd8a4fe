"""Per-job state, from parameter collection through worker completion."""

import logging
from pathlib import Path
from typing import Callable, Dict, Optional, Set

from ..geometry import collector
from ..models.descriptor import JobDescriptor
from ..models.paramdb import ParameterDatabase, Profile, default_database
from ..models.request import JobRequest
from ..models.scenario import Category, Scenario
from . import assembler, launcher, persistence
from .layout import HandoffLayout

logger = logging.getLogger(__name__)

LOAD_PROMPT = (
    "Sample points on mesh that are most probable to be under external impact/force/load"
)
RESTRAINT_PROMPT = (
    "Sample points on mesh that are most probable to be in contact with human body"
)


class JobContext:
    """Everything one job owns.

    Built at command entry and captured by the completion callback; nothing
    about a job lives in module globals. Steps run in order and validation
    errors surface in :meth:`prepare`, before anything touches the disk.
    """

    def __init__(
        self,
        scenario: Scenario,
        request: JobRequest,
        params: Optional[ParameterDatabase] = None,
    ):
        self.scenario = Scenario(scenario)
        self.request = request
        self.params = params or default_database()
        workdir = Path(request.general.workdir) if request.general.workdir else None
        self.layout = HandoffLayout(workdir)
        self.profiles: Dict[Category, Profile] = {}
        self.artifacts: Optional[persistence.JobArtifacts] = None
        self.paths: Set[Path] = set()
        self.handle: Optional[launcher.LaunchHandle] = None

    def __repr__(self):
        return f"JobContext({self.scenario.value}, {self.layout.directory})"

    @property
    def descriptor(self) -> Optional[JobDescriptor]:
        return self.artifacts.descriptor if self.artifacts else None

    def resolve(self) -> Dict[Category, Profile]:
        """Resolve every selector the scenario uses, defaults for unset ones."""
        selectors = self.request.selectors
        for category in Category:
            if not self.params.uses(self.scenario, category):
                continue
            selector = getattr(selectors, category.value)
            if selector is None:
                selector = self.params.default_selector(self.scenario, category)
            self.profiles[category] = self.params.resolve(self.scenario, category, selector)
            logger.info(f"{category.value}: {self.profiles[category].name} ({selector})")
        return self.profiles

    def collect(self, surface=None):
        """Build the load and restraint datasets, lighten only."""
        if self.scenario is not Scenario.LIGHTEN:
            return None, None
        picks = self.request.picks
        if surface is None and picks.load_points:
            surface = collector.load_surface(self.request.geometry.path)
        samples = collector.collect(surface, picks.load_points, LOAD_PROMPT)
        loads = collector.load_points(
            samples, self.profiles[Category.USE_CASE].load_magnitude
        )
        samples = collector.collect(None, picks.restraint_points, RESTRAINT_PROMPT)
        restraints = collector.restraint_points(samples)
        return loads, restraints

    def prepare(self, surface=None) -> persistence.JobArtifacts:
        """Validate and assemble everything without writing a file."""
        geometry = self.request.geometry
        self.resolve()
        assembler.check_saved_unit(geometry.saved_unit_system)
        loads, restraints = self.collect(surface)
        hollow = self.request.hollow
        descriptor = assembler.assemble(
            self.scenario,
            self.layout,
            geometry.path,
            geometry.model_unit_system,
            geometry.saved_unit_system,
            precision=self.profiles[Category.PRECISION],
            material=self.profiles.get(Category.MATERIAL),
            use_case=self.profiles.get(Category.USE_CASE),
            wall_thickness=hollow.wall_thickness,
            infill=hollow.infill,
        )
        self.artifacts = persistence.JobArtifacts(
            descriptor=descriptor, loads=loads, restraints=restraints
        )
        return self.artifacts

    def persist(self) -> Set[Path]:
        if self.artifacts is None:
            raise RuntimeError("job must be prepared before it is persisted")
        self.paths = persistence.persist(self.artifacts, self.layout)
        return self.paths

    def launch(
        self,
        on_complete: Optional[Callable[[launcher.CompletionEvent], None]] = None,
        executable: Optional[str] = None,
        with_log: Optional[bool] = None,
        timeout: Optional[float] = None,
        detached: bool = False,
    ) -> launcher.LaunchHandle:
        """Start the worker on the persisted descriptor.

        ``detached`` lets the worker keep running after this process exits.
        """
        if self.layout.descriptor not in self.paths:
            raise RuntimeError("job must be persisted before the worker is launched")
        general = self.request.general
        with_log = general.with_log if with_log is None else with_log
        self.handle = launcher.launch(
            executable or general.worker,
            [self.scenario.value, str(self.layout.descriptor)],
            on_complete,
            log_path=self.layout.log_worker if with_log else None,
            timeout=timeout if timeout is not None else general.timeout,
            detached=detached,
        )
        return self.handle

    def results(self):
        """Result artifacts the worker has produced so far."""
        if self.scenario is Scenario.PRINTABLE:
            found = self.layout.layer_results()
            found += [p for p in (self.layout.result_info, self.layout.log_fea) if p.exists()]
            return found
        if self.scenario is Scenario.HOLLOW:
            return [self.layout.result_hollow] if self.layout.result_hollow.exists() else []
        return []
