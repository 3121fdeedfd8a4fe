import tempfile
from pathlib import Path
from typing import Optional

from ..models.descriptor import LAYER_PLACEHOLDER


class HandoffLayout:
    """Fixed artifact names inside one handoff directory."""

    DESCRIPTOR = "specs.json"
    LOAD_POINTS = "load-points.json"
    RESTRAINT_POINTS = "restraint-points.json"
    RESULT_LAYERS = f"result-layer0-to-layer{LAYER_PLACEHOLDER}.inp"
    RESULT_INFO = "result-info.json"
    LOG_FEA = "FEA-log.txt"
    RESULT_HOLLOW = "hollowed.stl"
    LOG_WORKER = "worker-log.txt"

    def __init__(self, directory: Optional[Path] = None):
        if directory is None:
            directory = Path(tempfile.gettempdir())
        self.directory = Path(directory).resolve()

    def __repr__(self):
        return f"HandoffLayout({str(self.directory)!r})"

    def path(self, name: str) -> Path:
        return self.directory / name

    @property
    def descriptor(self) -> Path:
        return self.path(self.DESCRIPTOR)

    @property
    def load_points(self) -> Path:
        return self.path(self.LOAD_POINTS)

    @property
    def restraint_points(self) -> Path:
        return self.path(self.RESTRAINT_POINTS)

    @property
    def result_layers(self) -> Path:
        return self.path(self.RESULT_LAYERS)

    @property
    def result_info(self) -> Path:
        return self.path(self.RESULT_INFO)

    @property
    def log_fea(self) -> Path:
        return self.path(self.LOG_FEA)

    @property
    def result_hollow(self) -> Path:
        return self.path(self.RESULT_HOLLOW)

    @property
    def log_worker(self) -> Path:
        return self.path(self.LOG_WORKER)

    def artifact_names(self):
        """Every fixed name the plugin or the worker may write here."""
        return [
            self.DESCRIPTOR,
            self.LOAD_POINTS,
            self.RESTRAINT_POINTS,
            self.RESULT_INFO,
            self.LOG_FEA,
            self.RESULT_HOLLOW,
            self.LOG_WORKER,
        ]

    def layer_results(self):
        """Layer result files the worker wrote, in layer order."""
        pattern = self.RESULT_LAYERS.replace(LAYER_PLACEHOLDER, "*")
        prefix, suffix = pattern.split("*")

        def layer(p):
            number = p.name[len(prefix) : len(p.name) - len(suffix)]
            return int(number) if number.isdigit() else -1

        return sorted(self.directory.glob(pattern), key=layer)
