import logging
from pathlib import Path
from typing import Optional

from ..jobs.layout import HandoffLayout
from ..models.request import JobRequest
from .yml_request import load_request

logger = logging.getLogger(__name__)


class CleanApp:
    """CLI app removing job artifacts from the handoff directory."""

    def __init__(self, yml: Path, request: Optional[JobRequest] = None):
        self.yml = yml
        self.request = request or load_request(yml)

    def clean(self):
        """Remove the fixed-name artifacts; the directory itself stays."""
        workdir = self.request.general.workdir
        layout = HandoffLayout(Path(workdir) if workdir else None)
        if not layout.directory.is_dir():
            logger.info(f"Workdir {layout.directory} does not exist")
            return []
        removed = []
        candidates = [layout.path(n) for n in layout.artifact_names()]
        for path in candidates + layout.layer_results():
            if path.is_file():
                path.unlink()
                removed.append(path)
                logger.info(f"Removed {path}")
        if not removed:
            logger.info(f"No artifacts in {layout.directory}")
        return removed
