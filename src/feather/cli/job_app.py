import logging
from functools import partial
from pathlib import Path
from typing import Optional

from rich.console import Console

from ..jobs.context import JobContext
from ..jobs.launcher import CompletionEvent
from ..models.request import JobRequest
from ..models.scenario import Scenario
from .yml_request import load_request

logger = logging.getLogger(__name__)


def post_process(context: JobContext, event: CompletionEvent):
    """Runs on the launcher's notification thread; logging only."""
    logger.info("Post process started.")
    if event.timed_out:
        logger.warning(f"{context.scenario.value} worker was stopped by the timeout")
    elif event.cancelled:
        logger.warning(f"{context.scenario.value} worker was cancelled")
    logger.info(f"Worker exited with code {event.returncode}")
    logger.info("Post process finished.")


class JobApp:
    """CLI app running one analysis job per call."""

    def __init__(self, yml: Path, request: Optional[JobRequest] = None):
        self.yml = yml
        self.request = request or load_request(yml)

    def run(
        self,
        scenario: Scenario,
        wait: bool = True,
        worker: Optional[str] = None,
        with_log: Optional[bool] = None,
        timeout: Optional[float] = None,
        surface=None,
    ) -> JobContext:
        context = JobContext(scenario, self.request)
        context.prepare(surface)
        context.persist()
        handle = context.launch(
            partial(post_process, context),
            executable=worker,
            with_log=with_log,
            timeout=timeout,
            detached=not wait,
        )
        if wait:
            with Console(stderr=True).status("Process started. Please wait..."):
                event = handle.wait()
            self.report(context, event)
        return context

    def report(self, context: JobContext, event: CompletionEvent):
        """Host-side summary once the worker is done."""
        if event.returncode != 0:
            logger.error(
                f"{context.scenario.value} worker failed with exit code {event.returncode}"
            )
        results = context.results()
        for path in results:
            logger.info(f"Result: {path}")
        if not results and context.scenario is not Scenario.LIGHTEN:
            logger.warning(f"No results found in {context.layout.directory}")

    def lighten(self, **kwargs) -> JobContext:
        return self.run(Scenario.LIGHTEN, **kwargs)

    def printable(self, **kwargs) -> JobContext:
        return self.run(Scenario.PRINTABLE, **kwargs)

    def hollow(self, **kwargs) -> JobContext:
        return self.run(Scenario.HOLLOW, **kwargs)
