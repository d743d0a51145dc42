"""
Typed stage pipeline.

A pipeline is an ordered list of stages. Each stage names the artifacts it
requires and provides; construction fails if a requirement is not provided
by an earlier stage. Running the pipeline forks one stream per stage from
the master before anything runs, so disabling a stage never shifts the
numbers another stage sees.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, List, Sequence, Tuple

from ..core.distributions import RandomGenerator

logger = logging.getLogger(__name__)


class PipelineError(Exception):
    """Stage wiring is inconsistent (missing artifact or duplicate stage)."""
    pass


@dataclass
class Stage:
    """
    One step of a generation run.

    Attributes:
        name: Unique stage name, used in logs and errors
        label: Fork label of the stage's stream
        requires: Artifacts that must exist before the stage runs
        provides: Artifacts the stage makes available (empty when disabled)
        run: Callable(context, rng)
        enabled: Disabled stages are skipped but their stream is still forked
    """
    name: str
    label: str
    requires: Tuple[str, ...] = ()
    provides: Tuple[str, ...] = ()
    run: Callable[[Any, RandomGenerator], None] = None
    enabled: bool = True


@dataclass
class StageReport:
    """What happened to one stage during a run."""
    name: str
    label_path: str
    ran: bool


class Pipeline:
    """
    Ordered, dependency-checked list of stages.

    Args:
        stages: Stages in execution order
        initial: Artifacts available before the first stage

    Example:
        pipeline = Pipeline([
            Stage("topology", "lsystem", provides=("tree",), run=build_tree),
            Stage("bodies", "stardata", requires=("tree",), provides=("bodies",), run=build_bodies),
        ])
        pipeline.run(master, context)
    """

    def __init__(self, stages: Sequence[Stage], initial: Iterable[str] = ()):
        self.stages: List[Stage] = list(stages)
        self.initial = tuple(initial)
        self.reports: List[StageReport] = []
        self._check()

    def _check(self) -> None:
        available = set(self.initial)
        names = set()
        for stage in self.stages:
            if stage.name in names:
                raise PipelineError(f"Duplicate stage '{stage.name}'")
            names.add(stage.name)

            missing = [a for a in stage.requires if a not in available]
            if missing:
                raise PipelineError(
                    f"Stage '{stage.name}' requires {missing} but no earlier stage provides it"
                )
            available.update(stage.provides)

    @property
    def artifacts(self) -> List[str]:
        out = list(self.initial)
        for stage in self.stages:
            out.extend(a for a in stage.provides if a not in out)
        return out

    def stage(self, name: str) -> Stage:
        for stage in self.stages:
            if stage.name == name:
                return stage
        raise KeyError(name)

    def run(self, master: RandomGenerator, context: Any) -> Any:
        """
        Execute every enabled stage against context.

        Returns:
            The same context, mutated by the stages
        """
        streams: Dict[str, RandomGenerator] = {
            stage.name: master.fork(stage.label) for stage in self.stages
        }
        self.reports = []

        for stage in self.stages:
            rng = streams[stage.name]
            if not stage.enabled or stage.run is None:
                logger.debug(f"Skipping stage '{stage.name}'")
                self.reports.append(StageReport(stage.name, rng.stream.label_path, False))
                continue
            logger.debug(f"Running stage '{stage.name}' on stream {rng.stream.label_path}")
            stage.run(context, rng)
            self.reports.append(StageReport(stage.name, rng.stream.label_path, True))

        return context
