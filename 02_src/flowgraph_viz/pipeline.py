"""Pipeline abstractions and sequential runner."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List

logger = logging.getLogger(__name__)


class PipelinePhase(ABC):
    phase_name: str

    @abstractmethod
    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        raise NotImplementedError


class PipelineRunner:
    def __init__(self, phases: Iterable[PipelinePhase]) -> None:
        self.phases: List[PipelinePhase] = list(phases)

    def run(self, context: Dict[str, Any]) -> Dict[str, Any]:
        """Run every phase over one source file.

        Each phase sees the merged output of the phases before it; the names
        of finished phases are collected under `completed_phases`.
        """
        current = dict(context)
        completed: List[str] = []
        for phase in self.phases:
            logger.debug("Running phase %s on %s", phase.phase_name, current.get("source_path"))
            phase_result = phase.run(current)
            if not isinstance(phase_result, dict):
                raise TypeError(f"Phase '{phase.phase_name}' must return dict context.")
            current.update(phase_result)
            completed.append(phase.phase_name)
        current["completed_phases"] = completed
        return current
