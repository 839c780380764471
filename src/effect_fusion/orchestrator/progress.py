import logging
import time
from enum import Enum
from typing import List, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    validating = "validating"
    extracting = "extracting"
    analyzing = "analyzing"
    blueprinting = "blueprinting"
    moderating = "moderating"
    synthesizing = "synthesizing"
    reconstructing = "reconstructing"
    reporting = "reporting"
    finalizing = "finalizing"


# percentage reached when each phase starts
PHASE_PCT = {
    Phase.validating: 0,
    Phase.extracting: 5,
    Phase.analyzing: 20,
    Phase.blueprinting: 35,
    Phase.moderating: 45,
    Phase.synthesizing: 55,
    Phase.reconstructing: 70,
    Phase.reporting: 90,
    Phase.finalizing: 100,
}


class ProgressReporter(Protocol):
    async def update(self, phase: Phase, pct: int, message: Optional[str] = None) -> None:
        ...


class LoggingProgressReporter:
    def __init__(self, name: str = "fusion"):
        self._name = name
        self._t0 = time.perf_counter()

    async def update(self, phase: Phase, pct: int, message: Optional[str] = None) -> None:
        elapsed_ms = int((time.perf_counter() - self._t0) * 1000)
        logger.info("[%s] %s %d%% (%d ms)%s", self._name, phase.value, pct, elapsed_ms,
                    f" - {message}" if message else "")


class RecordingProgressReporter:
    """Keeps every update in memory; handy for callers that poll."""

    def __init__(self):
        self.events: List[Tuple[Phase, int, Optional[str]]] = []

    async def update(self, phase: Phase, pct: int, message: Optional[str] = None) -> None:
        self.events.append((phase, pct, message))

    @property
    def phases(self) -> List[Phase]:
        return [p for p, _, _ in self.events]
