from .fusion import FusionOrchestrator
from .history import FusionHistory
from .ids import FusionIdFactory, SequentialFusionIds, uuid_fusion_id
from .progress import (
    PHASE_PCT,
    LoggingProgressReporter,
    Phase,
    ProgressReporter,
    RecordingProgressReporter,
)

__all__ = [
    "FusionOrchestrator",
    "FusionHistory",
    "FusionIdFactory",
    "SequentialFusionIds",
    "uuid_fusion_id",
    "PHASE_PCT",
    "LoggingProgressReporter",
    "Phase",
    "ProgressReporter",
    "RecordingProgressReporter",
]
