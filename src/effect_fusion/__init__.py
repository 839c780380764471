"""Effect fusion: blend a visual effect's source with weighted enhancement modules."""

from .analysis import CompatibilityAnalyzer
from .blueprint import BlueprintBuilder
from .config import FusionSettings
from .errors import (
    ExtractionError,
    FusionError,
    InvalidLevelError,
    ModerationContractViolation,
    ReconstructionError,
    RegistryError,
)
from .extraction import EssenceExtractor
from .moderation import ContextualModerator, PassthroughModerator, check_moderation_contract
from .orchestrator import FusionHistory, FusionOrchestrator, SequentialFusionIds, uuid_fusion_id
from .reconstruction import CodeReconstructor, compress, normalize
from .registry import LevelPolicyTable, ModuleRegistry
from .report import ReportGenerator
from .synthesis import FusionSynthesizer

__version__ = "0.1.0"

__all__ = [
    "BlueprintBuilder",
    "CodeReconstructor",
    "CompatibilityAnalyzer",
    "ContextualModerator",
    "EssenceExtractor",
    "ExtractionError",
    "FusionError",
    "FusionHistory",
    "FusionOrchestrator",
    "FusionSettings",
    "FusionSynthesizer",
    "InvalidLevelError",
    "LevelPolicyTable",
    "ModerationContractViolation",
    "ModuleRegistry",
    "PassthroughModerator",
    "ReconstructionError",
    "RegistryError",
    "ReportGenerator",
    "SequentialFusionIds",
    "check_moderation_contract",
    "compress",
    "normalize",
    "uuid_fusion_id",
]
