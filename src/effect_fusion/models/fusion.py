# effect_fusion/models/fusion.py
from __future__ import annotations
from typing import Dict, List, Literal
from pydantic import BaseModel, ConfigDict, Field

from .essence import EffectEssence
from .module import Strategy

FusionAlgorithm = Literal["harmonic", "quantum", "creative", "technical", "hybrid"]

_FROZEN = ConfigDict(frozen=True)


class ModuleFusionProfile(BaseModel):
    model_config = _FROZEN

    module_id: str
    fusion_weight: float
    compatibility: float = 0.0
    creative_contribution: Dict[str, float] = Field(default_factory=dict)
    behavioral_influence: Dict[str, float] = Field(default_factory=dict)
    technical_enhancement: Dict[str, float] = Field(default_factory=dict)
    fusion_algorithm: FusionAlgorithm = "harmonic"


class FusionOptions(BaseModel):
    """Caller adjustments added on top of the level policy projections."""
    model_config = ConfigDict(allow_inf_nan=False)

    creativity_boost: float = 0.0
    performance_priority: float = 0.0
    innovation_level: float = 0.0


class ExpectedTransformation(BaseModel):
    model_config = _FROZEN

    visual_enhancement: float
    performance_boost: float
    creative_evolution: float
    technical_advancement: float


class FusionBlueprint(BaseModel):
    model_config = _FROZEN

    original_essence: EffectEssence
    active_modules: List[ModuleFusionProfile]
    strategy: Strategy
    reconstruction_level: int
    expected_transformation: ExpectedTransformation


class EnhancedProperty(BaseModel):
    model_config = _FROZEN

    visual_boost: float
    behavioral_enhancement: float
    innovation_factor: float


class ModuleIntegration(BaseModel):
    model_config = _FROZEN

    integration_strength: float
    creative_influence: Dict[str, float]
    technical_impact: Dict[str, float]
    behavioral_modification: Dict[str, float]


class CreativeSynthesis(BaseModel):
    model_config = _FROZEN

    fusion_harmony: float
    creative_coherence: float
    innovation_integration: float


class CreativeEvolution(BaseModel):
    model_config = _FROZEN

    aesthetic_evolution: float
    behavioral_sophistication: float
    innovation_breakthrough: float
    creative_synthesis: CreativeSynthesis


class PerformanceOptimization(BaseModel):
    model_config = _FROZEN

    module: str
    type: str = "performance"
    impact: float
    implementation: str


class TechnicalOptimizations(BaseModel):
    model_config = _FROZEN

    performance_optimizations: List[PerformanceOptimization] = []
    compatibility_enhancements: List[str] = []
    stability_improvements: List[str] = []
    resource_optimizations: List[str] = []


class FusedEssence(BaseModel):
    """Aggregated enhancement data. Contains no code yet."""
    model_config = _FROZEN

    original: EffectEssence
    strategy: Strategy
    animation_type: str
    enhanced_properties: Dict[str, EnhancedProperty] = Field(default_factory=dict)
    module_integrations: Dict[str, ModuleIntegration] = Field(default_factory=dict)
    creative_evolution: CreativeEvolution
    technical_optimizations: TechnicalOptimizations = Field(default_factory=TechnicalOptimizations)


class PassStat(BaseModel):
    model_config = _FROZEN

    name: str
    size: int


class ReconstructionOutput(BaseModel):
    model_config = _FROZEN

    code: str
    generated_size: int
    compressed_size: int
    passes: List[PassStat] = []


class TransformationReport(BaseModel):
    model_config = _FROZEN

    original_characteristics: List[str]
    module_contributions: Dict[str, List[str]]
    fusion_innovations: List[str]
    enhancement_metrics: Dict[str, float]


class CreativeEvolutionSummary(BaseModel):
    model_config = _FROZEN

    aesthetic_improvements: List[str] = []
    behavioral_enhancements: List[str] = []
    performance_optimizations: List[str] = []
    innovation_breakthroughs: List[str] = []


class ReconstructedArtifact(BaseModel):
    model_config = _FROZEN

    fusion_id: str
    code: str
    transformation_report: TransformationReport
    creative_evolution_summary: CreativeEvolutionSummary


class FusionRecord(BaseModel):
    model_config = _FROZEN

    fusion_id: str
    level: int
    blueprint: FusionBlueprint
    artifact: ReconstructedArtifact


class OrchestratorStats(BaseModel):
    total_fusions_performed: int
    modules_registered: int
    levels_configured: int
    fusion_success_rate: float
