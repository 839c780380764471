from .module import ModuleDescriptor, LevelPolicy, Strategy
from .essence import (
    EffectEssence, CoreBehavior, CreativeDNA, TechnicalAspects,
    PerformanceProfile, FusionCompatibility,
)
from .fusion import (
    ModuleFusionProfile, FusionOptions, ExpectedTransformation, FusionBlueprint,
    EnhancedProperty, ModuleIntegration, CreativeSynthesis, CreativeEvolution,
    PerformanceOptimization, TechnicalOptimizations, FusedEssence, PassStat,
    ReconstructionOutput, TransformationReport, CreativeEvolutionSummary,
    ReconstructedArtifact, FusionRecord, OrchestratorStats, FusionAlgorithm,
)
