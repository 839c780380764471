from __future__ import annotations

import logging
from typing import Dict, List

from .extraction import clamp
from .models.fusion import (
    CreativeEvolution,
    CreativeSynthesis,
    EnhancedProperty,
    FusedEssence,
    FusionBlueprint,
    ModuleFusionProfile,
    ModuleIntegration,
    PerformanceOptimization,
    TechnicalOptimizations,
)
from .telemetry import trace

logger = logging.getLogger(__name__)

CREATIVE_ALGORITHMS = ("creative", "quantum")

BREAKTHROUGH_CAP = {"revolutionary": 0.9}
DEFAULT_BREAKTHROUGH_CAP = 0.7

COMPATIBILITY_ENHANCEMENTS = ["ES6+ compatibility", "Polyfill integration", "Fallback mechanisms"]
STABILITY_IMPROVEMENTS = ["Try-catch blocks", "Graceful degradation", "Performance monitoring"]
RESOURCE_OPTIMIZATIONS = ["Memory pooling", "Garbage collection optimization", "Asset preloading"]


def _is_creative(profile: ModuleFusionProfile) -> bool:
    return profile.fusion_algorithm in CREATIVE_ALGORITHMS


def _unit(value: float) -> float:
    return clamp(value, 0.0, 1.0)


class FusionSynthesizer:
    """Turn a moderated blueprint into a ``FusedEssence``.

    Pure: the same blueprint always yields an equal result. Every aggregate
    metric lands in [0, 1], including for a blueprint with no modules.
    """

    @trace("effect_fusion.synthesize")
    def synthesize(self, blueprint: FusionBlueprint) -> FusedEssence:
        fused = FusedEssence(
            original=blueprint.original_essence,
            strategy=blueprint.strategy,
            animation_type=blueprint.original_essence.core_behavior.animation_type,
            enhanced_properties=self.enhanced_properties(blueprint),
            module_integrations=self.module_integrations(blueprint),
            creative_evolution=self.creative_evolution(blueprint),
            technical_optimizations=self.technical_optimizations(blueprint),
        )
        logger.debug(
            "Synthesized %d integrations (%d enhanced)",
            len(fused.module_integrations),
            len(fused.enhanced_properties),
        )
        return fused

    def enhanced_properties(self, blueprint: FusionBlueprint) -> Dict[str, EnhancedProperty]:
        return {
            p.module_id: EnhancedProperty(
                visual_boost=p.creative_contribution.get("aesthetic_enhancement", 0.0),
                behavioral_enhancement=p.behavioral_influence.get("animation_sophistication", 0.0),
                innovation_factor=p.fusion_weight,
            )
            for p in blueprint.active_modules
            if _is_creative(p)
        }

    def module_integrations(self, blueprint: FusionBlueprint) -> Dict[str, ModuleIntegration]:
        return {
            p.module_id: ModuleIntegration(
                integration_strength=p.fusion_weight,
                creative_influence=dict(p.creative_contribution),
                technical_impact=dict(p.technical_enhancement),
                behavioral_modification=dict(p.behavioral_influence),
            )
            for p in blueprint.active_modules
        }

    # -- creative evolution -------------------------------------------------

    def creative_evolution(self, blueprint: FusionBlueprint) -> CreativeEvolution:
        return CreativeEvolution(
            aesthetic_evolution=self.aesthetic_evolution(blueprint),
            behavioral_sophistication=self.behavioral_sophistication(blueprint),
            innovation_breakthrough=self.innovation_breakthrough(blueprint),
            creative_synthesis=CreativeSynthesis(
                fusion_harmony=self.fusion_harmony(blueprint),
                creative_coherence=self.creative_coherence(blueprint),
                innovation_integration=self.innovation_integration(blueprint),
            ),
        )

    def aesthetic_evolution(self, blueprint: FusionBlueprint) -> float:
        value = blueprint.original_essence.creative_dna.innovation_index
        for p in blueprint.active_modules:
            if p.creative_contribution.get("aesthetic_enhancement", 0.0) > 0.5:
                value += p.fusion_weight * 0.3
        return _unit(value)

    def behavioral_sophistication(self, blueprint: FusionBlueprint) -> float:
        value = blueprint.original_essence.creative_dna.complexity_factor
        for p in blueprint.active_modules:
            value += p.behavioral_influence.get("animation_sophistication", 0.0) * p.fusion_weight * 0.2
        return _unit(value)

    def innovation_breakthrough(self, blueprint: FusionBlueprint) -> float:
        cap = BREAKTHROUGH_CAP.get(blueprint.strategy, DEFAULT_BREAKTHROUGH_CAP)
        return _unit(min(cap, blueprint.expected_transformation.creative_evolution / 100))

    def fusion_harmony(self, blueprint: FusionBlueprint) -> float:
        value = 0.8
        modules = blueprint.active_modules
        if modules and sum(p.fusion_weight for p in modules) / len(modules) > 0.7:
            value += 0.1
        if blueprint.strategy == "balanced":
            value += 0.05
        return _unit(value)

    def creative_coherence(self, blueprint: FusionBlueprint) -> float:
        value = blueprint.original_essence.creative_dna.innovation_index
        value += sum(1 for p in blueprint.active_modules if _is_creative(p)) * 0.05
        return _unit(value)

    def innovation_integration(self, blueprint: FusionBlueprint) -> float:
        value = 0.6
        for p in blueprint.active_modules:
            if p.creative_contribution.get("behavioral_innovation", 0.0) > 0.6:
                value += 0.1
        return _unit(value)

    # -- technical ----------------------------------------------------------

    def technical_optimizations(self, blueprint: FusionBlueprint) -> TechnicalOptimizations:
        perf: List[PerformanceOptimization] = []
        for p in blueprint.active_modules:
            impact = p.technical_enhancement.get("performance_optimization", 0.0)
            if impact > 0.5:
                perf.append(PerformanceOptimization(
                    module=p.module_id,
                    impact=impact,
                    implementation=f"performance optimization for {p.module_id}",
                ))
        return TechnicalOptimizations(
            performance_optimizations=perf,
            compatibility_enhancements=list(COMPATIBILITY_ENHANCEMENTS),
            stability_improvements=list(STABILITY_IMPROVEMENTS),
            resource_optimizations=list(RESOURCE_OPTIMIZATIONS),
        )
