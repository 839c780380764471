from __future__ import annotations

import logging
from typing import Callable, Dict, List, Sequence, Tuple

from .extraction import clamp
from .models.essence import EffectEssence
from .models.fusion import FusionAlgorithm, ModuleFusionProfile
from .models.module import ModuleDescriptor
from .telemetry import trace

logger = logging.getLogger(__name__)

BASE_COMPATIBILITY = 0.7

# (creative_weight, technical_weight, innovation_index) -> bool
AlgorithmPredicate = Callable[[float, float, float], bool]

ALGORITHM_RULES: List[Tuple[AlgorithmPredicate, FusionAlgorithm]] = [
    (lambda cw, tw, inn: cw > 0.7 and inn > 0.8, "quantum"),
    (lambda cw, tw, inn: cw > 0.5, "creative"),
    (lambda cw, tw, inn: tw > 0.7, "technical"),
    (lambda cw, tw, inn: cw > 0.4 and tw > 0.4, "hybrid"),
]
FALLBACK_ALGORITHM: FusionAlgorithm = "harmonic"


def select_fusion_algorithm(module: ModuleDescriptor, essence: EffectEssence) -> FusionAlgorithm:
    innovation = essence.creative_dna.innovation_index
    for predicate, algorithm in ALGORITHM_RULES:
        if predicate(module.creative_weight, module.technical_weight, innovation):
            return algorithm
    return FALLBACK_ALGORITHM


def module_compatibility(essence: EffectEssence, module: ModuleDescriptor) -> float:
    compatibility = BASE_COMPATIBILITY
    if module.specialization == "creativity" and essence.creative_dna.innovation_index > 0.7:
        compatibility += 0.2
    if module.specialization == "performance" and essence.technical_aspects.optimization_potential > 0.6:
        compatibility += 0.15
    return clamp(compatibility)


def fusion_weight(essence: EffectEssence, module: ModuleDescriptor, compatibility: float) -> float:
    weight = compatibility * 0.5
    weight += module.creative_weight * essence.creative_dna.innovation_index * 0.3
    weight += module.technical_weight * essence.technical_aspects.optimization_potential * 0.2
    return clamp(weight)


def creative_contribution(module: ModuleDescriptor) -> Dict[str, float]:
    cw = module.creative_weight
    return {
        "aesthetic_enhancement": cw * 0.8,
        "behavioral_innovation": cw * 0.6,
        "visual_sophistication": cw * 0.7,
    }


def behavioral_influence(module: ModuleDescriptor) -> Dict[str, float]:
    cw, tw = module.creative_weight, module.technical_weight
    return {
        "animation_sophistication": cw * 0.5 + tw * 0.3,
        "interaction_enhancement": tw * 0.6,
        "responsiveness_improvement": tw * 0.8,
    }


def technical_enhancement(module: ModuleDescriptor) -> Dict[str, float]:
    tw = module.technical_weight
    return {
        "performance_optimization": tw * 0.9,
        "compatibility_improvement": tw * 0.7,
        "stability_enhancement": tw * 0.8,
    }


class CompatibilityAnalyzer:
    """Score every candidate module against an essence.

    The result is ordered by fusion weight, highest first. Ties keep the
    order the modules were given in, which is the registry selection order.
    """

    def profile(self, essence: EffectEssence, module: ModuleDescriptor) -> ModuleFusionProfile:
        compatibility = module_compatibility(essence, module)
        return ModuleFusionProfile(
            module_id=module.id,
            fusion_weight=fusion_weight(essence, module, compatibility),
            compatibility=compatibility,
            creative_contribution=creative_contribution(module),
            behavioral_influence=behavioral_influence(module),
            technical_enhancement=technical_enhancement(module),
            fusion_algorithm=select_fusion_algorithm(module, essence),
        )

    @trace("effect_fusion.analyze")
    def analyze(self, essence: EffectEssence, modules: Sequence[ModuleDescriptor]) -> List[ModuleFusionProfile]:
        profiles = [self.profile(essence, m) for m in modules]
        profiles.sort(key=lambda p: -p.fusion_weight)
        logger.debug("Scored %d modules", len(profiles))
        return profiles
