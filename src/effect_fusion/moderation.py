"""Blueprint moderation.

A moderator may rescale projected magnitudes and fusion weights of a
blueprint but must leave its shape alone: the same module ids in the same
order, the same strategy and the same reconstruction level. The orchestrator
enforces that with ``check_moderation_contract`` after every call.
"""
from __future__ import annotations

import logging
from typing import Literal, Protocol

from .errors import ModerationContractViolation
from .extraction import clamp
from .models.essence import EffectEssence
from .models.fusion import ExpectedTransformation, FusionBlueprint

logger = logging.getLogger(__name__)

Complexity = Literal["simple", "moderate", "complex", "very_complex"]

COMPLEXITY_TIERS = [
    (0.2, "simple"),
    (0.45, "moderate"),
    (0.7, "complex"),
]
TOP_COMPLEXITY: Complexity = "very_complex"

INTENSITY_BASELINE = 0.5
INTENSITY_BONUS = {"simple": -0.3, "moderate": 0.0, "complex": 0.2, "very_complex": 0.4}
DRAMATIC_BONUS = 0.3
INTENSITY_BOUNDS = (0.1, 1.0)

DEFAULT_CEILING = 100.0
PROTECTIVE_MIN_LEVEL = 3


class Moderator(Protocol):
    async def moderate(self, blueprint: FusionBlueprint) -> FusionBlueprint:
        ...


class PassthroughModerator:
    async def moderate(self, blueprint: FusionBlueprint) -> FusionBlueprint:
        return blueprint


def classify_complexity(essence: EffectEssence) -> Complexity:
    factor = essence.creative_dna.complexity_factor
    for upper, tier in COMPLEXITY_TIERS:
        if factor < upper:
            return tier
    return TOP_COMPLEXITY


def is_dramatic(essence: EffectEssence) -> bool:
    return (
        essence.creative_dna.energy_level > 0.7
        or essence.core_behavior.animation_type == "particle_system"
    )


def enhancement_intensity(essence: EffectEssence) -> float:
    value = INTENSITY_BASELINE + INTENSITY_BONUS[classify_complexity(essence)]
    if is_dramatic(essence):
        value += DRAMATIC_BONUS
    return clamp(value, *INTENSITY_BOUNDS)


class ContextualModerator:
    """Keep simple effects from being over-enhanced.

    A simple effect pushed to level 3 or above gets its visual and creative
    projections scaled by ``0.5 + intensity / 2``. Afterwards every projection
    is bounded to ``[0, ceiling]`` and every fusion weight to ``[0, 1]``.
    """

    def __init__(self, ceiling: float = DEFAULT_CEILING):
        if ceiling <= 0:
            raise ValueError("ceiling must be positive")
        self.ceiling = ceiling

    def is_protective(self, blueprint: FusionBlueprint) -> bool:
        return (
            classify_complexity(blueprint.original_essence) == "simple"
            and blueprint.reconstruction_level >= PROTECTIVE_MIN_LEVEL
        )

    def _bound(self, value: float) -> float:
        return clamp(value, 0.0, self.ceiling)

    async def moderate(self, blueprint: FusionBlueprint) -> FusionBlueprint:
        expected = blueprint.expected_transformation
        visual = expected.visual_enhancement
        creative = expected.creative_evolution

        if self.is_protective(blueprint):
            scale = 0.5 + enhancement_intensity(blueprint.original_essence) / 2
            logger.info(
                "Protective moderation: simple effect at level %d, scale=%.2f",
                blueprint.reconstruction_level, scale,
            )
            visual *= scale
            creative *= scale

        bounded = ExpectedTransformation(
            visual_enhancement=self._bound(visual),
            performance_boost=self._bound(expected.performance_boost),
            creative_evolution=self._bound(creative),
            technical_advancement=self._bound(expected.technical_advancement),
        )
        modules = [
            p.model_copy(update={"fusion_weight": clamp(p.fusion_weight)})
            for p in blueprint.active_modules
        ]
        return blueprint.model_copy(update={
            "expected_transformation": bounded,
            "active_modules": modules,
        })


def check_moderation_contract(before: FusionBlueprint, after: FusionBlueprint) -> None:
    before_ids = [p.module_id for p in before.active_modules]
    after_ids = [p.module_id for p in after.active_modules]
    if before_ids != after_ids:
        raise ModerationContractViolation(
            f"Moderator changed active modules: {before_ids} -> {after_ids}"
        )
    if before.strategy != after.strategy:
        raise ModerationContractViolation(
            f"Moderator changed strategy: {before.strategy} -> {after.strategy}"
        )
    if before.reconstruction_level != after.reconstruction_level:
        raise ModerationContractViolation(
            f"Moderator changed level: {before.reconstruction_level} -> {after.reconstruction_level}"
        )
