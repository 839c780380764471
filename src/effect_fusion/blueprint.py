from __future__ import annotations

from typing import Optional, Sequence

from .models.essence import EffectEssence
from .models.fusion import ExpectedTransformation, FusionBlueprint, FusionOptions, ModuleFusionProfile
from .models.module import LevelPolicy
from .telemetry import trace


class BlueprintBuilder:
    """Combine essence, scored modules and a level policy into a blueprint.

    Projections are plain linear combinations and are deliberately left
    unbounded; bounding them is the moderator's job.
    """

    @staticmethod
    def expected_transformation(
        policy: LevelPolicy,
        module_count: int,
        options: FusionOptions,
    ) -> ExpectedTransformation:
        return ExpectedTransformation(
            visual_enhancement=policy.creativity_factor * 100 + options.creativity_boost,
            performance_boost=policy.technical_focus * 100 + options.performance_priority,
            creative_evolution=policy.fusion_intensity * 100 + options.innovation_level,
            technical_advancement=module_count * 10,
        )

    @trace("effect_fusion.blueprint")
    def build(
        self,
        essence: EffectEssence,
        profiles: Sequence[ModuleFusionProfile],
        policy: LevelPolicy,
        options: Optional[FusionOptions] = None,
    ) -> FusionBlueprint:
        options = options or FusionOptions()
        return FusionBlueprint(
            original_essence=essence,
            active_modules=list(profiles),
            strategy=policy.strategy,
            reconstruction_level=policy.level,
            expected_transformation=self.expected_transformation(policy, len(profiles), options),
        )
