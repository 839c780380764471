from __future__ import annotations

import json
from typing import Dict, List, Sequence

from .models.essence import EffectEssence
from .models.fusion import (
    CreativeEvolutionSummary,
    FusionBlueprint,
    ModuleFusionProfile,
    ReconstructionOutput,
    TransformationReport,
)

MULTI_MODULE_THRESHOLD = 15
COMPLEX_INTEGRATION_THRESHOLD = 20


def integration_success(blueprint: FusionBlueprint) -> float:
    score = 0.7
    score += min(len(blueprint.active_modules) * 0.02, 0.2)
    if blueprint.strategy == "revolutionary":
        score += 0.1
    return min(score * 100, 100.0)


class ReportGenerator:
    """Human-readable account of what a fusion did. Pure."""

    def generate(
        self,
        essence: EffectEssence,
        blueprint: FusionBlueprint,
        output: ReconstructionOutput,
    ) -> TransformationReport:
        return TransformationReport(
            original_characteristics=self.original_characteristics(essence),
            module_contributions=self.module_contributions(blueprint.active_modules),
            fusion_innovations=self.fusion_innovations(blueprint),
            enhancement_metrics=self.metrics(blueprint, output),
        )

    @staticmethod
    def original_characteristics(essence: EffectEssence) -> List[str]:
        dna = essence.creative_dna
        return [
            f"Animation type: {essence.core_behavior.animation_type}",
            f"Energy level: {dna.energy_level}",
            f"Complexity: {dna.complexity_factor}",
            f"Aesthetic signature: {dna.aesthetic_signature}",
        ]

    @staticmethod
    def module_contributions(profiles: Sequence[ModuleFusionProfile]) -> Dict[str, List[str]]:
        return {
            p.module_id: [
                f"Fusion weight: {p.fusion_weight}",
                f"Algorithm: {p.fusion_algorithm}",
                f"Creative contribution: {json.dumps(p.creative_contribution, sort_keys=True)}",
                f"Behavioral influence: {json.dumps(p.behavioral_influence, sort_keys=True)}",
            ]
            for p in profiles
        }

    @staticmethod
    def fusion_innovations(blueprint: FusionBlueprint) -> List[str]:
        innovations: List[str] = []
        if blueprint.strategy == "revolutionary":
            innovations += [
                "Complete creative reconstruction",
                "Quantum behavior fusion",
                "Automatic aesthetic evolution",
            ]
        if len(blueprint.active_modules) >= MULTI_MODULE_THRESHOLD:
            innovations += ["Complex multi-module integration", "Advanced creative synergy"]
        if blueprint.expected_transformation.creative_evolution > 80:
            innovations += ["Major creative breakthrough", "Revolutionary aesthetic innovation"]
        return innovations

    @staticmethod
    def metrics(blueprint: FusionBlueprint, output: ReconstructionOutput) -> Dict[str, float]:
        expected = blueprint.expected_transformation
        ratio = output.compressed_size / output.generated_size if output.generated_size else 0.0
        return {
            "performance_improvement": expected.performance_boost,
            "visual_enhancement": expected.visual_enhancement,
            "creative_evolution": expected.creative_evolution,
            "module_integration_success": integration_success(blueprint),
            "generated_size": float(output.generated_size),
            "compressed_size": float(output.compressed_size),
            "compression_ratio": ratio,
        }

    # -- evolution summary --------------------------------------------------

    def summarize_evolution(self, blueprint: FusionBlueprint) -> CreativeEvolutionSummary:
        expected = blueprint.expected_transformation
        revolutionary = blueprint.strategy == "revolutionary"
        n = len(blueprint.active_modules)

        aesthetic: List[str] = []
        if expected.visual_enhancement > 70:
            aesthetic += ["Major visual improvement", "Revolutionary aesthetics"]
        if revolutionary:
            aesthetic.append("Aesthetic innovation breakthrough")

        behavioral = [f"{n} behavior modules integrated"]
        if expected.creative_evolution > 80:
            behavioral.append("Revolutionary behavioral evolution")

        performance: List[str] = []
        if expected.performance_boost > 50:
            performance.append("Major performance optimization")
        performance += ["Performance module integration", "Automatic optimizations"]

        breakthroughs: List[str] = []
        if revolutionary:
            breakthroughs += ["Major technological breakthrough", "Revolutionary creative innovation"]
        if n >= COMPLEX_INTEGRATION_THRESHOLD:
            breakthroughs.append("Complex multi-module integration")

        return CreativeEvolutionSummary(
            aesthetic_improvements=aesthetic,
            behavioral_enhancements=behavioral,
            performance_optimizations=performance,
            innovation_breakthroughs=breakthroughs,
        )
