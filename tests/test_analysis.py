import pytest

from effect_fusion.analysis import (
    CompatibilityAnalyzer,
    module_compatibility,
    select_fusion_algorithm,
)
from effect_fusion.blueprint import BlueprintBuilder
from effect_fusion.extraction import EssenceExtractor
from effect_fusion.models import (
    CreativeDNA,
    EffectEssence,
    FusionOptions,
    ModuleDescriptor,
    TechnicalAspects,
)


def _module(cw, tw, specialization="test", id="m"):
    return ModuleDescriptor(id=id, level=1, creative_weight=cw, technical_weight=tw,
                            specialization=specialization)


def _essence(innovation=0.3, optimization=0.5):
    return EffectEssence(
        creative_dna=CreativeDNA(innovation_index=innovation),
        technical_aspects=TechnicalAspects(optimization_potential=optimization),
    )


@pytest.mark.parametrize(
    "cw,tw,innovation,expected",
    [
        (0.9, 0.1, 0.9, "quantum"),
        (0.9, 0.1, 0.3, "creative"),
        (0.6, 0.9, 0.3, "creative"),
        (0.1, 0.9, 0.9, "technical"),
        (0.45, 0.45, 0.3, "hybrid"),
        (0.2, 0.3, 0.3, "harmonic"),
    ],
)
def test_algorithm_decision_table(cw, tw, innovation, expected):
    assert select_fusion_algorithm(_module(cw, tw), _essence(innovation)) == expected


def test_specialization_bonuses():
    assert module_compatibility(_essence(0.8), _module(0.5, 0.5, "creativity")) == pytest.approx(0.9)
    assert module_compatibility(_essence(0.5), _module(0.5, 0.5, "creativity")) == pytest.approx(0.7)
    assert module_compatibility(_essence(optimization=0.7), _module(0.5, 0.5, "performance")) == pytest.approx(0.85)


def test_profile_formulas():
    profile = CompatibilityAnalyzer().profile(_essence(0.5, 0.4), _module(0.6, 0.3))
    assert profile.fusion_weight == pytest.approx(0.7 * 0.5 + 0.6 * 0.5 * 0.3 + 0.3 * 0.4 * 0.2)
    assert profile.creative_contribution["aesthetic_enhancement"] == pytest.approx(0.48)
    assert profile.behavioral_influence["animation_sophistication"] == pytest.approx(0.39)
    assert profile.technical_enhancement["performance_optimization"] == pytest.approx(0.27)


def test_analyze_sorted_and_bounded(registry, particle_source):
    essence = EssenceExtractor().extract(particle_source)
    profiles = CompatibilityAnalyzer().analyze(essence, registry.select_modules(3))
    weights = [p.fusion_weight for p in profiles]
    assert weights == sorted(weights, reverse=True)
    assert all(0.0 <= w <= 1.0 for w in weights)
    assert all(0.0 <= p.compatibility <= 1.0 for p in profiles)
    assert len(profiles) == 22


def test_analyze_keeps_input_order_on_ties():
    modules = [_module(0.5, 0.5, id=f"m{i}") for i in range(4)]
    profiles = CompatibilityAnalyzer().analyze(_essence(), modules)
    assert [p.module_id for p in profiles] == ["m0", "m1", "m2", "m3"]


def test_analyze_is_deterministic(registry):
    essence = _essence(0.6, 0.7)
    analyzer = CompatibilityAnalyzer()
    modules = registry.select_modules(2)
    assert analyzer.analyze(essence, modules) == analyzer.analyze(essence, modules)


def test_blueprint_creative_evolution_uses_innovation_level(policies):
    policy = policies.get(3)
    blueprint = BlueprintBuilder().build(_essence(), [], policy, FusionOptions(innovation_level=50))
    expected = blueprint.expected_transformation
    assert expected.creative_evolution == pytest.approx(policy.fusion_intensity * 100 + 50)
    assert blueprint.strategy == "revolutionary"
    assert blueprint.reconstruction_level == 3


def test_blueprint_projections(registry, policies):
    essence = _essence()
    profiles = CompatibilityAnalyzer().analyze(essence, registry.select_modules(1))
    options = FusionOptions(creativity_boost=5, performance_priority=10)
    blueprint = BlueprintBuilder().build(essence, profiles, policies.get(1), options)
    expected = blueprint.expected_transformation
    assert expected.visual_enhancement == pytest.approx(25)
    assert expected.performance_boost == pytest.approx(90)
    assert expected.creative_evolution == pytest.approx(30)
    assert expected.technical_advancement == 80
    assert [p.module_id for p in blueprint.active_modules] == [p.module_id for p in profiles]


def test_blueprint_defaults_options(policies):
    blueprint = BlueprintBuilder().build(_essence(), [], policies.get(2))
    assert blueprint.expected_transformation.visual_enhancement == pytest.approx(50)
    assert blueprint.expected_transformation.technical_advancement == 0
