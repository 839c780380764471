import pytest

from effect_fusion.analysis import CompatibilityAnalyzer
from effect_fusion.blueprint import BlueprintBuilder
from effect_fusion.extraction import EssenceExtractor
from effect_fusion.models import CreativeDNA, EffectEssence, FusionOptions
from effect_fusion.synthesis import FusionSynthesizer


def _blueprint(registry, policies, level, source="", options=None):
    essence = EssenceExtractor().extract(source)
    profiles = CompatibilityAnalyzer().analyze(essence, registry.select_modules(level))
    return BlueprintBuilder().build(essence, profiles, policies.get(level), options)


def _metrics(fused):
    evo = fused.creative_evolution
    syn = evo.creative_synthesis
    return [
        evo.aesthetic_evolution,
        evo.behavioral_sophistication,
        evo.innovation_breakthrough,
        syn.fusion_harmony,
        syn.creative_coherence,
        syn.innovation_integration,
    ]


@pytest.mark.parametrize("level", [1, 2, 3])
def test_metrics_are_unit_bounded(registry, policies, particle_source, level):
    fused = FusionSynthesizer().synthesize(_blueprint(registry, policies, level, particle_source))
    assert all(0.0 <= m <= 1.0 for m in _metrics(fused))


def test_integrations_follow_blueprint_order(registry, policies, particle_source):
    blueprint = _blueprint(registry, policies, 2, particle_source)
    fused = FusionSynthesizer().synthesize(blueprint)
    assert list(fused.module_integrations) == [p.module_id for p in blueprint.active_modules]
    first = blueprint.active_modules[0]
    assert fused.module_integrations[first.module_id].integration_strength == first.fusion_weight


def test_enhanced_properties_only_for_creative_modules(registry, policies, particle_source):
    blueprint = _blueprint(registry, policies, 3, particle_source)
    fused = FusionSynthesizer().synthesize(blueprint)
    creative = {p.module_id for p in blueprint.active_modules if p.fusion_algorithm in ("creative", "quantum")}
    assert creative
    assert set(fused.enhanced_properties) == creative


def test_empty_blueprint(policies):
    blueprint = BlueprintBuilder().build(EffectEssence(), [], policies.get(3))
    fused = FusionSynthesizer().synthesize(blueprint)
    assert fused.module_integrations == {}
    assert fused.enhanced_properties == {}
    assert fused.creative_evolution.creative_synthesis.fusion_harmony == pytest.approx(0.8)
    assert fused.technical_optimizations.performance_optimizations == []
    assert all(0.0 <= m <= 1.0 for m in _metrics(fused))


def test_breakthrough_cap_depends_on_strategy(policies):
    options = FusionOptions(innovation_level=50)
    revolutionary = BlueprintBuilder().build(EffectEssence(), [], policies.get(3), options)
    balanced = BlueprintBuilder().build(EffectEssence(), [], policies.get(2), options)
    synth = FusionSynthesizer()
    assert synth.synthesize(revolutionary).creative_evolution.innovation_breakthrough == pytest.approx(0.9)
    assert synth.synthesize(balanced).creative_evolution.innovation_breakthrough == pytest.approx(0.7)


def test_balanced_strategy_raises_harmony(policies):
    blueprint = BlueprintBuilder().build(EffectEssence(), [], policies.get(2))
    harmony = FusionSynthesizer().synthesize(blueprint).creative_evolution.creative_synthesis.fusion_harmony
    assert harmony == pytest.approx(0.85)


def test_high_innovation_is_clamped(registry, policies):
    essence = EffectEssence(creative_dna=CreativeDNA(innovation_index=1.0, complexity_factor=1.0))
    profiles = CompatibilityAnalyzer().analyze(essence, registry.select_modules(3))
    blueprint = BlueprintBuilder().build(essence, profiles, policies.get(3))
    evo = FusionSynthesizer().synthesize(blueprint).creative_evolution
    assert evo.aesthetic_evolution == 1.0
    assert evo.behavioral_sophistication == 1.0
    assert evo.creative_synthesis.creative_coherence == 1.0


def test_performance_optimizations_threshold(registry, policies):
    blueprint = _blueprint(registry, policies, 1)
    fused = FusionSynthesizer().synthesize(blueprint)
    expected = [
        p.module_id for p in blueprint.active_modules
        if p.technical_enhancement["performance_optimization"] > 0.5
    ]
    assert [o.module for o in fused.technical_optimizations.performance_optimizations] == expected
    assert fused.technical_optimizations.stability_improvements


def test_synthesis_is_pure(registry, policies, particle_source):
    blueprint = _blueprint(registry, policies, 2, particle_source)
    synth = FusionSynthesizer()
    assert synth.synthesize(blueprint) == synth.synthesize(blueprint)
