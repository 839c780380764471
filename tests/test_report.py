import pytest

from effect_fusion.analysis import CompatibilityAnalyzer
from effect_fusion.blueprint import BlueprintBuilder
from effect_fusion.extraction import EssenceExtractor
from effect_fusion.models import FusionOptions, ReconstructionOutput
from effect_fusion.report import ReportGenerator, integration_success


def _blueprint(registry, policies, level, options=None, source=""):
    essence = EssenceExtractor().extract(source)
    profiles = CompatibilityAnalyzer().analyze(essence, registry.select_modules(level))
    return essence, BlueprintBuilder().build(essence, profiles, policies.get(level), options)


OUTPUT = ReconstructionOutput(code="x", generated_size=200, compressed_size=50)


def test_integration_success(registry, policies):
    assert integration_success(_blueprint(registry, policies, 1)[1]) == pytest.approx(86.0)
    assert integration_success(_blueprint(registry, policies, 2)[1]) == pytest.approx(100.0 * 0.9)
    assert integration_success(_blueprint(registry, policies, 3)[1]) == pytest.approx(100.0)
    assert integration_success(_blueprint(registry, policies, 3)[1]) <= 100.0


def test_report_for_level_one(registry, policies, particle_source):
    essence, blueprint = _blueprint(registry, policies, 1, source=particle_source)
    report = ReportGenerator().generate(essence, blueprint, OUTPUT)
    assert report.original_characteristics[0] == "Animation type: particle_system"
    assert list(report.module_contributions) == [p.module_id for p in blueprint.active_modules]
    assert report.fusion_innovations == []
    metrics = report.enhancement_metrics
    assert metrics["performance_improvement"] == pytest.approx(80)
    assert metrics["compression_ratio"] == pytest.approx(0.25)
    assert metrics["generated_size"] == 200


def test_report_for_revolutionary_level(registry, policies):
    essence, blueprint = _blueprint(registry, policies, 3)
    report = ReportGenerator().generate(essence, blueprint, OUTPUT)
    assert report.fusion_innovations[:3] == [
        "Complete creative reconstruction",
        "Quantum behavior fusion",
        "Automatic aesthetic evolution",
    ]
    # 22 modules and creative evolution 90
    assert len(report.fusion_innovations) == 7


def test_module_contribution_lines(registry, policies):
    essence, blueprint = _blueprint(registry, policies, 1)
    report = ReportGenerator().generate(essence, blueprint, OUTPUT)
    first = blueprint.active_modules[0]
    lines = report.module_contributions[first.module_id]
    assert lines[0] == f"Fusion weight: {first.fusion_weight}"
    assert lines[1] == f"Algorithm: {first.fusion_algorithm}"
    assert lines[2].startswith('Creative contribution: {"aesthetic_enhancement"')


def test_zero_generated_size_ratio(registry, policies):
    essence, blueprint = _blueprint(registry, policies, 1)
    empty = ReconstructionOutput(code="", generated_size=0, compressed_size=0)
    assert ReportGenerator().metrics(blueprint, empty)["compression_ratio"] == 0.0


def test_evolution_summary_level_three(registry, policies):
    _, blueprint = _blueprint(registry, policies, 3)
    summary = ReportGenerator().summarize_evolution(blueprint)
    assert summary.aesthetic_improvements == [
        "Major visual improvement",
        "Revolutionary aesthetics",
        "Aesthetic innovation breakthrough",
    ]
    assert summary.behavioral_enhancements == [
        "22 behavior modules integrated",
        "Revolutionary behavioral evolution",
    ]
    assert summary.performance_optimizations == [
        "Performance module integration",
        "Automatic optimizations",
    ]
    assert "Complex multi-module integration" in summary.innovation_breakthroughs


def test_evolution_summary_level_one(registry, policies):
    _, blueprint = _blueprint(registry, policies, 1, FusionOptions(creativity_boost=60))
    summary = ReportGenerator().summarize_evolution(blueprint)
    assert summary.aesthetic_improvements == ["Major visual improvement", "Revolutionary aesthetics"]
    assert summary.performance_optimizations[0] == "Major performance optimization"
    assert summary.innovation_breakthroughs == []
