import pytest

from effect_fusion.errors import ExtractionError
from effect_fusion.extraction import EssenceExtractor


@pytest.fixture
def extractor():
    return EssenceExtractor()


def test_empty_source_gives_baseline(extractor):
    essence = extractor.extract("")
    assert essence.core_behavior.animation_type == "custom_animation"
    assert essence.core_behavior.movement_patterns == []
    assert essence.creative_dna.energy_level == 0.5
    assert essence.creative_dna.innovation_index == 0.3
    assert essence.creative_dna.complexity_factor == 0.0
    assert essence.creative_dna.aesthetic_signature == "unique"
    assert essence.creative_dna.emotional_impact == "neutral"
    assert essence.technical_aspects.performance_profile.estimated_fps == 60.0
    assert essence.technical_aspects.compatibility == ["modern", "legacy"]


def test_particle_source(extractor, particle_source):
    essence = extractor.extract(particle_source)
    assert essence.core_behavior.animation_type == "particle_system"
    assert "oscillatory" in essence.core_behavior.movement_patterns
    assert "chaotic" in essence.core_behavior.movement_patterns
    assert essence.creative_dna.aesthetic_signature == "luminous"
    assert essence.core_behavior.temporal_signature == [250.0]
    assert essence.core_behavior.mathematical_foundation["randomness"] is True
    assert essence.technical_aspects.resource_requirements["canvas_required"] is True
    assert "universal" in essence.technical_aspects.compatibility


def test_animation_type_first_match_wins(extractor):
    # "fire" and "rotation" both match; particle rules come first
    assert extractor.extract("fire rotation").core_behavior.animation_type == "particle_system"
    assert extractor.extract("slow fade").core_behavior.animation_type == "transition"


def test_movement_patterns_keep_table_order(extractor):
    patterns = extractor.extract("spiral then random then wave").core_behavior.movement_patterns
    assert patterns == ["oscillatory", "chaotic", "spiral"]


def test_scores_are_clamped(extractor):
    essence = extractor.extract("explosion burst intense fast rapid quick webgl ai quantum")
    assert essence.creative_dna.energy_level <= 1.0
    assert essence.creative_dna.innovation_index == 1.0
    assert essence.technical_aspects.performance_profile.estimated_fps == 70.0


def test_calm_source_lowers_energy(extractor):
    essence = extractor.extract("gentle calm glow")
    assert essence.creative_dna.energy_level == pytest.approx(0.3)
    assert essence.creative_dna.emotional_impact == "calming"


def test_ai_is_matched_as_a_word(extractor):
    assert extractor.extract("said maintain").creative_dna.innovation_index == pytest.approx(0.3)
    assert extractor.extract("an ai driven glow").creative_dna.innovation_index == pytest.approx(0.7)


def test_complexity_counts(extractor):
    code = "function a() {} function b() {} Math.sin(1); Math.cos(2);"
    expected = len(code) / 5000 + 2 * 0.05 + 2 * 0.02
    assert extractor.extract(code).creative_dna.complexity_factor == pytest.approx(expected)


def test_temporal_signature_in_source_order(extractor):
    code = "const cfg = { duration: 1200 }; setInterval(() => tick(), 16);"
    assert extractor.extract(code).core_behavior.temporal_signature == [1200.0, 16.0]


def test_cpu_and_memory_tiers(extractor):
    code = "Math.abs(x);" * 21
    profile = extractor.extract(code).technical_aspects.performance_profile
    assert profile.cpu_intensity == "high"
    assert profile.memory_usage == "low"
    assert extractor.extract("x" * 6000).technical_aspects.performance_profile.memory_usage == "medium"


def test_extract_path(tmp_path, extractor):
    path = tmp_path / "effect.js"
    path.write_text("const wave = Math.sin(t);", encoding="utf-8")
    essence = extractor.extract_path(str(path))
    assert essence.core_behavior.movement_patterns == ["oscillatory"]


def test_extract_path_missing_file(tmp_path, extractor):
    with pytest.raises(ExtractionError):
        extractor.extract_path(str(tmp_path / "missing.js"))


def test_extract_path_bad_encoding(tmp_path, extractor):
    path = tmp_path / "effect.js"
    path.write_bytes(b"\xff\xfe\xfa")
    with pytest.raises(ExtractionError):
        extractor.extract_path(str(path))
