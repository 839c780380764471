"""Essence extraction: keyword heuristics over raw effect source text.

The extractor never parses. Each detector is an ordered table of
``(pattern, result)`` or ``(pattern, delta)`` pairs so that "first match wins"
and every fixed delta is visible in one place.
"""
from __future__ import annotations

import logging
import re
from typing import Dict, List, Sequence, Tuple

from .errors import ExtractionError
from .models.essence import (
    CoreBehavior,
    CreativeDNA,
    EffectEssence,
    FusionCompatibility,
    PerformanceProfile,
    TechnicalAspects,
)
from .telemetry import trace

logger = logging.getLogger(__name__)

Rule = Tuple["re.Pattern[str]", str]
Delta = Tuple["re.Pattern[str]", float]


def _ci(pattern: str) -> "re.Pattern[str]":
    return re.compile(pattern, re.IGNORECASE)


def clamp(value: float, lo: float = 0.0, hi: float = 1.0) -> float:
    return max(lo, min(hi, value))


ANIMATION_TYPE_RULES: List[Rule] = [
    (_ci(r"particle|explosion|fire|smoke"), "particle_system"),
    (_ci(r"3d|rotation|perspective|transform"), "3d_animation"),
    (_ci(r"text|font|typewriter"), "text_effect"),
    (_ci(r"transition|fade|slide"), "transition"),
]
DEFAULT_ANIMATION_TYPE = "custom_animation"

MOVEMENT_PATTERN_RULES: List[Rule] = [
    (_ci(r"sin|cos|wave"), "oscillatory"),
    (_ci(r"linear|straight"), "linear"),
    (_ci(r"rotation|spin|rotate"), "rotational"),
    (_ci(r"random"), "chaotic"),
    (_ci(r"spiral|vortex"), "spiral"),
]

AESTHETIC_RULES: List[Rule] = [
    (_ci(r"neon|glow|bright"), "luminous"),
    (_ci(r"dark|shadow|noir"), "mysterious"),
    (_ci(r"rainbow|colorful|vibrant"), "vibrant"),
    (_ci(r"minimal|clean|simple"), "minimalist"),
    (_ci(r"organic|natural|flowing"), "organic"),
]

EMOTION_RULES: List[Rule] = [
    (_ci(r"calm|peaceful|zen"), "calming"),
    (_ci(r"exciting|dynamic|energetic"), "energizing"),
    (_ci(r"mysterious|dark"), "intriguing"),
    (_ci(r"fun|playful|joy"), "joyful"),
]

ENERGY_BASELINE = 0.5
ENERGY_DELTAS: List[Delta] = [
    (_ci(r"explosion|burst|intense"), 0.3),
    (_ci(r"gentle|soft|calm"), -0.2),
    (_ci(r"fast|rapid|quick"), 0.2),
]

INNOVATION_BASELINE = 0.3
INNOVATION_DELTAS: List[Delta] = [
    (_ci(r"webgl|shader|gpu"), 0.3),
    (_ci(r"\bai\b|machine|learning"), 0.4),
    (_ci(r"quantum|neural|advanced"), 0.3),
]

FPS_BASELINE = 60.0
FPS_BOUNDS = (30.0, 120.0)
FPS_DELTAS: List[Delta] = [
    (_ci(r"particle.*length.*>.*100"), -20.0),
    (_ci(r"complex.*math|heavy.*calculation"), -15.0),
    (_ci(r"webgl|gpu"), 10.0),
]

OPTIMIZATION_BASELINE = 0.5
OPTIMIZATION_DELTAS: List[Delta] = [
    (_ci(r"inefficient|slow|heavy"), 0.3),
    (_ci(r"optimized|fast|efficient"), -0.2),
    (_ci(r"for.*length|nested.*loop"), 0.2),
]

FLEXIBILITY_BASELINE = 0.7
FLEXIBILITY_DELTAS: List[Delta] = [
    (_ci(r"parameter|config|option"), 0.2),
    (_ci(r"hardcoded|fixed|static"), -0.3),
]

RECEPTIVITY_BASELINE = 0.8
RECEPTIVITY_DELTAS: List[Delta] = [
    (_ci(r"legacy|old|deprecated"), -0.3),
    (_ci(r"modern|es6|class"), 0.1),
]

VISUAL_PROPERTY_RULES: List[Rule] = [
    (_ci(r"#[0-9a-f]{3,8}\b|rgba?\(|hsla?\("), "color"),
    (_ci(r"gradient"), "gradient"),
    (_ci(r"opacity|globalAlpha|alpha"), "opacity"),
    (_ci(r"blur|shadow"), "blur_shadow"),
    (_ci(r"fillRect|strokeRect|arc\(|lineTo|drawImage|fillText"), "canvas_drawing"),
    (_ci(r"translate|scale|rotate"), "transform"),
]

MATH_FOUNDATION_RULES: List[Rule] = [
    (re.compile(r"Math\.(?:sin|cos|tan|atan2?)\b"), "trigonometry"),
    (re.compile(r"Math\.(?:sqrt|pow|hypot)\b|\*\*"), "roots_powers"),
    (re.compile(r"Math\.random"), "randomness"),
    (_ci(r"noise|perlin|simplex"), "noise"),
    (_ci(r"ease|lerp|interpolat"), "easing"),
    (_ci(r"vector|vec[234]|velocity"), "vectors"),
    (_ci(r"gravity|friction|acceleration"), "physics"),
]

RESOURCE_RULES: List[Rule] = [
    (_ci(r"canvas|ctx|getContext"), "canvas_required"),
    (_ci(r"3d|complex|intensive"), "webgl_beneficial"),
    (_ci(r"audio|sound|music"), "audio_support"),
]

_FUNCTION_OR_CLASS = re.compile(r"function|class")
_MATH_CALL = re.compile(r"Math\.")
_LOOP = re.compile(r"for|while")
_MODERN_SYNTAX = _ci(r"webgl|es6|arrow|const|let")
_CANVAS_2D = _ci(r"canvas|2d")
_TIMER_DURATION = re.compile(r"set(?:Timeout|Interval)\s*\([^;]*?,\s*(\d+(?:\.\d+)?)\s*\)")
_DURATION_LITERAL = _ci(r"duration\s*[:=]\s*(\d+(?:\.\d+)?)")
MAX_TEMPORAL_SAMPLES = 8


def first_match(code: str, rules: Sequence[Rule], default: str) -> str:
    for pattern, result in rules:
        if pattern.search(code):
            return result
    return default


def all_matches(code: str, rules: Sequence[Rule]) -> List[str]:
    return [result for pattern, result in rules if pattern.search(code)]


def flag_map(code: str, rules: Sequence[Rule]) -> Dict[str, bool]:
    return {result: bool(pattern.search(code)) for pattern, result in rules}


def score(code: str, baseline: float, deltas: Sequence[Delta]) -> float:
    value = baseline
    for pattern, delta in deltas:
        if pattern.search(code):
            value += delta
    return value


def _tier(value: int, medium: int, high: int) -> str:
    if value > high:
        return "high"
    if value > medium:
        return "medium"
    return "low"


class EssenceExtractor:
    """Derive an ``EffectEssence`` from source text. Total for any ``str``."""

    @trace("effect_fusion.extract")
    def extract(self, code: str) -> EffectEssence:
        essence = EffectEssence(
            core_behavior=self.core_behavior(code),
            creative_dna=self.creative_dna(code),
            technical_aspects=self.technical_aspects(code),
            fusion_compatibility=self.fusion_compatibility(code),
        )
        logger.debug(
            "Extracted essence: type=%s patterns=%s",
            essence.core_behavior.animation_type,
            essence.core_behavior.movement_patterns,
        )
        return essence

    def extract_path(self, path: str, encoding: str = "utf-8") -> EffectEssence:
        try:
            with open(path, "r", encoding=encoding) as f:
                code = f.read()
        except (OSError, UnicodeDecodeError) as exc:
            raise ExtractionError(f"Cannot read effect source {path}: {exc}") from exc
        return self.extract(code)

    # -- core behavior ------------------------------------------------------

    def core_behavior(self, code: str) -> CoreBehavior:
        return CoreBehavior(
            animation_type=first_match(code, ANIMATION_TYPE_RULES, DEFAULT_ANIMATION_TYPE),
            movement_patterns=all_matches(code, MOVEMENT_PATTERN_RULES),
            visual_properties=flag_map(code, VISUAL_PROPERTY_RULES),
            temporal_signature=self.temporal_signature(code),
            mathematical_foundation=flag_map(code, MATH_FOUNDATION_RULES),
        )

    def temporal_signature(self, code: str) -> List[float]:
        found = [(m.start(), float(m.group(1))) for m in _TIMER_DURATION.finditer(code)]
        found += [(m.start(), float(m.group(1))) for m in _DURATION_LITERAL.finditer(code)]
        found.sort(key=lambda item: item[0])
        return [value for _, value in found[:MAX_TEMPORAL_SAMPLES]]

    # -- creative dna -------------------------------------------------------

    def creative_dna(self, code: str) -> CreativeDNA:
        return CreativeDNA(
            energy_level=clamp(score(code, ENERGY_BASELINE, ENERGY_DELTAS)),
            complexity_factor=self.complexity(code),
            innovation_index=clamp(score(code, INNOVATION_BASELINE, INNOVATION_DELTAS)),
            aesthetic_signature=first_match(code, AESTHETIC_RULES, "unique"),
            emotional_impact=first_match(code, EMOTION_RULES, "neutral"),
        )

    def complexity(self, code: str) -> float:
        value = min(len(code) / 5000, 0.5)
        value += len(_FUNCTION_OR_CLASS.findall(code)) * 0.05
        value += len(_MATH_CALL.findall(code)) * 0.02
        return clamp(value)

    # -- technical ----------------------------------------------------------

    def technical_aspects(self, code: str) -> TechnicalAspects:
        return TechnicalAspects(
            performance_profile=self.performance_profile(code),
            compatibility=self.compatibility(code),
            resource_requirements=flag_map(code, RESOURCE_RULES),
            optimization_potential=clamp(score(code, OPTIMIZATION_BASELINE, OPTIMIZATION_DELTAS)),
        )

    def performance_profile(self, code: str) -> PerformanceProfile:
        math_ops = len(_MATH_CALL.findall(code))
        loops = len(_LOOP.findall(code))
        if math_ops > 20 or loops > 10:
            cpu = "high"
        elif math_ops > 10 or loops > 5:
            cpu = "medium"
        else:
            cpu = "low"
        return PerformanceProfile(
            estimated_fps=clamp(score(code, FPS_BASELINE, FPS_DELTAS), *FPS_BOUNDS),
            memory_usage=_tier(len(code), 5000, 10000),
            cpu_intensity=cpu,
        )

    def compatibility(self, code: str) -> List[str]:
        tags = ["modern"]
        if not _MODERN_SYNTAX.search(code):
            tags.append("legacy")
        if _CANVAS_2D.search(code):
            tags.append("universal")
        return tags

    def fusion_compatibility(self, code: str) -> FusionCompatibility:
        return FusionCompatibility(
            adaptation_flexibility=clamp(score(code, FLEXIBILITY_BASELINE, FLEXIBILITY_DELTAS)),
            enhancement_receptivity=clamp(score(code, RECEPTIVITY_BASELINE, RECEPTIVITY_DELTAS)),
        )
