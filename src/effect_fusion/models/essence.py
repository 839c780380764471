# effect_fusion/models/essence.py
from __future__ import annotations
from typing import Dict, List, Literal
from pydantic import BaseModel, ConfigDict, Field

Tier = Literal["low", "medium", "high"]

_FROZEN = ConfigDict(frozen=True)


class CoreBehavior(BaseModel):
    model_config = _FROZEN

    animation_type: str = "custom_animation"
    movement_patterns: List[str] = []
    visual_properties: Dict[str, bool] = Field(default_factory=dict)
    temporal_signature: List[float] = []
    mathematical_foundation: Dict[str, bool] = Field(default_factory=dict)


class CreativeDNA(BaseModel):
    model_config = _FROZEN

    energy_level: float = Field(default=0.5, ge=0.0, le=1.0)
    complexity_factor: float = Field(default=0.0, ge=0.0, le=1.0)
    innovation_index: float = Field(default=0.3, ge=0.0, le=1.0)
    aesthetic_signature: str = "unique"
    emotional_impact: str = "neutral"


class PerformanceProfile(BaseModel):
    model_config = _FROZEN

    estimated_fps: float = Field(default=60.0, ge=30.0, le=120.0)
    memory_usage: Tier = "low"
    cpu_intensity: Tier = "low"


class TechnicalAspects(BaseModel):
    model_config = _FROZEN

    performance_profile: PerformanceProfile = Field(default_factory=PerformanceProfile)
    compatibility: List[str] = ["modern"]
    resource_requirements: Dict[str, bool] = Field(default_factory=dict)
    optimization_potential: float = Field(default=0.5, ge=0.0, le=1.0)


class FusionCompatibility(BaseModel):
    model_config = _FROZEN

    adaptation_flexibility: float = Field(default=0.7, ge=0.0, le=1.0)
    enhancement_receptivity: float = Field(default=0.8, ge=0.0, le=1.0)


class EffectEssence(BaseModel):
    """Feature record extracted from one piece of effect source text."""
    model_config = _FROZEN

    core_behavior: CoreBehavior = Field(default_factory=CoreBehavior)
    creative_dna: CreativeDNA = Field(default_factory=CreativeDNA)
    technical_aspects: TechnicalAspects = Field(default_factory=TechnicalAspects)
    fusion_compatibility: FusionCompatibility = Field(default_factory=FusionCompatibility)
