# effect_fusion/models/module.py
from __future__ import annotations
from typing import Literal, Optional
from pydantic import BaseModel, ConfigDict, Field

Strategy = Literal["conservative", "balanced", "aggressive", "revolutionary"]


class ModuleDescriptor(BaseModel):
    """Static metadata for one enhancement module. Never executed."""
    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(min_length=1)
    level: int = Field(ge=1, le=3)
    creative_weight: float = Field(ge=0.0, le=1.0)
    technical_weight: float = Field(ge=0.0, le=1.0)
    specialization: str
    fusion_capability: str = ""
    universal: bool = False
    priority: Optional[int] = None


class LevelPolicy(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    level: int = Field(ge=1)
    name: str
    strategy: Strategy
    fusion_intensity: float = Field(ge=0.0, le=1.0)
    creativity_factor: float = Field(ge=0.0, le=1.0)
    technical_focus: float = Field(ge=0.0, le=1.0)
    reconstruction_approach: str = ""
    modules_count: int = 0
