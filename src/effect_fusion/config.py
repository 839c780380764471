"""
Runtime settings for the fusion service.

Every field can be overridden through an ``EFFECT_FUSION_<FIELD>`` environment
variable, e.g. ``EFFECT_FUSION_HISTORY_LIMIT=100``. ``server.py`` loads
``.env`` files before the settings are read.
"""
from __future__ import annotations

import os
from typing import Mapping, Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "EFFECT_FUSION_"


class FusionSettings(BaseModel):
    modules_path: Optional[str] = None
    levels_path: Optional[str] = None
    # 0 keeps every fusion
    history_limit: int = Field(default=500, ge=0)
    log_level: str = "INFO"
    default_level: int = Field(default=2, ge=1)
    max_source_bytes: int = Field(default=512 * 1024, gt=0)
    moderation_ceiling: float = Field(default=100.0, gt=0)
    contextual_moderation: bool = True

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "FusionSettings":
        env = os.environ if environ is None else environ
        values = {}
        for name in cls.model_fields:
            raw = env.get(ENV_PREFIX + name.upper())
            if raw is not None and raw != "":
                values[name] = raw
        return cls.model_validate(values)
