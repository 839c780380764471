"""Module catalog and level policy table.

Both are loaded once from YAML, validated into frozen pydantic models and
never reloaded. ``ModuleRegistry.select_modules`` defines the deterministic
order every later stage relies on.
"""
from __future__ import annotations

import logging
import math
import os
from typing import Any, Dict, Iterable, List, Optional

import yaml
from pydantic import ValidationError

from .errors import InvalidLevelError, RegistryError
from .models.module import LevelPolicy, ModuleDescriptor

logger = logging.getLogger(__name__)

DATA_DIR = os.path.join(os.path.dirname(__file__), "data")
DEFAULT_MODULES_PATH = os.path.join(DATA_DIR, "modules.yaml")
DEFAULT_LEVELS_PATH = os.path.join(DATA_DIR, "levels.yaml")


def _load_yaml_list(path: str, key: str) -> List[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except (OSError, yaml.YAMLError) as exc:
        raise RegistryError(f"Cannot read {path}: {exc}") from exc
    if not isinstance(data, dict) or not isinstance(data.get(key), list):
        raise RegistryError(f"{path} must contain a top-level '{key}' list")
    return data[key]


def selection_key(module: ModuleDescriptor) -> tuple:
    """universal first, then priority desc (missing lowest), level desc, technical weight desc."""
    priority = -module.priority if module.priority is not None else math.inf
    return (0 if module.universal else 1, priority, -module.level, -module.technical_weight)


class ModuleRegistry:
    def __init__(self, modules: Iterable[ModuleDescriptor | Dict[str, Any]]):
        self._modules: Dict[str, ModuleDescriptor] = {}
        for raw in modules:
            try:
                module = raw if isinstance(raw, ModuleDescriptor) else ModuleDescriptor.model_validate(raw)
            except ValidationError as exc:
                raise RegistryError(f"Invalid module descriptor {raw!r}: {exc}") from exc
            if module.id in self._modules:
                raise RegistryError(f"Duplicate module id: {module.id}")
            self._modules[module.id] = module

    @classmethod
    def from_yaml(cls, path: Optional[str] = None) -> "ModuleRegistry":
        path = path or DEFAULT_MODULES_PATH
        registry = cls(_load_yaml_list(path, "modules"))
        logger.info("Loaded %d fusion modules from %s", len(registry), path)
        return registry

    def select_modules(self, level: int) -> List[ModuleDescriptor]:
        # sorted() is stable, so full ties keep catalog order
        selected = [m for m in self._modules.values() if m.level <= level or m.universal]
        return sorted(selected, key=selection_key)

    def __len__(self) -> int:
        return len(self._modules)

    def __contains__(self, module_id: str) -> bool:
        return module_id in self._modules


class LevelPolicyTable:
    def __init__(self, policies: Iterable[LevelPolicy | Dict[str, Any]]):
        self._policies: Dict[int, LevelPolicy] = {}
        for raw in policies:
            try:
                policy = raw if isinstance(raw, LevelPolicy) else LevelPolicy.model_validate(raw)
            except ValidationError as exc:
                raise RegistryError(f"Invalid level policy {raw!r}: {exc}") from exc
            if policy.level in self._policies:
                raise RegistryError(f"Duplicate level policy: {policy.level}")
            self._policies[policy.level] = policy

    @classmethod
    def from_yaml(cls, path: Optional[str] = None) -> "LevelPolicyTable":
        path = path or DEFAULT_LEVELS_PATH
        return cls(_load_yaml_list(path, "levels"))

    def get(self, level: int) -> LevelPolicy:
        # bool is an int subclass; True must not silently mean level 1
        if isinstance(level, bool) or not isinstance(level, int) or level not in self._policies:
            raise InvalidLevelError(level, self.levels())
        return self._policies[level]

    def levels(self) -> List[int]:
        return sorted(self._policies)

    def __len__(self) -> int:
        return len(self._policies)

    def __contains__(self, level: object) -> bool:
        return level in self._policies
