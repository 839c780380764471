"""Error taxonomy for the fusion pipeline.

Every stage raises one of these and lets it propagate to the caller of
``FusionOrchestrator.fuse``; nothing is retried or replaced with defaults.
"""
from __future__ import annotations


class FusionError(Exception):
    """Base class for all pipeline failures."""


class InvalidLevelError(FusionError):
    def __init__(self, level: object, available: list[int] | None = None):
        self.level = level
        self.available = list(available or [])
        msg = f"No level policy configured for level {level!r}"
        if self.available:
            msg += f". Available: {self.available}"
        super().__init__(msg)


class ExtractionError(FusionError):
    """Input could not be read as source text."""


class ReconstructionError(FusionError):
    """Codegen input was not serializable or a compression pass grew the code."""


class ModerationContractViolation(FusionError):
    """The moderator changed module identity, order, strategy or level."""


class RegistryError(FusionError):
    """Module catalog or level table failed validation at load time."""
