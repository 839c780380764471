import logging

from ..models.fusion import FusedEssence, ReconstructionOutput
from ..telemetry import trace
from . import codegen
from .compression import (
    COMPRESSION_PASSES,
    compress,
    normalize,
    run_passes,
)
from .lexer import Token, tokenize, untokenize

logger = logging.getLogger(__name__)


class CodeReconstructor:
    """Generate the fused effect source and run it through the compression passes."""

    def __init__(self, passes=None):
        self.passes = list(passes) if passes is not None else list(COMPRESSION_PASSES)

    @trace("effect_fusion.reconstruct")
    def reconstruct(self, fused: FusedEssence) -> ReconstructionOutput:
        source = codegen.generate(fused)
        code, stats = run_passes(source, self.passes)
        logger.info(
            "Reconstructed %s effect: %d -> %d chars",
            fused.strategy, len(source), len(code),
        )
        return ReconstructionOutput(
            code=code,
            generated_size=len(source),
            compressed_size=len(code),
            passes=stats,
        )


__all__ = [
    "CodeReconstructor",
    "Token",
    "compress",
    "normalize",
    "run_passes",
    "tokenize",
    "untokenize",
]
