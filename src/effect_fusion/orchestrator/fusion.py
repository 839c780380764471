from __future__ import annotations

import logging
from typing import List, Optional

from ..analysis import CompatibilityAnalyzer
from ..blueprint import BlueprintBuilder
from ..extraction import EssenceExtractor
from ..models.fusion import (
    FusionOptions,
    FusionRecord,
    OrchestratorStats,
    ReconstructedArtifact,
)
from ..models.module import LevelPolicy, ModuleDescriptor
from ..moderation import Moderator, PassthroughModerator, check_moderation_contract
from ..reconstruction import CodeReconstructor
from ..registry import LevelPolicyTable, ModuleRegistry
from ..report import ReportGenerator
from ..synthesis import FusionSynthesizer
from ..telemetry import trace
from .history import FusionHistory
from .ids import FusionIdFactory, uuid_fusion_id
from .progress import PHASE_PCT, LoggingProgressReporter, Phase, ProgressReporter

logger = logging.getLogger(__name__)


class FusionOrchestrator:
    """Runs the fusion pipeline end to end.

    Stages run strictly in order; the only suspension points are progress
    updates and the moderator call. Errors from any stage propagate
    unchanged and nothing is written to the history for a failed fusion.
    """

    def __init__(
        self,
        registry: Optional[ModuleRegistry] = None,
        policies: Optional[LevelPolicyTable] = None,
        moderator: Optional[Moderator] = None,
        history: Optional[FusionHistory] = None,
        id_factory: Optional[FusionIdFactory] = None,
        progress: Optional[ProgressReporter] = None,
        extractor: Optional[EssenceExtractor] = None,
        analyzer: Optional[CompatibilityAnalyzer] = None,
        builder: Optional[BlueprintBuilder] = None,
        synthesizer: Optional[FusionSynthesizer] = None,
        reconstructor: Optional[CodeReconstructor] = None,
        reporter: Optional[ReportGenerator] = None,
    ):
        self.registry = registry if registry is not None else ModuleRegistry.from_yaml()
        self.policies = policies if policies is not None else LevelPolicyTable.from_yaml()
        self.moderator = moderator or PassthroughModerator()
        self.fusion_history = history if history is not None else FusionHistory()
        self.id_factory = id_factory or uuid_fusion_id
        self.progress = progress or LoggingProgressReporter()
        self.extractor = extractor or EssenceExtractor()
        self.analyzer = analyzer or CompatibilityAnalyzer()
        self.builder = builder or BlueprintBuilder()
        self.synthesizer = synthesizer or FusionSynthesizer()
        self.reconstructor = reconstructor or CodeReconstructor()
        self.reporter = reporter or ReportGenerator()

    async def _stage(self, phase: Phase, message: Optional[str] = None) -> None:
        await self.progress.update(phase, PHASE_PCT[phase], message)

    # -- queries ------------------------------------------------------------

    def get_level_policy(self, level: int) -> LevelPolicy:
        return self.policies.get(level)

    def select_modules(self, level: int) -> List[ModuleDescriptor]:
        self.policies.get(level)
        return self.registry.select_modules(level)

    async def get_fusion(self, fusion_id: str) -> Optional[FusionRecord]:
        return await self.fusion_history.get(fusion_id)

    async def history(self) -> List[FusionRecord]:
        return await self.fusion_history.records()

    async def stats(self) -> OrchestratorStats:
        records = await self.fusion_history.records()
        if records:
            total = sum(
                r.artifact.transformation_report.enhancement_metrics["module_integration_success"]
                for r in records
            )
            success_rate = total / len(records)
        else:
            success_rate = 100.0
        return OrchestratorStats(
            total_fusions_performed=len(records),
            modules_registered=len(self.registry),
            levels_configured=len(self.policies),
            fusion_success_rate=success_rate,
        )

    # -- pipeline -----------------------------------------------------------

    @trace("effect_fusion.fuse")
    async def fuse(
        self,
        source_code: str,
        level: int,
        options: Optional[FusionOptions] = None,
    ) -> ReconstructedArtifact:
        await self._stage(Phase.validating, f"level {level}")
        policy = self.policies.get(level)
        options = options or FusionOptions()

        await self._stage(Phase.extracting)
        essence = self.extractor.extract(source_code)

        await self._stage(Phase.analyzing)
        candidates = self.registry.select_modules(level)
        profiles = self.analyzer.analyze(essence, candidates)

        await self._stage(Phase.blueprinting, f"{len(profiles)} modules")
        blueprint = self.builder.build(essence, profiles, policy, options)

        await self._stage(Phase.moderating)
        moderated = await self.moderator.moderate(blueprint)
        check_moderation_contract(blueprint, moderated)

        await self._stage(Phase.synthesizing)
        fused = self.synthesizer.synthesize(moderated)

        await self._stage(Phase.reconstructing)
        output = self.reconstructor.reconstruct(fused)

        await self._stage(Phase.reporting)
        report = self.reporter.generate(essence, moderated, output)
        summary = self.reporter.summarize_evolution(moderated)

        fusion_id = self.id_factory(level)
        artifact = ReconstructedArtifact(
            fusion_id=fusion_id,
            code=output.code,
            transformation_report=report,
            creative_evolution_summary=summary,
        )
        await self.fusion_history.put(FusionRecord(
            fusion_id=fusion_id,
            level=level,
            blueprint=moderated,
            artifact=artifact,
        ))
        await self._stage(Phase.finalizing, fusion_id)
        logger.info(
            "Fusion %s complete: level=%d strategy=%s modules=%d size=%d",
            fusion_id, level, policy.strategy, len(profiles), output.compressed_size,
        )
        return artifact
