"""Render a ``FusedEssence`` as a JavaScript ``FusedEffect`` class."""
from __future__ import annotations

import json
import re
from typing import Any, Dict

from ..errors import ReconstructionError
from ..models.fusion import FusedEssence

ANIMATION_METHODS = {
    "particle_system": ("animateParticleSystemFused", "particle animation"),
    "3d_animation": ("animate3DFused", "3D animation"),
}
GENERIC_ANIMATION = ("animateGenericFused", "generic animation")

EPILOGUES = {
    "revolutionary": ("REVOLUTIONARY ENHANCEMENTS", "Cutting-edge techniques integrated",
                      "REVOLUTIONARY EFFECT - cutting-edge techniques integrated"),
    "aggressive": ("AGGRESSIVE ENHANCEMENTS", "Every available enhancement applied",
                   "AGGRESSIVE EFFECT - full enhancement applied"),
    "balanced": ("BALANCED ENHANCEMENTS", "Creativity and performance kept in balance",
                 "BALANCED EFFECT - performance and creativity optimized"),
    "conservative": ("CONSERVATIVE ENHANCEMENTS", "Solid foundations with measured improvements",
                     "FOUNDATION EFFECT - solid base established"),
}

_NON_WORD = re.compile(r"[^0-9A-Za-z]+")


def js_literal(value: Any, indent: int = 2) -> str:
    """JSON text usable as a JavaScript literal. NaN and infinities are rejected."""
    try:
        return json.dumps(value, indent=indent, allow_nan=False, ensure_ascii=False)
    except (TypeError, ValueError) as exc:
        raise ReconstructionError(f"Cannot serialize fused essence: {exc}") from exc


def camel_case(module_id: str) -> str:
    parts = [p for p in _NON_WORD.split(module_id) if p]
    if not parts:
        return "module"
    name = parts[0][0].lower() + parts[0][1:] + "".join(p[0].upper() + p[1:] for p in parts[1:])
    if name[0].isdigit():
        name = "m" + name
    return name


def _indent(text: str, spaces: int) -> str:
    pad = " " * spaces
    return "\n".join(pad + line if line else line for line in text.splitlines())


def _behavior_integrations(fused: FusedEssence) -> str:
    blocks = []
    for module_id, integration in fused.module_integrations.items():
        payload: Dict[str, float] = {
            "strength": integration.integration_strength,
            "creativeInfluence": integration.creative_influence.get("aesthetic_enhancement", 0.0),
            "technicalImpact": integration.technical_impact.get("performance_optimization", 0.0),
        }
        blocks.append(
            f"// integration {module_id}\n"
            f"this.integrateModule({js_literal(module_id)}, {js_literal(payload, indent=None)});"
        )
    return _indent("\n".join(blocks), 4) if blocks else "    // no module integrations"


def _module_activations(fused: FusedEssence) -> str:
    lines = []
    for module_id in fused.module_integrations:
        lines.append(f"this.{camel_case(module_id)}Active = true;")
        lines.append(f"console.log({js_literal('module ' + module_id + ' integrated')});")
    return _indent("\n".join(lines), 4) if lines else "    // no modules to activate"


def _epilogue(strategy: str) -> str:
    title, note, message = EPILOGUES.get(strategy, EPILOGUES["conservative"])
    return (
        f"// === {title} ===\n"
        f"// {note}\n"
        f"console.log({js_literal(message)});\n"
    )


def generate(fused: FusedEssence) -> str:
    """Deterministic JavaScript source for ``fused``."""
    original = js_literal(fused.original.model_dump())
    enhanced = js_literal({k: v.model_dump() for k, v in fused.enhanced_properties.items()})
    evolution = js_literal(fused.creative_evolution.model_dump())
    animate_method, animate_label = ANIMATION_METHODS.get(fused.animation_type, GENERIC_ANIMATION)

    return f"""/**
 * Fused effect
 * Rebuilt from the original effect essence and {len(fused.module_integrations)} integrated modules.
 * Strategy: {fused.strategy}
 */
export class FusedEffect {{
  constructor(options = {{}}) {{
    this.modules = new Map();
    this.initializeFusedCore(options);
    this.setupEnhancedBehaviors();
    this.activateModuleIntegrations();
    console.log("fused effect ready");
  }}

  initializeFusedCore(options) {{
    // original essence plus module enhancements
    this.originalEssence = {_indent(original, 4).lstrip()};
    this.enhancedProperties = {_indent(enhanced, 4).lstrip()};
    this.creativeEvolution = {_indent(evolution, 4).lstrip()};
    this.fusedConfig = this.mergeFusedConfiguration(options);
  }}

  setupEnhancedBehaviors() {{
{_behavior_integrations(fused)}
  }}

  activateModuleIntegrations() {{
{_module_activations(fused)}
  }}

  animate(deltaTime) {{
    this.updateFusedBehaviors(deltaTime);
    this.applyCreativeEvolution(deltaTime);
    this.executeModuleEnhancements(deltaTime);
    this.optimizePerformance(deltaTime);
    this.{animate_method}(deltaTime);
  }}

  render(context) {{
    context.save();
    this.applyAestheticEnhancements(context);
    this.renderFusedCore(context);
    this.applyPerformanceOptimizations(context);
    context.restore();
  }}

  // === utility methods ===

  integrateModule(id, settings) {{
    this.modules.set(id, {{ ...settings, active: true }});
  }}

  mergeFusedConfiguration(options) {{
    return {{
      ...this.originalEssence.core_behavior.visual_properties,
      ...this.enhancedProperties,
      ...options
    }};
  }}

  updateFusedBehaviors(deltaTime) {{
    const evolutionFactor = this.creativeEvolution.aesthetic_evolution;
    this.applyEvolutionaryChanges(evolutionFactor, deltaTime);
  }}

  applyCreativeEvolution(deltaTime) {{
    if (this.creativeEvolution.innovation_breakthrough > 0.80) {{
      this.executeBreakthroughBehaviors(deltaTime);
    }}
  }}

  executeModuleEnhancements(deltaTime) {{
    Object.values(this.enhancedProperties).forEach((enhancement) => {{
      if (enhancement.innovation_factor > 0.50) {{
        this.applyInnovativeEnhancement(enhancement, deltaTime);
      }}
    }});
  }}

  optimizePerformance(deltaTime) {{
    // roughly once per second
    if (performance.now() % 1000 < 50) {{
      this.garbageCollectOptimizations();
    }}
  }}

  {animate_method}(deltaTime) {{
    console.log("{animate_label}", deltaTime);
  }}

  applyAestheticEnhancements(context) {{
    const aestheticLevel = this.creativeEvolution.aesthetic_evolution;
    if (aestheticLevel > 0.70) {{
      context.filter = "drop-shadow(0 0 10px rgba(255,255,255,0.5))";
    }}
  }}

  renderFusedCore(context) {{
    console.log("render fused core", context);
  }}

  applyPerformanceOptimizations(context) {{
    console.log("performance optimizations applied", context);
  }}

  executeBreakthroughBehaviors(deltaTime) {{
    console.log("breakthrough behaviors", deltaTime);
  }}

  applyInnovativeEnhancement(enhancement, deltaTime) {{
    console.log("innovative enhancement", enhancement, deltaTime);
  }}

  garbageCollectOptimizations() {{
    this.modules.forEach(function (settings, id, map) {{
      if (settings.active === false) {{
        map.delete(id);
      }}
    }});
  }}

  applyEvolutionaryChanges(factor, deltaTime) {{
    console.log("creative evolution", factor, deltaTime);
  }}
}}

export default FusedEffect;

{_epilogue(fused.strategy)}"""
