from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from contextlib import asynccontextmanager
import logging
import os

from dotenv import load_dotenv

# Load environment variables early so the settings below see them
load_dotenv()
# Then overlay .env.local if present (does not override already-set envs)
load_dotenv(dotenv_path=os.path.join(os.path.dirname(__file__), ".env.local"), override=False)

from effect_fusion import __version__
from effect_fusion.api import router as fusion_router
from effect_fusion.config import FusionSettings
from effect_fusion.moderation import ContextualModerator, PassthroughModerator
from effect_fusion.orchestrator import FusionHistory, FusionOrchestrator
from effect_fusion.registry import LevelPolicyTable, ModuleRegistry

logger = logging.getLogger("effect_fusion.server")


def build_orchestrator(settings: FusionSettings) -> FusionOrchestrator:
    if settings.contextual_moderation:
        moderator = ContextualModerator(ceiling=settings.moderation_ceiling)
    else:
        moderator = PassthroughModerator()
    return FusionOrchestrator(
        registry=ModuleRegistry.from_yaml(settings.modules_path),
        policies=LevelPolicyTable.from_yaml(settings.levels_path),
        moderator=moderator,
        history=FusionHistory(limit=settings.history_limit),
    )


# --- App Lifecycle ---
@asynccontextmanager
async def lifespan(app: FastAPI):
    settings = getattr(app.state, "settings", None) or FusionSettings.from_env()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    app.state.settings = settings
    app.state.orchestrator = build_orchestrator(settings)
    logger.info(
        "Fusion service ready: %d modules, levels %s",
        len(app.state.orchestrator.registry),
        app.state.orchestrator.policies.levels(),
    )
    yield
    logger.info("Fusion service stopped")


# --- Main App Setup ---
app = FastAPI(lifespan=lifespan, title="Effect Fusion", version=__version__)

# CORS for local dev (Vite at 5173)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://127.0.0.1:5173",
        "http://localhost:5173",
    ],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(fusion_router)


# --- Health Check ---
@app.get("/api/health")
async def health():
    orch = getattr(app.state, "orchestrator", None)
    return {
        "status": "ok",
        "version": __version__,
        "modulesRegistered": len(orch.registry) if orch else 0,
        "levelsConfigured": orch.policies.levels() if orch else [],
    }
