import pytest
import pytest_asyncio
from asgi_lifespan import LifespanManager
from httpx import ASGITransport, AsyncClient

from effect_fusion.config import FusionSettings
from effect_fusion.moderation import PassthroughModerator
from effect_fusion.orchestrator import (
    FusionHistory,
    FusionOrchestrator,
    RecordingProgressReporter,
    SequentialFusionIds,
)
from effect_fusion.registry import LevelPolicyTable, ModuleRegistry

PARTICLE_SOURCE = """
class FireworkEffect {
  constructor(canvas) {
    this.ctx = canvas.getContext('2d');
    this.particles = [];
  }
  spawn() {
    for (let i = 0; i < 50; i++) {
      this.particles.push({ x: Math.random() * 100, y: Math.sin(i) * 10 });
    }
  }
  explode() {
    // intense particle explosion with neon glow
    setTimeout(() => this.spawn(), 250);
  }
}
"""


@pytest.fixture(scope="session")
def registry():
    return ModuleRegistry.from_yaml()


@pytest.fixture(scope="session")
def policies():
    return LevelPolicyTable.from_yaml()


@pytest.fixture
def progress():
    return RecordingProgressReporter()


@pytest.fixture
def orchestrator(registry, policies, progress):
    return FusionOrchestrator(
        registry=registry,
        policies=policies,
        moderator=PassthroughModerator(),
        history=FusionHistory(),
        id_factory=SequentialFusionIds(),
        progress=progress,
    )


@pytest.fixture
def particle_source():
    return PARTICLE_SOURCE


@pytest_asyncio.fixture
async def client():
    """Async client bound to the FastAPI app, with lifespan events handled."""
    from server import app

    app.state.settings = FusionSettings(max_source_bytes=4096, history_limit=50)
    transport = ASGITransport(app=app)
    async with LifespanManager(app):
        async with AsyncClient(transport=transport, base_url="http://test") as c:
            yield c
