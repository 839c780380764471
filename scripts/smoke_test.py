"""End-to-end smoke check: health, then one fusion per configured level.

Usage: python scripts/smoke_test.py [effect.js]
"""
import json
import os
import sys

from fastapi.testclient import TestClient

SAMPLE_EFFECT = """
class Sparkles {
  update(dt) {
    this.particles.forEach(p => { p.y += Math.sin(p.t) * dt; });
  }
}
"""


def main(argv) -> int:
    # Ensure repo root is on sys.path so `import server` works
    repo_root = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
    if repo_root not in sys.path:
        sys.path.insert(0, repo_root)

    source = SAMPLE_EFFECT
    if len(argv) > 1:
        with open(argv[1], "r", encoding="utf-8") as f:
            source = f.read()

    import server

    with TestClient(server.app) as client:
        res = client.get("/api/health")
        health = res.json()
        if res.status_code != 200 or health.get("status") != "ok":
            print(json.dumps({"ok": False, "stage": "health", "payload": health}))
            return 1

        results = []
        for level in health["levelsConfigured"]:
            res = client.post("/api/fusion", json={"source_code": source, "level": level})
            if res.status_code != 200:
                print(json.dumps({"ok": False, "stage": f"fuse level {level}", "payload": res.json()}))
                return 2
            artifact = res.json()
            metrics = artifact["transformation_report"]["enhancement_metrics"]
            results.append({
                "fusion_id": artifact["fusion_id"],
                "compressed_size": metrics["compressed_size"],
                "compression_ratio": round(metrics["compression_ratio"], 3),
            })

    print(json.dumps({"ok": True, "health": health, "fusions": results}, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main(sys.argv))
