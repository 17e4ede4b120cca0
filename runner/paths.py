# runner/paths.py
import os
from datetime import datetime, timezone

ARTIFACTS_ROOT = os.getenv("SI_ARTIFACTS_ROOT", "/tmp/scene_introspect_artifacts")

def artifacts_dir() -> str:
    os.makedirs(ARTIFACTS_ROOT, exist_ok=True)
    return ARTIFACTS_ROOT

def screenshot_path(filename: str = None) -> str:
    if filename:
        if not filename.endswith(".png"):
            filename = filename + ".png"
        if os.path.isabs(filename):
            return filename
        return os.path.join(artifacts_dir(), filename)
    stamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S_%f")
    return os.path.join(artifacts_dir(), f"screenshot_{stamp}.png")
