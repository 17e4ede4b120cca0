# runner/config.py
import os
from dotenv import load_dotenv

load_dotenv()

# Scene graph
ROOT_GRAPH_KEY = os.getenv("SI_ROOT_GRAPH_KEY", "_root_")
MAX_HIERARCHY_DEPTH = int(os.getenv("SI_MAX_DEPTH", "10"))

# Host access
HOST_TIMEOUT_SEC = float(os.getenv("SI_HOST_TIMEOUT_SEC", "5.0"))
INPUT_TIMEOUT_SEC = float(os.getenv("SI_INPUT_TIMEOUT_SEC", "2.0"))
CLICK_HOLD_SEC = float(os.getenv("SI_CLICK_HOLD_SEC", "0.01"))
SNAPSHOT_COPY_ATTEMPTS = int(os.getenv("SI_SNAPSHOT_COPY_ATTEMPTS", "3"))

# Transports
BRIDGE_HOST = os.getenv("SI_BRIDGE_HOST", "127.0.0.1")
BRIDGE_PORT = int(os.getenv("SI_BRIDGE_PORT", "9999"))
APP_NAME = os.getenv("SI_APP_NAME", "Unknown")

# Observability
PROMETHEUS_METRICS_PORT = int(os.getenv("SI_METRICS_PORT", "0"))
