import os, shutil

# --- Tunables (read once from the environment) ---
NODE_BIN = os.environ.get("NODE_BIN")
POLL_SECONDS = float(os.environ.get("NODEBRIDGE_POLL_SECONDS", "0.05"))
TIMEOUT_SECONDS = float(os.environ.get("NODEBRIDGE_TIMEOUT_SECONDS", "20"))
MAX_SOURCE_BYTES = int(os.environ.get("MAX_SOURCE_BYTES", "200000"))
OUTPUT_MAX_CHARS = int(os.environ.get("OUTPUT_MAX_CHARS", "100000"))
PORT = int(os.environ.get("PORT", "8080"))
LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")


def resolve_node_bin(explicit: str | None = None) -> str:
    if explicit:
        return explicit
    if NODE_BIN and shutil.which(NODE_BIN):
        return NODE_BIN
    for c in ("node", "nodejs", "/usr/local/bin/node", "/usr/bin/node"):
        if shutil.which(c):
            return c
    return NODE_BIN or "node"
