DEFAULT_CONFIG_FILE = "~/.photon-cli/config.yml"
DEFAULT_LEGACY_CONFIG_FILE = "~/.photon-cli/.photon-config"

DEFAULT_REQUEST_TIMEOUT_SECONDS = 30.0

# Task waits (generic create/delete/etc. operations).
DEFAULT_TASK_TIMEOUT_SECONDS = 600.0
DEFAULT_TASK_POLL_INTERVAL_SECONDS = 0.5

# Cluster/service readiness waits poll the resource itself, a heavier endpoint.
DEFAULT_READY_TIMEOUT_SECONDS = 3600.0
DEFAULT_READY_POLL_INTERVAL_SECONDS = 2.0

DEFAULT_MAX_CONSECUTIVE_ERRORS = 3
DEFAULT_RENDER_INTERVAL_SECONDS = 0.5

LOG_PREFIX = "[photon-cli]"
