"""Constants and configuration for responder."""

# Probe target (fixed, not configurable)
HOSTNAME = "gitlab.com"
PORT = "443"
PROBE_PATH = "/"

# Default run settings
DEFAULT_INTERVAL = 10
DEFAULT_RUNNING_TIME = 300
DEFAULT_HTTP_METHOD = "GET"

# Per-probe read/response timeout in seconds
READ_TIMEOUT = 10.0

HTTP_METHODS = ("GET", "HEAD")

# User agent for HTTP requests
USER_AGENT = "responder/0.1.0"

# Placeholder shown on the console when no sample was recorded
NO_DATA = "n/a"
