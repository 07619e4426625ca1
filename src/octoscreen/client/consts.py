"""Constants used across the OctoScreen client.

How to use the most important parts:
- Import this module to reference the default server URL and the tool endpoint without
  hardcoding them in your application logic.
"""

APP_NAME = "octoscreen"
APP_AUTHOR = "OctoScreen"

# API Defaults
DEFAULT_BASE_URL = "http://localhost:5000"
DEFAULT_TIMEOUT = 10.0

# Tool Endpoints
URI_TOOL = "/api/printer/tool"

# Authentication
API_KEY_HEADER = "X-Api-Key"
API_KEY_ENV = "OCTOPRINT_API_KEY"
