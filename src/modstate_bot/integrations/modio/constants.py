from __future__ import annotations

MODIO_API_BASE_URL = "https://api.mod.io/v1"
MODIO_DEFAULT_TIMEOUT_SECONDS = 10.0
