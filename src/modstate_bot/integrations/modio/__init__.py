"""mod.io API integration."""

from .client import ModioClient
from .constants import MODIO_API_BASE_URL
from .errors import (
    MalformedUpstreamRecordError,
    UpstreamError,
    UpstreamNotFoundError,
    UpstreamUnavailableError,
)
from .models import ModioMod, ModioModSummary, decode_mod, decode_search_results

__all__ = [
    "MODIO_API_BASE_URL",
    "ModioClient",
    "ModioMod",
    "ModioModSummary",
    "decode_mod",
    "decode_search_results",
    "UpstreamError",
    "UpstreamUnavailableError",
    "UpstreamNotFoundError",
    "MalformedUpstreamRecordError",
]
