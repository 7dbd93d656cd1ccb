"""HTTP ingress for Discord interactions."""

from .app import create_app
from .signature import SignatureVerifier

__all__ = ["SignatureVerifier", "create_app"]
