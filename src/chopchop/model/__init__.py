"""Model package - Core data structures for chopchop."""

from chopchop.model.hit import Hit
from chopchop.model.probe import ProbeResponse
from chopchop.model.severity import Severity
from chopchop.model.signature import Check, Plugin, SignatureError, Signatures

__all__ = [
    "Check",
    "Hit",
    "Plugin",
    "ProbeResponse",
    "Severity",
    "SignatureError",
    "Signatures",
]
