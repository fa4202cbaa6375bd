"""CLI commands for gemini-rotator."""

from .generate import generate
from .keys import keys


__all__ = ["generate", "keys"]
