"""Core helpers shared across gemini-rotator."""

from gemini_rotator.core.logging import setup_logging
from gemini_rotator.core.validators import mask_credential, parse_comma_separated


__all__ = [
    "mask_credential",
    "parse_comma_separated",
    "setup_logging",
]
