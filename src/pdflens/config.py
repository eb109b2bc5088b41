"""Server-wide configuration constants.

Values are read once from the environment at import time; command-line
flags in pdflens.server take precedence where both exist.
"""
import os

SERVER_NAME = "pdflens"
SERVER_INSTRUCTIONS = "A tool to read PDF files"

DEFAULT_PORT = int(os.getenv("PDFLENS_PORT", "4003"))
"""HTTP port used when not running over stdio."""

DEFAULT_HOST = os.getenv("PDFLENS_HOST", "0.0.0.0")

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

DEFAULT_IMAGE_DIMENSION = int(os.getenv("PDFLENS_IMAGE_DIMENSION", "1024"))
"""Pixels on the longer side of a rendered page when the caller gives none."""

MAX_IMAGE_DIMENSION = 65535

PAGE_SEPARATOR = "\x0c"
"""Separator placed between page texts (form feed)."""


def pinned_roots_from_env() -> list[str]:
    """Directories listed in PDFLENS_ROOTS, separated by os.pathsep."""
    value = os.getenv("PDFLENS_ROOTS", "")
    return [entry for entry in value.split(os.pathsep) if entry.strip()]
