"""脚本文件读写。Loading and saving script files for the front end."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from potassium.config.defaults import SCRIPT_SUFFIXES
from potassium.logging_utils import get_logger

LOGGER = get_logger(__name__)


@dataclass(frozen=True)
class ScriptFile:
    """A script loaded from disk."""

    name: str
    content: str


def is_script_file(path: str | Path) -> bool:
    """Return ``True`` if *path* carries one of the script suffixes."""

    return Path(path).suffix.lower() in SCRIPT_SUFFIXES


def load_script(path: str | Path) -> ScriptFile:
    """Read a UTF-8 script file.

    Raises
    ------
    FileNotFoundError
        If *path* does not point to an existing regular file.
    """

    script_path = Path(path)
    if not script_path.is_file():
        raise FileNotFoundError(f"Script file not found: {script_path}")

    if not is_script_file(script_path):
        LOGGER.debug("Loading file without a script suffix", extra={"path": str(script_path)})

    content = script_path.read_text(encoding="utf-8")
    name = script_path.name
    LOGGER.info("Script loaded", extra={"path": str(script_path), "chars": len(content)})
    return ScriptFile(name=name, content=content)


def save_script(path: str | Path, content: str) -> Path:
    """Write *content* to *path*, creating parent directories as needed."""

    script_path = Path(path)
    script_path.parent.mkdir(parents=True, exist_ok=True)
    script_path.write_text(content, encoding="utf-8")
    LOGGER.info("Script saved", extra={"path": str(script_path), "chars": len(content)})
    return script_path
