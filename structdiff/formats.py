"""
structdiff.formats — Turn serialized documents into diffable values.

Supported inputs:
    • JSON strings → plain Python values (dict, list, str, int, float,
      bool, None)
    • JSON files (UTF-8) → the same

Any read, decode or parse failure is reported as InputError.
"""

import json
import logging
from pathlib import Path
from typing import Any, Union

logger = logging.getLogger(__name__)


class InputError(Exception):
    """A document could not be read or parsed."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"{source}: {reason}")


# ═══════════════════════════════════════════════════════════════════
#  JSON STRINGS → VALUES
# ═══════════════════════════════════════════════════════════════════

def from_json(text: str, source: str = "<string>") -> Any:
    """Parse a JSON string into a value."""
    try:
        return json.loads(text)
    except json.JSONDecodeError as e:
        raise InputError(
            source, f"invalid JSON at line {e.lineno} column {e.colno}: {e.msg}"
        ) from e
    except RecursionError as e:
        raise InputError(source, "document nests too deeply to parse") from e


# ═══════════════════════════════════════════════════════════════════
#  FILES → VALUES
# ═══════════════════════════════════════════════════════════════════

def load_file(path: Union[str, Path]) -> Any:
    """Read a UTF-8 JSON file and parse it into a value."""
    path = Path(path)
    logger.debug("reading %s", path)
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise InputError(str(path), f"not valid UTF-8: {e.reason}") from e
    except OSError as e:
        raise InputError(str(path), e.strerror or str(e)) from e
    return from_json(text, source=str(path))
