from __future__ import annotations

"""Candidate dictionary loading."""

import logging
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..errors import DictionaryLoadFailure

ROOT = Path(__file__).resolve().parent.parent
DEFAULT_WORDLIST = ROOT / "wordlist" / "subdomains-100.txt"

logger = logging.getLogger("subprobe")


class Wordlist:
    """Read candidate labels from the embedded list or a user file.

    Blank lines, `#` comments and lines that are not valid UTF-8 are skipped,
    whitespace is trimmed and duplicates keep their first position. Parsed
    files are cached by mtime.
    """

    _CACHE: Dict[str, Tuple[float, List[str]]] = {}

    def __init__(self, path: Optional[str] = None):
        self.path = Path(path).expanduser() if path else DEFAULT_WORDLIST

    @property
    def is_default(self) -> bool:
        return self.path == DEFAULT_WORDLIST

    def load(self) -> List[str]:
        key = str(self.path)
        try:
            mtime = self.path.stat().st_mtime
            cached = self._CACHE.get(key)
            if cached and cached[0] == mtime:
                return list(cached[1])

            words: List[str] = []
            seen: set[str] = set()
            with open(self.path, "rb") as fh:
                for lineno, raw in enumerate(fh, start=1):
                    try:
                        text = raw.decode("utf-8")
                    except UnicodeDecodeError:
                        logger.warning("Skipping undecodable line %d in %s", lineno, self.path)
                        continue
                    word = text.strip().lower()
                    if not word or word.startswith("#"):
                        continue
                    if word in seen:
                        continue
                    seen.add(word)
                    words.append(word)
        except OSError as exc:
            logger.error("Cannot read wordlist %s: %s", self.path, exc)
            raise DictionaryLoadFailure(f"Cannot read wordlist {self.path}: {exc}") from exc

        if not words:
            raise DictionaryLoadFailure(f"Wordlist is empty: {self.path}")
        self._CACHE[key] = (mtime, words)
        return list(words)
