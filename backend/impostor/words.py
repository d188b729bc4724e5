import json
import logging
from typing import Iterable, List, Optional


log = logging.getLogger(__name__)


def load_words(path: str, logger: Optional[logging.Logger] = None) -> List[str]:
    """Read candidate secret words from a JSON array file.

    Any failure (missing file, bad JSON, non-array content) is logged and
    yields an empty list; the server still starts and rounds are refused
    with NoWordsAvailable.
    """
    logger = logger or log
    try:
        with open(path, encoding='utf-8') as fh:
            data = json.load(fh)
    except (OSError, ValueError) as exc:
        logger.error(f"[words] could not read {path}: {exc}")
        return []
    if not isinstance(data, list):
        logger.error(f"[words] {path} must contain a JSON array of strings, got {type(data).__name__}")
        return []
    words = clean_words(data)
    skipped = len(data) - len(words)
    if skipped:
        logger.warning(f"[words] skipped {skipped} invalid entries in {path}")
    logger.info(f"[words] loaded {len(words)} words from {path}")
    return words


def clean_words(entries: Iterable) -> List[str]:
    words = []
    for entry in entries:
        if isinstance(entry, str) and entry.strip():
            words.append(entry.strip())
    return words


class WordSource:
    """Fixed, ordered list of candidate words loaded at startup."""

    def __init__(self, words: Iterable[str] = ()):
        self._words = tuple(clean_words(words))

    def __len__(self):
        return len(self._words)

    def __bool__(self):
        return bool(self._words)

    def __iter__(self):
        return iter(self._words)

    def pick(self, rng) -> str:
        return self._words[rng.randrange(len(self._words))]

    @classmethod
    def from_file(cls, path: str, logger: Optional[logging.Logger] = None) -> 'WordSource':
        return cls(load_words(path, logger))
