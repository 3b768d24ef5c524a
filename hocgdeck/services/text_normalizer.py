"""
Text normalization for card search.

Two forms are produced for any string:

- loose: NFKC, lowercased unless case-sensitive, trimmed, katakana folded
  to hiragana. Used for substring matching.
- exact: NFKC, lowercased unless case-sensitive, trimmed. Kana are left
  alone. Used for quoted phrases.

Normalizing the same card text on every keystroke is wasteful, so each
TextNormalizer keeps its own cache. Create one per search engine.
"""

import unicodedata

# Katakana block range that has a hiragana counterpart (ァ..ヶ)
_KATAKANA_START = 0x30A1
_KATAKANA_END = 0x30F6
_KANA_OFFSET = 0x60


def katakana_to_hiragana(text: str) -> str:
    """Map katakana characters to hiragana; everything else is unchanged."""
    return "".join(
        chr(ord(char) - _KANA_OFFSET) if _KATAKANA_START <= ord(char) <= _KATAKANA_END else char
        for char in text
    )


def normalize_text(text: str, case_sensitive: bool = False, exact: bool = False) -> str:
    """Uncached normalization, see module docstring for the two forms."""
    normalized = unicodedata.normalize("NFKC", text)
    if not case_sensitive:
        normalized = normalized.lower()
    normalized = normalized.strip()
    if not exact:
        normalized = katakana_to_hiragana(normalized)
    return normalized


class TextNormalizer:
    """Caching text normalizer."""

    def __init__(self) -> None:
        self._cache: dict[tuple[str, bool, bool], str] = {}

    def __len__(self) -> int:
        return len(self._cache)

    def normalize(self, text: str, case_sensitive: bool = False, exact: bool = False) -> str:
        key = (text, case_sensitive, exact)
        cached = self._cache.get(key)
        if cached is None:
            cached = normalize_text(text, case_sensitive=case_sensitive, exact=exact)
            self._cache[key] = cached
        return cached

    def loose(self, text: str, case_sensitive: bool = False) -> str:
        return self.normalize(text, case_sensitive=case_sensitive, exact=False)

    def exact(self, text: str, case_sensitive: bool = False) -> str:
        return self.normalize(text, case_sensitive=case_sensitive, exact=True)

    def clear(self) -> None:
        self._cache.clear()
