"""Text helpers for matching Turkish and German user input."""

import unicodedata

# Letters NFKD leaves alone
_EXTRA_FOLDS = str.maketrans({"ı": "i", "ß": "ss", "ø": "o", "æ": "ae"})


def fold(text: str) -> str:
    """
    Lower-case and strip diacritics so "İstanbul", "ISTANBUL" and "istanbul"
    compare equal, as do "rüzgâr" and "ruzgar".
    """
    lowered = (text or "").lower()
    decomposed = unicodedata.normalize("NFKD", lowered)
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return stripped.translate(_EXTRA_FOLDS)
