import re
import unicodedata


_NON_ALNUM = re.compile(r"[^a-z0-9]+")


def normalize_name(value: str) -> str:
    """
    Fold a table key for lookup: strip diacritics, lower-case, collapse
    punctuation and whitespace to single spaces.

    "Pūrva  Phālgunī (2)" -> "purva phalguni 2"
    """
    if not value:
        return ""
    decomposed = unicodedata.normalize("NFKD", str(value))
    stripped = "".join(c for c in decomposed if not unicodedata.combining(c))
    return _NON_ALNUM.sub(" ", stripped.lower()).strip()
