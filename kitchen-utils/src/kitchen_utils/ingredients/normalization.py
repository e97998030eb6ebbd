"""Ingredient name normalization utilities."""

import dataclasses
import functools
import re
import string
from typing import FrozenSet, List, Tuple

from kitchen_utils.exceptions import InvalidArgumentError
from kitchen_utils.ingredients.rules import load_rule_tables

# Only ASCII letters are folded; other scripts pass through untouched
_ASCII_FOLD = str.maketrans(string.ascii_uppercase, string.ascii_lowercase)

_TYPOGRAPHIC = str.maketrans({"’": "'", "‘": "'", "“": '"', "”": '"'})

_PUNCTUATION_RE = re.compile(r"[^\w\s-]|_")
_HYPHEN_RUN_RE = re.compile(r"-{2,}")
_LOOSE_HYPHEN_RE = re.compile(r"(?<!\w)-|-(?!\w)")
_TOKEN_SPLIT_RE = re.compile(r"[\s-]+")

# Words that look plural but are not
_INVARIANT_WORDS = frozenset({"molasses"})
_SIBILANT_ENDINGS = ("o", "x", "z", "ch", "sh", "ss")
_MIN_SINGULAR_LENGTH = 3


@dataclasses.dataclass(frozen=True)
class NormalizedName:
    text: str
    tokens: Tuple[str, ...]

    @property
    def token_set(self) -> FrozenSet[str]:
        return frozenset(self.tokens)

    def __len__(self) -> int:
        return len(self.text)

    def __bool__(self) -> bool:
        return bool(self.text)


def singularize(word: str) -> str:
    """Strip a trailing plural from a single word.

    The singular form must keep at least three characters, so "peas" becomes
    "pea" while "gas" and "ras" are left alone.

    Examples:
        >>> singularize("tomatoes")
        'tomato'
        >>> singularize("berries")
        'berry'
        >>> singularize("swiss")
        'swiss'
    """
    if word in _INVARIANT_WORDS or word.endswith(("ss", "us", "is")):
        return word

    if word.endswith("ies") and len(word) - 2 >= _MIN_SINGULAR_LENGTH:
        return word[:-3] + "y"
    if word.endswith("es") and word[:-2].endswith(_SIBILANT_ENDINGS):
        if len(word) - 2 >= _MIN_SINGULAR_LENGTH:
            return word[:-2]
    if word.endswith("s") and len(word) - 1 >= _MIN_SINGULAR_LENGTH:
        return word[:-1]
    return word


def stem_word(word: str) -> str:
    """Singularize a word and fold its "-ie"/"-y" ending onto "-i".

    "berries" and "berry" singularize to the same word, but "cookies" and
    "cookie" do not, so both endings share one comparison stem.

    Examples:
        >>> stem_word("cookies")
        'cooki'
        >>> stem_word("cookie")
        'cooki'
        >>> stem_word("berries")
        'berri'
    """
    word = singularize(word)
    if word.endswith("ie") and len(word) - 1 >= _MIN_SINGULAR_LENGTH:
        return word[:-2] + "i"
    if word.endswith("y") and len(word) >= _MIN_SINGULAR_LENGTH:
        return word[:-1] + "i"
    return word


def clean_text(raw: str) -> str:
    """Fold case, drop punctuation (keeping inner hyphens) and squash whitespace."""
    text = raw.translate(_TYPOGRAPHIC).translate(_ASCII_FOLD)
    text = text.replace("'", "")
    text = _PUNCTUATION_RE.sub(" ", text)
    text = _HYPHEN_RUN_RE.sub("-", text)
    text = _LOOSE_HYPHEN_RE.sub(" ", text)
    return " ".join(text.split())


def tokenize(text: str) -> Tuple[str, ...]:
    """Split cleaned text on whitespace and hyphens."""
    return tuple(t for t in _TOKEN_SPLIT_RE.split(text) if t)


@functools.lru_cache(maxsize=1)
def _stop_phrases() -> Tuple[Tuple[str, ...], ...]:
    phrases = {tuple(clean_text(p).split()) for p in load_rule_tables().stopwords}
    # Longest first so "extra virgin" is consumed as a unit
    return tuple(sorted((p for p in phrases if p), key=lambda p: (-len(p), p)))


def _strip_stopwords(words: List[str]) -> List[str]:
    phrases = _stop_phrases()
    kept = []
    i = 0
    while i < len(words):
        for phrase in phrases:
            if tuple(words[i : i + len(phrase)]) == phrase:
                i += len(phrase)
                break
        else:
            kept.append(words[i])
            i += 1
    return kept


def normalize(raw: str) -> NormalizedName:
    """Canonicalize a raw ingredient name into a comparable form.

    Folds ASCII case, removes punctuation except inner hyphens, collapses
    whitespace, drops qualifier words that do not change what the ingredient
    is ("fresh", "chopped", "extra virgin", ...), and stems the final
    word.

    Args:
        raw: Free-text ingredient name as typed or extracted.

    Returns:
        The cleaned text together with its tokens (split on spaces and
        hyphens).

    Raises:
        InvalidArgumentError: If ``raw`` is not a string.

    Examples:
        >>> normalize("Fresh Tomatoes").text
        'tomato'
        >>> normalize("Extra Virgin Olive Oil").text
        'olive oil'
        >>> normalize("stir-fry sauce").tokens
        ('stir', 'fry', 'sauce')
    """
    if not isinstance(raw, str):
        raise InvalidArgumentError(f"Ingredient name must be a string, got {type(raw).__name__}")

    words = clean_text(raw).split()
    if not words:
        return NormalizedName("", ())

    # A name made only of qualifiers ("Fresh") keeps its words
    words = _strip_stopwords(words) or words
    words[-1] = stem_word(words[-1])

    text = " ".join(words)
    return NormalizedName(text, tokenize(text))
