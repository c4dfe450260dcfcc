"""Hangul syllable helpers used to partition the corpus."""

from __future__ import annotations

SYLLABLE_FIRST = 0xAC00
SYLLABLE_LAST = 0xD7A3
_SYLLABLES_PER_INITIAL = 21 * 28

INITIAL_CONSONANTS = (
    "ㄱ", "ㄲ", "ㄴ", "ㄷ", "ㄸ", "ㄹ", "ㅁ", "ㅂ", "ㅃ",
    "ㅅ", "ㅆ", "ㅇ", "ㅈ", "ㅉ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
)

# Tense consonants share the bucket of their plain counterpart. Asset sets
# split by syllable block file them under 기타 instead, so lookups try both.
_TENSE_TO_PLAIN = {"ㄲ": "ㄱ", "ㄸ": "ㄷ", "ㅃ": "ㅂ", "ㅆ": "ㅅ", "ㅉ": "ㅈ"}

OTHER_BUCKET = "기타"

BUCKET_KEYS = (
    "ㄱ", "ㄴ", "ㄷ", "ㄹ", "ㅁ", "ㅂ", "ㅅ",
    "ㅇ", "ㅈ", "ㅊ", "ㅋ", "ㅌ", "ㅍ", "ㅎ",
    OTHER_BUCKET,
)


def is_syllable(char: str) -> bool:
    return len(char) == 1 and SYLLABLE_FIRST <= ord(char) <= SYLLABLE_LAST


def initial_consonant(char: str) -> str | None:
    if not is_syllable(char):
        return None
    return INITIAL_CONSONANTS[(ord(char) - SYLLABLE_FIRST) // _SYLLABLES_PER_INITIAL]


def bucket_for(word: str) -> str:
    """Bucket key of a word: the plain initial consonant of its first syllable."""
    if not word:
        return OTHER_BUCKET
    consonant = initial_consonant(word[0])
    if consonant is None:
        return OTHER_BUCKET
    return _TENSE_TO_PLAIN.get(consonant, consonant)


def has_tense_initial(word: str) -> bool:
    return bool(word) and initial_consonant(word[0]) in _TENSE_TO_PLAIN
