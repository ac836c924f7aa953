"""
Copyright (c) 2025 Ynosound.
All rights reserved.

See LICENSE file in the project root for full license information.
"""
import re

VOWELS = "aeiouy"

# common miscounts of the vowel group heuristic
SYLLABLE_OVERRIDES = {
    "quiet": 2,
    "every": 2,
    "hour": 1,
    "fire": 1,
    "poem": 2,
    "people": 2,
    "family": 3,
    "business": 2,
    "orange": 2,
    "beautiful": 3,
    "different": 3,
    "going": 2,
}


def _letters(word):
    return re.sub(r"[^a-z]", "", word.lower())


def _vowel_groups(w):
    # (start, end) of each run of vowels
    return [m.span() for m in re.finditer(f"[{VOWELS}]+", w)]


def count_syllables(word, overrides=None):
    w = _letters(word)
    if not w:
        return 0
    if overrides is None:
        overrides = SYLLABLE_OVERRIDES
    if w in overrides:
        return overrides[w]
    groups = len(_vowel_groups(w))
    if w.endswith("e") and not w.endswith(("le", "ye", "ee")) and groups > 1:
        groups -= 1
    return max(1, groups)


def rhyme_part(word):
    """The last vowel group and everything after it, skipping a silent final e ("cake" -> "ake")."""
    w = _letters(word)
    groups = _vowel_groups(w)
    if not groups:
        return w
    start = groups[-1][0]
    if len(groups) > 1 and w.endswith("e") and groups[-1] == (len(w) - 1, len(w)):
        start = groups[-2][0]
    return w[start:]


def rhymes(word, other):
    w, o = _letters(word), _letters(other)
    if not w or not o or w == o:
        return False
    return rhyme_part(w) == rhyme_part(o)
