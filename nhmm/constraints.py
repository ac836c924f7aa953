"""
Copyright (c) 2025 Ynosound.
All rights reserved.

See LICENSE file in the project root for full license information.
"""
from abc import ABC, abstractmethod

from nhmm.syllables import count_syllables, rhymes

ANY = "*"


def is_wildcard(tag):
    return tag is None or tag == ANY


class Constraint(ABC):
    """Deletes, in place, the transitions that violate a domain rule.

    matrices[i] holds the transitions from the word at position i to the word at
    position i + 1, as previous -> next -> weight. constraint holds one tag per
    position of the sentence, so len(constraint) == len(matrices) + 1.
    """

    @abstractmethod
    def apply(self, matrices, constraint):
        pass

    @staticmethod
    def remove_previous(matrix, predicate):
        for word in [w for w in matrix if predicate(w)]:
            del matrix[word]

    @staticmethod
    def remove_next(matrix, predicate):
        for word in list(matrix):
            row = matrix[word]
            for next_word in [w for w in row if predicate(w)]:
                del row[next_word]
            if not row:
                del matrix[word]


class NoConstraint(Constraint):
    def apply(self, matrices, constraint):
        pass


class WordTagConstraint(Constraint):
    """A constraint checking each word against the tag of its own position.

    Subclasses implement accepts(word, tag). None or "*" accept any word.
    """

    def parse_tag(self, tag):
        return tag

    @abstractmethod
    def accepts(self, word, tag):
        pass

    def apply(self, matrices, constraint):
        if len(constraint) != len(matrices) + 1:
            raise ValueError(f"expected {len(matrices) + 1} constraint tags, got {len(constraint)}")
        tags = [None if is_wildcard(tag) else self.parse_tag(tag) for tag in constraint]
        for i, matrix in enumerate(matrices):
            previous_tag, next_tag = tags[i], tags[i + 1]
            if previous_tag is not None:
                self.remove_previous(matrix, lambda w: not self.accepts(w, previous_tag))
            if next_tag is not None:
                self.remove_next(matrix, lambda w: not self.accepts(w, next_tag))


class PositionConstraint(WordTagConstraint):
    # the tag is the word itself
    def accepts(self, word, tag):
        return word == tag


class SyllableConstraint(WordTagConstraint):
    def __init__(self, overrides=None):
        self.overrides = overrides

    def parse_tag(self, tag):
        if isinstance(tag, str) and tag.isdigit():
            return int(tag)
        if isinstance(tag, int) and not isinstance(tag, bool):
            return tag
        raise ValueError(f"syllable count expected, got {tag!r}")

    def accepts(self, word, tag):
        return count_syllables(word, self.overrides) == tag


class RhymeConstraint(WordTagConstraint):
    # the tag is a word to rhyme with, the word itself is refused
    def accepts(self, word, tag):
        return rhymes(word, tag)
