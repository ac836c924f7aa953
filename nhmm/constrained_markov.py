"""
Copyright (c) 2025 Ynosound.
All rights reserved.

See LICENSE file in the project root for full license information.
"""
import copy
import logging
from collections import Counter

import numpy as np

from nhmm.constraints import NoConstraint
from nhmm.errors import InconsistentModelError, ModelNotTrainedError, NoSolutionError

"""
Non homogeneous Markov model of fixed length, after Pachet, Roy and Barbieri,
"Finite-length Markov processes with constraints" (IJCAI 2011).
- One transition matrix (layer) per position. Layer 0 goes from START to the first word,
layer i from the word at position i - 1 to the word at position i.
- Constraints delete entries of the layers, then arc consistency removes every word that
cannot be part of a complete sentence.
- Rows are then normalized independently (each row sums to 1). This keeps the ratios of
the original probabilities but not the exact distribution of the constrained sequences.
"""

logger = logging.getLogger(__name__)

# marker representing the start of a sentence
START = "<<START>>"
# marker representing the end of a sentence
END = "<<END>>"
TOLERANCE = 1e-9


class ConstrainedMarkovModel:
    """
    A fixed-length, position-indexed Markov model filtered by a Constraint.

    The model is read-only once train() succeeded. The shared random generator is
    not synchronized: concurrent callers should pass their own rng to the queries.
    """

    def __init__(self, constraint=None, seed=None):
        self.constraint = constraint if constraint is not None else NoConstraint()
        self.rng = np.random.default_rng(seed)
        self._reset()

    def _reset(self):
        self._trained = False
        self._markov_order = None
        self._sentence_length = None
        self._training_sequences = []
        self._transition_probs = {}
        self._transition_matrices = []
        self._removed_nodes_by_constraint = []
        self._removed_nodes_by_arc_consistency = []

    # training

    def train(self, model, constraint=None):
        """
        Trains on the sequences of the given source model.

        Counts the transitions between words, copies them into one layer per position,
        removes transitions violating the constraint, removes dead nodes and finally
        normalizes. Raises NoSolutionError if a layer ends up empty.
        :param model: trained MarkovModel
        :param constraint: one tag per position, None for no tag at all
        """
        self._reset()
        sequences = model.get_training_sequences()
        sentence_length = self.check_training_sequences(sequences)
        if constraint is None:
            constraint = [None] * sentence_length
        constraint = list(constraint)
        if len(constraint) != sentence_length:
            raise ValueError(f"constraint has {len(constraint)} tags, sentences have {sentence_length} words")

        transition_probs = {}
        for seq in sequences:
            for word, next_word in zip(seq, seq[1:]):
                self.increment(transition_probs, word, next_word)
        matrices = [copy.deepcopy(transition_probs) for _ in range(sentence_length - 1)]
        removed_by_constraint = self.apply_constraints(matrices, constraint)
        # layer numbering includes the start layer
        for i, matrix in enumerate(matrices):
            if not matrix:
                raise NoSolutionError(i + 1, f"layer {i + 1} emptied by the constraint, no sequence satisfies it")
        removed_by_arc_consistency = self.remove_dead_nodes(matrices)
        for i, matrix in enumerate(matrices):
            if not matrix:
                raise NoSolutionError(i + 1)
        matrices.insert(0, self.build_start_transition(matrices[0], sequences))
        self.normalize(matrices)

        self._markov_order = model.markov_order
        self._sentence_length = sentence_length
        self._training_sequences = sequences
        self._transition_probs = transition_probs
        self._transition_matrices = matrices
        self._removed_nodes_by_constraint = [[]] + removed_by_constraint
        self._removed_nodes_by_arc_consistency = [[]] + removed_by_arc_consistency
        self._trained = True
        logger.info(
            "trained on %d sequences of length %d, layer sizes %s",
            len(sequences), sentence_length, self.get_transition_matrices_sizes(),
        )

    @staticmethod
    def check_training_sequences(sequences):
        if not sequences:
            raise ValueError("the source model has no training sequence")
        lengths = sorted({len(seq) for seq in sequences})
        if len(lengths) != 1:
            raise ValueError(f"training sequences must all have the same length, got lengths {lengths}")
        if lengths[0] < 2:
            raise ValueError("training sequences must have at least 2 words")
        if any(word in (START, END) for seq in sequences for word in seq):
            raise ValueError(f"{START} and {END} are reserved and cannot appear in training sequences")
        if len(sequences) == 1:
            logger.warning("a single training sequence: the model can only reproduce it")
        return lengths[0]

    @staticmethod
    def increment(transition_probs, word, next_word):
        row = transition_probs.setdefault(word, {})
        row[next_word] = row.get(next_word, 0.0) + 1.0

    def apply_constraints(self, matrices, constraint):
        # returns, for each layer, the words that disappeared from it
        before = [self._words_in(matrix) for matrix in matrices]
        self.constraint.apply(matrices, constraint)
        removed = []
        for words, matrix in zip(before, matrices):
            remaining = set(self._words_in(matrix))
            removed.append([w for w in words if w not in remaining])
        return removed

    @staticmethod
    def _words_in(matrix):
        words = dict.fromkeys(matrix)
        for row in matrix.values():
            words.update(dict.fromkeys(row))
        return list(words)

    @staticmethod
    def remove_dead_nodes(matrices):
        """
        Enforces arc consistency on the layers, in place.

        Backward: a next word must be a previous word of the following layer, and a
        previous word must keep at least one next word. Forward: a previous word must be
        reachable from the preceding layer. Repeats until a full pass removes nothing.
        Returns, for each layer, the previous words removed.
        """
        removed = [[] for _ in matrices]
        last = len(matrices) - 1
        changed = True
        passes = 0
        while changed:
            changed = False
            passes += 1
            for i in range(last, -1, -1):
                matrix = matrices[i]
                if i < last:
                    following = matrices[i + 1]
                    for row in matrix.values():
                        for next_word in [w for w in row if w not in following]:
                            del row[next_word]
                            changed = True
                for word in [w for w, row in matrix.items() if not row]:
                    del matrix[word]
                    removed[i].append(word)
                    changed = True
            for i in range(1, last + 1):
                reachable = {w for row in matrices[i - 1].values() for w in row}
                matrix = matrices[i]
                for word in [w for w in matrix if w not in reachable]:
                    del matrix[word]
                    removed[i].append(word)
                    changed = True
            logger.debug("arc consistency pass %d, sizes %s", passes, [len(m) for m in matrices])
        return removed

    def build_start_transition(self, first_matrix, sequences):
        # START goes to every word that can begin a sentence, weighted by its frequency
        frequencies = self.get_word_frequencies(sequences)
        return {START: {word: float(frequencies[word]) for word in first_matrix}}

    @staticmethod
    def normalize(matrices):
        """Makes every row of every layer sum to 1, keeping the ratios between its entries."""
        for i, matrix in enumerate(matrices):
            for word, row in matrix.items():
                total = sum(row.values())
                if total <= 0:
                    raise InconsistentModelError(f"row {word!r} of layer {i} sums to {total}")
                for next_word in row:
                    row[next_word] /= total

    @staticmethod
    def get_word_frequencies(sequences):
        return Counter(word for seq in sequences for word in seq)

    # queries

    def check_trained(self):
        if not self._trained:
            raise ModelNotTrainedError()

    def generate_sentence(self, rng=None):
        self.check_trained()
        if rng is None:
            rng = self.rng
        sentence = []
        word = START
        for i in range(self._sentence_length):
            word = self.get_next_word(word, i, rng.random())
            sentence.append(word)
        return sentence

    def generate_sentences(self, n, rng=None):
        return [self.generate_sentence(rng=rng) for _ in range(n)]

    def get_next_word(self, previous_word, layer_index, draw):
        row = self._transition_matrices[layer_index].get(previous_word)
        if not row:
            raise InconsistentModelError(f"no transition from {previous_word!r} in layer {layer_index}")
        cumulative = 0.0
        for word, prob in row.items():
            cumulative += prob
            if cumulative > draw:
                return word
        # rounding left the draw above the last cumulative value
        return word

    def get_sentence_probability(self, sentence):
        self.check_trained()
        if len(sentence) != self._sentence_length:
            raise ValueError(f"sentence has {len(sentence)} words, the model generates {self._sentence_length}")
        probability = 1.0
        previous_word = START
        for matrix, word in zip(self._transition_matrices, sentence):
            prob = matrix.get(previous_word, {}).get(word, 0.0)
            if prob == 0.0:
                return 0.0
            probability *= prob
            previous_word = word
        return probability

    def get_total_solution_count(self):
        """
        Number of distinct sentences the model can generate.

        Depth first count memoized on (word, layer): goes backward through the layers,
        so the cost is linear in the number of edges, with no recursion.
        """
        self.check_trained()
        counts = {word: len(row) for word, row in self._transition_matrices[-1].items()}
        for matrix in reversed(self._transition_matrices[:-1]):
            counts = {word: sum(counts.get(w, 0) for w in row) for word, row in matrix.items()}
        return counts.get(START, 0)

    # introspection

    @property
    def trained(self):
        return self._trained

    @property
    def markov_order(self):
        return self._markov_order

    @property
    def sentence_length(self):
        return self._sentence_length

    def get_sentence_length(self):
        return self._sentence_length

    def get_markov_order(self):
        return self._markov_order

    def get_training_sequences(self):
        return [list(seq) for seq in self._training_sequences]

    def get_transition_probs(self):
        # the unconstrained, unnormalized counts
        return copy.deepcopy(self._transition_probs)

    def get_transition_matrices(self):
        return copy.deepcopy(self._transition_matrices)

    def get_transition_matrices_sizes(self):
        return [sum(len(row) for row in matrix.values()) for matrix in self._transition_matrices]

    @property
    def removed_nodes_by_constraint(self):
        return [list(nodes) for nodes in self._removed_nodes_by_constraint]

    @property
    def removed_nodes_by_arc_consistency(self):
        return [list(nodes) for nodes in self._removed_nodes_by_arc_consistency]

    def sample_removed_node_by_constraint(self, layer_index, rng=None):
        return self.sample_removed_nodes(self._removed_nodes_by_constraint, layer_index, rng)

    def sample_removed_node_by_arc_consistency(self, layer_index, rng=None):
        return self.sample_removed_nodes(self._removed_nodes_by_arc_consistency, layer_index, rng)

    def sample_removed_nodes(self, nodes, layer_index, rng=None):
        self.check_trained()
        if not 0 <= layer_index < len(nodes):
            raise IndexError(f"layer index {layer_index} out of range [0, {len(nodes)})")
        if rng is None:
            rng = self.rng
        layer_nodes = nodes[layer_index]
        if not layer_nodes:
            return None
        return layer_nodes[rng.integers(len(layer_nodes))]

    def show_structure(self):
        self.check_trained()
        print(f"markov order: {self._markov_order}")
        print(f"training sequences: {len(self._training_sequences)}")
        print(f"sentence length: {self._sentence_length}")
        print(f"transition matrices sizes: {self.get_transition_matrices_sizes()}")
