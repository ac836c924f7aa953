"""
Copyright (c) 2025 Ynosound.
All rights reserved.

See LICENSE file in the project root for full license information.
"""
import logging
from collections import Counter

import numpy as np

logger = logging.getLogger(__name__)


class _Start_padding:
    def __repr__(self):
        return "<start>"


class _End_padding:
    def __repr__(self):
        return "<end>"


class MarkovModel:
    """Unconstrained variable-order Markov model over symbol sequences.

    This is the upstream collaborator of the constrained model: it keeps the
    training sequences and the contexts of size 1 to kmax with their
    continuations. Contexts are tuples of symbols, continuations are symbols
    (repeated, so that a uniform pick respects frequencies).
    """

    def __init__(self, sequences=None, kmax=1):
        if kmax < 1:
            raise ValueError(f"kmax must be at least 1, got {kmax}")
        self.start_padding = _Start_padding()
        self.end_padding = _End_padding()
        self.kmax = kmax
        self.clear_memory()
        if sequences is not None:
            for seq in sequences:
                self.learn_sequence(seq)

    @property
    def markov_order(self):
        return self.kmax

    def clear_memory(self):
        self.input_sequences = []
        self.all_unique_symbols = []
        self.prefixes_to_continuations = [{} for _ in range(self.kmax)]

    def learn_sequence(self, sequence):
        sequence = list(sequence)
        if len(sequence) == 0:
            logger.warning("ignoring empty training sequence")
            return
        self.input_sequences.append(sequence)
        self.build_vo_markov_model(sequence)

    def build_vo_markov_model(self, real_sequence):
        """Builds a variable-order Markov model for max K order
        accumulates with existing model"""
        padded = [self.start_padding] + real_sequence + [self.end_padding]
        for symbol in padded:
            if symbol not in self.all_unique_symbols:
                self.all_unique_symbols.append(symbol)
        # contexts of size k + 1 to their continuations
        for k in range(self.kmax):
            prefixes_to_cont_k = self.prefixes_to_continuations[k]
            for i in range(k + 1, len(padded)):
                current_ctx = tuple(padded[i - k - 1: i])
                prefixes_to_cont_k.setdefault(current_ctx, []).append(padded[i])
        # end has no continuation, but goes to end for consistency
        self.prefixes_to_continuations[0].setdefault((self.end_padding,), [self.end_padding])

    def get_training_sequences(self):
        return [list(seq) for seq in self.input_sequences]

    def voc_size(self):
        # the number of unique symbols, including start and end paddings
        return len(self.all_unique_symbols)

    def get_all_unique_symbols(self):
        return self.all_unique_symbols

    def get_all_unique_symbols_except_paddings(self):
        return [s for s in self.all_unique_symbols if s is not self.start_padding and s is not self.end_padding]

    def get_transition_counts(self):
        """First order counts symbol -> next symbol -> count, without paddings."""
        counts = {}
        for ctx, conts in self.prefixes_to_continuations[0].items():
            word = ctx[0]
            if word is self.start_padding or word is self.end_padding:
                continue
            for next_word, n in Counter(conts).items():
                if next_word is self.end_padding:
                    continue
                counts.setdefault(word, {})[next_word] = float(n)
        return counts

    def get_first_order_matrix(self):
        # all states, including start and end paddings
        keys = self.get_all_unique_symbols()
        result = np.zeros((len(keys), len(keys)))
        k0 = self.prefixes_to_continuations[0]
        for i_s, s in enumerate(keys):
            occurrences = Counter(k0.get((s,), []))
            for s2, n in occurrences.items():
                result[i_s, keys.index(s2)] = n
            total = result[i_s].sum()
            if total > 0:
                result[i_s] /= total
        return result

    def get_priors(self):
        # unigram priors of all symbols except paddings, in get_all_unique_symbols_except_paddings() order
        counts = Counter(s for seq in self.input_sequences for s in seq)
        keys = self.get_all_unique_symbols_except_paddings()
        priors = np.array([counts[k] for k in keys], dtype=float)
        return priors / priors.sum()

    def get_continuation(self, current_seq, rng):
        # longest known context first
        for k in range(self.kmax, 0, -1):
            if k > len(current_seq):
                continue
            ctx = tuple(current_seq[-k:])
            conts = self.prefixes_to_continuations[k - 1].get(ctx)
            if conts:
                return conts[rng.integers(len(conts))]
        return None

    def sample_sequence(self, max_length=50, rng=None):
        """Unconstrained random walk from the start padding, without paddings in the result."""
        if len(self.input_sequences) == 0:
            return None
        if rng is None:
            rng = np.random.default_rng()
        current_seq = [self.start_padding]
        while len(current_seq) <= max_length:
            cont = self.get_continuation(current_seq, rng)
            if cont is None or cont is self.end_padding:
                break
            current_seq.append(cont)
        return current_seq[1:]

    def show_conts_structure(self):
        for k in range(self.kmax):
            print(f"size of contexts of size {k + 1}: {len(self.prefixes_to_continuations[k])}")
        order1 = self.prefixes_to_continuations[0]
        sizes = [len(set(conts)) for conts in order1.values()]
        print(f"voc size: {self.voc_size()}")
        if sizes:
            print(f"min order 1 size: {min(sizes)}, max: {max(sizes)}")
