"""Tests for the unconstrained source model."""

import numpy as np
import pytest

from nhmm.markov import MarkovModel


@pytest.fixture
def source():
    return MarkovModel([["a", "b", "c"], ["a", "c"]], kmax=2)


class TestLearning:
    """Tests for learning sequences."""

    def test_markov_order_is_kmax(self, source):
        """The markov order is the maximum context size."""
        assert source.markov_order == 2

    def test_vocabulary_includes_paddings(self, source):
        """Start and end paddings count as symbols."""
        assert source.voc_size() == 5
        assert source.get_all_unique_symbols_except_paddings() == ["a", "b", "c"]

    def test_contexts_of_each_size(self, source):
        """Contexts of size 2 include the start padding."""
        assert source.prefixes_to_continuations[1][(source.start_padding, "a")] == ["b", "c"]
        assert source.prefixes_to_continuations[0][("c",)] == [source.end_padding, source.end_padding]

    def test_empty_sequence_is_ignored(self, source):
        """Learning an empty sequence changes nothing."""
        source.learn_sequence([])
        assert len(source.get_training_sequences()) == 2

    def test_invalid_kmax(self):
        """The order must be at least 1."""
        with pytest.raises(ValueError):
            MarkovModel(kmax=0)

    def test_clear_memory(self, source):
        """Clearing forgets sequences and contexts."""
        source.clear_memory()
        assert source.get_training_sequences() == []
        assert source.voc_size() == 0
        assert source.sample_sequence() is None

    def test_training_sequences_are_copies(self, source):
        """Callers cannot alter the training sequences."""
        source.get_training_sequences()[0].append("z")
        assert source.get_training_sequences()[0] == ["a", "b", "c"]


class TestStatistics:
    """Tests for the aggregated statistics."""

    def test_transition_counts_exclude_paddings(self, source):
        """First order counts only relate real symbols."""
        assert source.get_transition_counts() == {"a": {"b": 1.0, "c": 1.0}, "b": {"c": 1.0}}

    def test_first_order_matrix_is_stochastic(self, source):
        """Every row of the first order matrix sums to 1."""
        matrix = source.get_first_order_matrix()
        assert matrix.shape == (5, 5)
        assert np.allclose(matrix.sum(axis=1), 1.0)

    def test_priors(self, source):
        """Priors are the unigram frequencies."""
        assert np.allclose(source.get_priors(), [0.4, 0.2, 0.4])

    def test_show_conts_structure(self, source, capsys):
        """Prints context table sizes and vocabulary size."""
        source.show_conts_structure()
        out = capsys.readouterr().out
        assert "size of contexts of size 1: 5" in out
        assert "size of contexts of size 2: 4" in out
        assert "voc size: 5" in out
        assert "min order 1 size: 1, max: 2" in out


class TestSampling:
    """Tests for unconstrained sampling."""

    def test_sample_reproduces_training_paths(self, source):
        """With order 2 every sampled sequence is a training sequence here."""
        rng = np.random.default_rng(0)
        for _ in range(20):
            assert source.sample_sequence(rng=rng) in (["a", "b", "c"], ["a", "c"])

    def test_sample_respects_max_length(self):
        """A looping model stops at max_length."""
        source = MarkovModel([["a", "a", "a", "a"]])
        seq = source.sample_sequence(max_length=3, rng=np.random.default_rng(3))
        assert len(seq) <= 3
