"""
Copyright (c) 2025 Ynosound.
All rights reserved.

See LICENSE file in the project root for full license information.
"""
import re

from nhmm.constrained_markov import ConstrainedMarkovModel
from nhmm.constraints import SyllableConstraint
from nhmm.errors import NoSolutionError
from nhmm.markov import MarkovModel

CORPUS = """
the quiet river runs into the morning light.
a yellow leaf falls over the silent water.
the old dog sleeps under the summer moon.
a cold wind moves across the empty garden.
the small bird sings above the sleeping city.
a bright star shines over the quiet harbor.
"""

if __name__ == '__main__':
    sentences = [re.findall(r"[a-z']+", line) for line in CORPUS.strip().splitlines()]
    length = 7
    # the model is trained on sentences of a single length
    sentences = [s[:length] for s in sentences if len(s) >= length]
    source = MarkovModel(sentences, kmax=1)
    nhmm = ConstrainedMarkovModel(SyllableConstraint(), seed=42)
    try:
        nhmm.train(source, [1, 2, 2, 1, None, None, 1])
    except NoSolutionError as e:
        print(f"no solution: {e}")
    else:
        print(f"{nhmm.get_total_solution_count()} lines of 7 words")
        for seq in nhmm.generate_sentences(10):
            print(' '.join(seq))
        for i in range(1, nhmm.sentence_length):
            print(f"layer {i}: removed by constraint {nhmm.sample_removed_node_by_constraint(i)}, "
                  f"by arc consistency {nhmm.sample_removed_node_by_arc_consistency(i)}")
