"""
Copyright (c) 2025 Ynosound.
All rights reserved.

See LICENSE file in the project root for full license information.
"""
from nhmm.constrained_markov import ConstrainedMarkovModel
from nhmm.constraints import RhymeConstraint
from nhmm.markov import MarkovModel

if __name__ == '__main__':
    # lines ending with a word rhyming with "night"
    train_seqs = [
        "i saw the light", "we ran all night", "you held me tight",
        "the stars burn bright", "we lost the fight", "i saw you smile",
    ]
    source = MarkovModel([s.split() for s in train_seqs], kmax=1)
    source.show_conts_structure()
    print("unconstrained:", ' '.join(source.sample_sequence(10)))
    nhmm = ConstrainedMarkovModel(RhymeConstraint())
    nhmm.train(source, [None, None, None, "night"])
    for seq in nhmm.generate_sentences(5):
        print(' '.join(seq), nhmm.get_sentence_probability(seq))
