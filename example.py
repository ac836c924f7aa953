import logging

from nhmm.constrained_markov import ConstrainedMarkovModel
from nhmm.constraints import PositionConstraint
from nhmm.markov import MarkovModel

logging.basicConfig(level=logging.INFO)

# Initialize the source model with sentences of the same length
sentences = [
    "the cat sat down",
    "the dog ran away",
    "a cat ran down",
    "a dog sat still",
    "the bird flew away",
]
source = MarkovModel([s.split() for s in sentences], kmax=1)

# set positional constraints: one tag per word, None for any word
generator = ConstrainedMarkovModel(PositionConstraint(), seed=0)
generator.train(source, ["the", None, None, "away"])

# generate a few sentences with their probability
for sentence in generator.generate_sentences(5):
    print(" ".join(sentence), generator.get_sentence_probability(sentence))
print(f"{generator.get_total_solution_count()} possible sentences")
generator.show_structure()
