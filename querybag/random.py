import numpy as np

from .base import ScoredQuerySampler
from .typeutils import RandomStateType


class RandomSampler(ScoredQuerySampler):
    """Randomly select samples

    This is the passive learning baseline: labeling samples drawn at random
    is what active learning should beat.

    Args:
        batch_size : Number of samples to select.
        random_state : The seed of the pseudo random number generator. If int,
            random_state is the seed used by the random number generator; If
            RandomState instance, random_state is the random number generator;
            If None (default), the random number generator is the RandomState
            instance used by `np.random`.
    """

    def __init__(self, batch_size: int, random_state: RandomStateType = None):
        super().__init__(batch_size=batch_size, random_state=random_state)

    def fit(self, X: np.array = None, y: np.array = None) -> 'RandomSampler':
        """Does nothing, random sampling ignores labeled data."""
        return self

    def score_samples(self, X: np.array) -> np.array:
        return self.random_state.rand(X.shape[0])
