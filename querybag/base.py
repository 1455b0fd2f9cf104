from abc import ABC, abstractmethod
from warnings import warn

import numpy as np

from .typeutils import (RandomStateType, check_random_state,
                        NotEnoughSamplesWarning, InvalidConfigurationError)


def top_indices(scores: np.ndarray, num_query: int) -> np.ndarray:
    """Ranks samples by decreasing score and keeps the first ones.

    Ties are broken by the order in which samples are given: among equal
    scores, the lowest index comes first.

    Args:
        scores: Score of each sample, of shape (n_samples,).
        num_query: Number of indices to return. If it exceeds the number of
            samples, all samples are returned ranked. If it is zero or
            negative, nothing is returned.

    Returns:
        Indices of the selected samples, highest score first.
    """
    scores = np.asarray(scores, dtype=float)
    if num_query <= 0:
        return np.array([], dtype=int)
    # Stable sort on negated scores keeps original order among ties
    order = np.argsort(-scores, kind='stable')
    return order[:num_query]


class BaseQuerySampler(ABC):
    """Abstract Base Class for query samplers

    A query sampler is an object that takes as input labeled and/or unlabeled
    samples and use knowledge from them to selected the most informative ones.

    Args:
        batch_size: Numbers of samples to select.
    """
    def __init__(self, batch_size: int):
        self.batch_size = batch_size

    @abstractmethod
    def fit(self, X: np.ndarray, y: np.ndarray = None):
        """Fit the model on labeled samples.

        Args:
            X: Labeled samples of shape (n_samples, n_features).
            y: Labels of shape (n_samples).

        Returns:
            The object itself
        """
        pass

    @abstractmethod
    def select_samples(self, X: np.array) -> np.array:
        """Selects the samples to annotate from unlabeled data.

        Args:
            X: Pool of unlabeled samples of shape (n_samples, n_features).

        Returns:
            Indices of the selected samples of shape (batch_size).
        """
        pass

    def _not_enough_samples(self, X: np.array) -> bool:
        cond = X.shape[0] < self.batch_size
        if cond:
            warn(f'''Requested {self.batch_size} samples but data only
             has {X.shape[0]}. All available data will be returned''',
                 NotEnoughSamplesWarning)
        return cond


class ScoredQuerySampler(BaseQuerySampler):
    """Abstract Base Class handling query samplers relying on a total order.
    Query sampling methods often scores all the samples and then pick samples
    using these scores. This base class handles the selection system, only
    a scoring method is then required.

    Args:
        batch_size: Numbers of samples to select.
        strategy: Describes how to select the samples based on scores. Can be
                  "top", "weighted".
        random_state: Random seeding
    """
    def __init__(self, batch_size: int, strategy: str = 'top',
                 random_state: RandomStateType = None):
        super().__init__(batch_size)
        if strategy not in ('top', 'weighted'):
            raise InvalidConfigurationError(
                'Unknown sample selection strategy {}'.format(strategy))
        self.strategy = strategy
        self.random_state = check_random_state(random_state)

    @abstractmethod
    def score_samples(self, X: np.array) -> np.array:
        """Give an informativeness score to unlabeled samples.

        Args:
            X: Samples to evaluate.

        Returns:
            Scores of the samples.
        """
        pass

    def select_samples(self, X: np.array) -> np.array:
        """Selects the samples from unlabeled data using the internal scoring.

        With the "top" strategy, samples are returned by decreasing score
        and ties are resolved in favor of the earliest sample. If the pool
        holds fewer samples than requested, every sample is returned ranked.

        Args:
            X: Pool of unlabeled samples of shape (n_samples, n_features).

        Returns:
            Indices of the selected samples, at most batch_size of them.
        """
        sample_scores = self.score_samples(X)
        self.sample_scores_ = sample_scores

        if self._not_enough_samples(X) or self.strategy == 'top':
            return top_indices(sample_scores, self.batch_size)

        if self.batch_size <= 0:
            return np.array([], dtype=int)
        # Weighted draw needs at least batch_size non-zero scores
        total = np.sum(sample_scores)
        if np.count_nonzero(sample_scores) < self.batch_size or total <= 0:
            return top_indices(sample_scores, self.batch_size)
        return self.random_state.choice(
            np.arange(X.shape[0]), size=self.batch_size,
            replace=False, p=sample_scores / total)
