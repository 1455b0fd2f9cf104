"""Committee disagreement measures.

All measures take the predictions of the C members of a committee on N
samples and return one non-negative score per sample. Probabilities are
given as an array of shape (C, N, K), votes as an array of shape (C, N).
Natural logarithms are used throughout.

Formulae follow B. Settles, "Active Learning Literature Survey", 2009.
"""
from enum import Enum

import numpy as np
from scipy.special import rel_entr
from scipy.stats import entropy

from .typeutils import InvalidConfigurationError


class Disagreement(Enum):
    """Available committee disagreement measures."""

    KULLBACK = 'kullback'
    VOTE_ENTROPY = 'vote_entropy'
    POST_ENTROPY = 'post_entropy'

    @classmethod
    def parse(cls, value) -> 'Disagreement':
        """Returns the measure designated by a member or its name."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise InvalidConfigurationError(
                'Unknown disagreement measure {!r}, expected one of {}'.format(
                    value, ', '.join(m.value for m in cls))) from None

    @property
    def needs_votes(self) -> bool:
        return self is Disagreement.VOTE_ENTROPY


def check_committee_size(n_members: int):
    if n_members < 2:
        raise InvalidConfigurationError(
            'A committee needs at least 2 members to disagree, got {}'
            .format(n_members))


def _check_probas(probas) -> np.ndarray:
    probas = np.asarray(probas, dtype=float)
    if probas.ndim != 3:
        raise ValueError('Expected probabilities of shape (n_members, '
                         'n_samples, n_classes), got {}'.format(probas.shape))
    return probas


def votes_from_probas(probas: np.ndarray, classes: np.ndarray) -> np.ndarray:
    """Turns member probabilities into member votes (most probable class)."""
    probas = _check_probas(probas)
    return np.asarray(classes)[np.argmax(probas, axis=2)]


def probas_from_votes(votes: np.ndarray, classes: np.ndarray) -> np.ndarray:
    """Turns member votes into degenerate one-hot probabilities."""
    votes = np.asarray(votes)
    probas = (votes[:, :, None] == np.asarray(classes)[None, None, :])
    if votes.size and not probas.any(axis=2).all():
        raise ValueError('Some votes are not among the classes {}'
                         .format(classes))
    return probas.astype(float)


def kullback_score(probas: np.ndarray) -> np.ndarray:
    """Average Kullback-Leibler divergence of members to the consensus.

    The consensus is the mean of the member distributions. Terms where a
    member gives a null probability contribute 0, which also covers classes
    for which the consensus is null.

    Args:
        probas: Member probabilities of shape (n_members, n_samples, n_classes).

    Returns:
        The score of each sample.
    """
    probas = _check_probas(probas)
    consensus = probas.mean(axis=0)
    divergences = rel_entr(probas, consensus[None, :, :]).sum(axis=2)
    # Rounding can produce tiny negative values on identical members
    return np.maximum(divergences.mean(axis=0), 0.)


def vote_entropy_score(votes: np.ndarray, classes: np.ndarray = None) -> np.ndarray:
    """Entropy of the distribution of the members votes.

    Args:
        votes: Member labels of shape (n_members, n_samples).
        classes: Possible labels. Defaults to the labels found in votes.

    Returns:
        The score of each sample, 0 if all members agree and log(n_classes)
        if votes are evenly split.
    """
    votes = np.asarray(votes)
    if votes.ndim != 2:
        raise ValueError('Expected votes of shape (n_members, n_samples), '
                         'got {}'.format(votes.shape))
    if votes.shape[1] == 0:
        return np.zeros(0)
    if classes is None:
        classes = np.unique(votes)

    shares = probas_from_votes(votes, classes).mean(axis=0)
    return np.transpose(entropy(np.transpose(shares)))


def post_entropy_score(probas: np.ndarray) -> np.ndarray:
    """Entropy of the posterior averaged over the committee.

    Args:
        probas: Member probabilities of shape (n_members, n_samples, n_classes).

    Returns:
        The score of each sample.
    """
    probas = _check_probas(probas)
    if probas.shape[1] == 0:
        return np.zeros(0)
    consensus = probas.mean(axis=0)
    return np.transpose(entropy(np.transpose(consensus)))


def disagreement_score(measure, predictions: np.ndarray,
                       classes: np.ndarray = None) -> np.ndarray:
    """Scores samples with the given disagreement measure.

    Args:
        measure: A Disagreement or its name.
        predictions: Member votes of shape (n_members, n_samples) for vote
            entropy, member probabilities of shape (n_members, n_samples,
            n_classes) otherwise. Probabilities given to vote entropy are
            turned into votes, votes given to the other measures into
            one-hot probabilities.
        classes: Classes matching the last axis of probabilities, or the
            possible votes. Required when predictions must be converted.

    Returns:
        The disagreement score of each sample.
    """
    measure = Disagreement.parse(measure)
    predictions = np.asarray(predictions)
    check_committee_size(predictions.shape[0])

    if measure.needs_votes:
        if predictions.ndim == 3:
            if classes is None:
                classes = np.arange(predictions.shape[2])
            predictions = votes_from_probas(predictions, classes)
        return vote_entropy_score(predictions, classes)

    if predictions.ndim == 2:
        if classes is None:
            classes = np.unique(predictions)
        predictions = probas_from_votes(predictions, classes)

    if measure is Disagreement.KULLBACK:
        return kullback_score(predictions)
    elif measure is Disagreement.POST_ENTROPY:
        return post_entropy_score(predictions)
