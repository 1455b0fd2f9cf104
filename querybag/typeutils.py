from typing import Union
import numpy as np


RandomStateType = Union[np.random.RandomState, int, None]


def check_random_state(seed: RandomStateType):
    """Turn seed into a np.random.RandomState instance

    Args:
    seed : If seed is None, return the RandomState singleton used by np.random.
        If seed is an int, return a new RandomState instance seeded with seed.
        If seed is already a RandomState instance, return it.

    Note
    ----
    This was taken from scikit-learn and slightly modified
    """
    if isinstance(seed, (int, np.integer)):
        return np.random.RandomState(seed)
    if isinstance(seed, np.random.RandomState):
        return seed
    return np.random.mtrand._rand


class NotEnoughSamplesWarning(UserWarning):
    """Custom warning used when a sampler is given less than batch_size samples
    """


class EmptyPartitionError(ValueError):
    """Raised when the labeled or the unlabeled partition of a dataset is empty
    """


class InvalidConfigurationError(ValueError):
    """Raised when a sampler or a committee is given unusable parameters
    """


class TrainingError(RuntimeError):
    """Raised when a committee member could not be trained

    The original exception is available as ``__cause__``.
    """


def _has_method(obj, method):
    return hasattr(obj, method) and callable(getattr(obj, method))


def check_estimator(obj, use_proba: bool = True):
    """Checks that an object exposes the scikit-learn methods we rely on.

    Args:
        obj: The estimator to check.
        use_proba: If True, ``predict_proba`` is required, otherwise
            ``predict`` is.

    Raises:
        TypeError: If a required method is missing.
    """
    predict_name = 'predict_proba' if use_proba else 'predict'
    package = obj.__class__.__module__.split('.')[0]

    if _has_method(obj, 'fit') and _has_method(obj, predict_name):
        return

    origin = "object from package " + package

    if package == "__main__":
        origin = "user-defined object"

    raise TypeError('Provided {} does not have required methods fit and {}.'
                    ''.format(origin, predict_name))
