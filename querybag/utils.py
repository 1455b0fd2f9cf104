import logging

import numpy as np

from .typeutils import EmptyPartitionError


logger = logging.getLogger(__name__)

MISSING_LABEL = np.nan


def _is_nan_like(value) -> bool:
    if value is None:
        return True
    return isinstance(value, (float, np.floating)) and np.isnan(value)


def is_missing(y, missing_label=MISSING_LABEL) -> np.ndarray:
    """Finds the entries of a label vector that carry no label.

    Args:
        y: Labels of shape (n_samples).
        missing_label: Marker of unlabeled entries. With NaN (default) or
            None, both NaN and None entries are considered missing.

    Returns:
        Boolean mask of shape (n_samples), True where the label is missing.
    """
    y = _as_label_input(y)
    if not _is_nan_like(missing_label):
        mask = np.asarray(y == missing_label, dtype=bool)
        return np.broadcast_to(mask, y.shape).copy()
    if y.dtype.kind == 'f':
        return np.isnan(y)
    if y.dtype.kind == 'O':
        return np.array([_is_nan_like(v) for v in y], dtype=bool)
    return np.zeros(y.shape, dtype=bool)


def _as_label_input(y) -> np.ndarray:
    # Coercing a list such as ['a', nan] to a string array turns nan into
    # 'nan', objects keep the missing markers intact
    if isinstance(y, np.ndarray):
        return y
    return np.array(y, dtype=object)


def _as_label_array(y: np.ndarray) -> np.ndarray:
    # Object arrays coming from mixed labels/None get their natural dtype back
    if y.dtype.kind == 'O':
        return np.asarray(y.tolist())
    return y


def split_labeled(X, y, missing_label=MISSING_LABEL):
    """Splits a dataset between its labeled and unlabeled observations.

    Row order is preserved on both sides.

    Args:
        X: Observations of shape (n_samples, n_features).
        y: Labels of shape (n_samples), missing_label marks unlabeled rows.
        missing_label: Marker of unlabeled entries.

    Returns:
        A tuple (X_labeled, y_labeled, X_unlabeled).

    Raises:
        EmptyPartitionError: If no row is labeled or no row is unlabeled.
    """
    X = np.asarray(X)
    y = _as_label_input(y)
    if X.shape[0] != y.shape[0]:
        raise ValueError('X and y must have the same number of samples, '
                         'got {} and {}'.format(X.shape[0], y.shape[0]))

    missing = is_missing(y, missing_label)
    if missing.all():
        raise EmptyPartitionError('No labeled observation, the committee '
                                  'cannot be trained')
    if not missing.any():
        raise EmptyPartitionError('No unlabeled observation, there is '
                                  'nothing to query')

    return X[~missing], _as_label_array(y[~missing]), X[missing]


class LabelingSession():
    """Keeps track of the labels gathered along an active learning loop.

    Observations that are labeled at creation belong to iteration 0, each
    call to `label` opens a new iteration.

    Args:
        X: Observations of shape (n_samples, n_features).
        y: Labels of shape (n_samples), missing_label marks unlabeled rows.
        missing_label: Marker of unlabeled entries.
    """

    UNLABELED = -1

    def __init__(self, X, y, missing_label=MISSING_LABEL):
        self.X = np.asarray(X)
        y = _as_label_input(y)
        if self.X.shape[0] != y.shape[0]:
            raise ValueError('X and y must have the same number of samples, '
                             'got {} and {}'.format(self.X.shape[0], y.shape[0]))
        self.missing_label = missing_label
        self._y = y.astype(object)
        self._mask = np.full(y.shape[0], self.UNLABELED, dtype=int)
        self._mask[~is_missing(y, missing_label)] = 0
        self.current_iter = 0

    # Accessors
    ###########

    @property
    def labeled(self):
        return self.labeled_at(None)

    def labeled_at(self, iter: int = None):
        """Get the samples labeled so far.

        Args:
            iter: Iteration of interest. Default (None) is the last one.

        Returns:
            A binary mask of the samples labeled until the given iteration.
        """
        index = (self._mask != self.UNLABELED)
        if iter is not None:
            index = np.logical_and(index, self._mask <= iter)
        return index

    @property
    def unlabeled(self):
        return (self._mask == self.UNLABELED)

    def batch_at(self, iter: int):
        """Get the samples labeled at a given iteration.

        Returns:
            A binary mask of the batch samples.
        """
        batch_mask = (self._mask == iter)
        if iter > self.current_iter or not batch_mask.any():
            raise ValueError('No batch was labeled at iteration {}'
                             .format(iter))
        return batch_mask

    @property
    def y(self):
        return self._y.copy()

    def get_labeled(self):
        labeled = self.labeled
        return self.X[labeled], _as_label_array(self._y[labeled])

    def get_unlabeled(self):
        return self.X[self.unlabeled]

    def dereference(self, indices):
        """Maps indices among unlabeled samples to indices in the dataset."""
        return np.where(self.unlabeled)[0][np.asarray(indices, dtype=int)]

    # Loop
    ######

    def query(self, sampler):
        """Asks a sampler which observations should be labeled next.

        Args:
            sampler: A query sampler, fitted here on the labeled samples.

        Returns:
            Indices in the whole dataset of the samples to label.
        """
        if not self.labeled.any() or not self.unlabeled.any():
            raise EmptyPartitionError(
                'Querying requires labeled and unlabeled samples, got {} '
                'and {}'.format(self.labeled.sum(), self.unlabeled.sum()))
        sampler.fit(*self.get_labeled())
        selected = sampler.select_samples(self.get_unlabeled())
        return self.dereference(selected)

    def label(self, indices, labels):
        """Records the labels given by the oracle.

        Args:
            indices: Indices in the whole dataset of the labeled samples.
            labels: The corresponding labels.
        """
        indices = np.asarray(indices, dtype=int).reshape(-1)
        labels = np.asarray(labels, dtype=object).reshape(-1)
        if indices.shape[0] != labels.shape[0]:
            raise ValueError('Got {} indices but {} labels'.format(
                indices.shape[0], labels.shape[0]))
        if indices.shape[0] == 0:
            raise ValueError('At least one sample must be labeled')
        if ((indices < 0) | (indices >= self._mask.shape[0])).any():
            raise ValueError('Indices must be in [0, {})'.format(
                self._mask.shape[0]))
        if np.unique(indices).shape[0] != indices.shape[0]:
            raise ValueError('Indices must not contain duplicates')
        if (self._mask[indices] != self.UNLABELED).any():
            raise ValueError('Some of the samples are already labeled')
        if is_missing(labels, self.missing_label).any():
            raise ValueError('Oracle labels must not be missing')

        self.current_iter += 1
        self._y[indices] = labels
        self._mask[indices] = self.current_iter
        logger.info('Iteration %d: %d samples labeled, %d left',
                    self.current_iter, indices.shape[0], self.unlabeled.sum())

    def step(self, sampler, oracle):
        """Runs one query / label round.

        Args:
            sampler: The query sampler.
            oracle: Callable returning the labels of the given indices.

        Returns:
            Indices of the samples labeled during this round.
        """
        indices = self.query(sampler)
        if indices.shape[0] > 0:
            self.label(indices, oracle(indices))
        return indices
