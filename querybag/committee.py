import logging
import warnings

import numpy as np

from .version import check_modules
check_modules(import_module='committee')  # noqa

from joblib import Parallel, delayed
from sklearn.utils import resample

from .base import ScoredQuerySampler
from .classifier import FunctionClassifier, as_classifier
from .disagreement import (Disagreement, check_committee_size,
                           disagreement_score, probas_from_votes)
from .typeutils import (RandomStateType, check_random_state,
                        NotEnoughSamplesWarning, TrainingError)
from .utils import MISSING_LABEL, split_labeled


logger = logging.getLogger(__name__)


def align_proba(proba: np.ndarray, model_classes: np.ndarray,
                classes: np.ndarray) -> np.ndarray:
    """Reorders probability columns along a reference set of classes.

    Classes unknown to the model get a null probability.

    Args:
        proba: Probabilities of shape (n_samples, n_model_classes).
        model_classes: Classes of the columns of proba.
        classes: Sorted reference classes.

    Returns:
        Probabilities of shape (n_samples, n_classes).
    """
    proba = np.asarray(proba, dtype=float)
    model_classes = np.asarray(model_classes)
    classes = np.asarray(classes)
    if proba.shape[1] != model_classes.shape[0]:
        raise ValueError('Got {} probability columns for {} classes'.format(
            proba.shape[1], model_classes.shape[0]))

    positions = np.searchsorted(classes, model_classes)
    clipped = np.minimum(positions, classes.shape[0] - 1)
    if (positions >= classes.shape[0]).any() or \
            (classes[clipped] != model_classes).any():
        raise ValueError('Model classes {} are not among the committee '
                         'classes {}'.format(model_classes, classes))

    aligned = np.zeros((proba.shape[0], classes.shape[0]))
    aligned[:, positions] = proba
    return aligned


def _fit_member(classifier, X, y, seed, fit_params):
    X_boot, y_boot = resample(X, y, replace=True, n_samples=X.shape[0],
                              random_state=seed)
    model = classifier.train(X_boot, y_boot, **fit_params)
    logger.debug('Committee member trained with seed %d on %d classes',
                 seed, np.unique(y_boot).shape[0])
    return model, np.unique(y_boot)


class BaggingCommittee():
    """Committee of models trained on bootstrap resamples of the same data.

    Every member is trained on a resample, drawn with replacement, of the
    size of the labeled set. Members are trained in parallel and seeded
    from random_state so that the committee does not depend on scheduling.

    Parameters:
        classifier: A `Classifier`, or an estimator complying with
            scikit-learn interface.
        n_members: Number of committee members, at least 2.
        n_jobs: Number of jobs used to train members, see joblib.Parallel.
        random_state: Random seeding of the resamples.
        verbose: The verbosity level. Defaults to 0.

    Attributes:
        estimators_: Models of the committee.
        classes_: Sorted classes of the labeled samples. Member predictions
            are given along these classes.
    """
    def __init__(self, classifier, n_members: int = 50, n_jobs: int = None,
                 random_state: RandomStateType = None, verbose: int = 0):
        check_committee_size(n_members)
        self.classifier_ = as_classifier(classifier)
        self.n_members = n_members
        self.n_jobs = n_jobs
        self.random_state = random_state
        self.verbose = verbose

    def fit(self, X: np.array, y: np.array, **fit_params) -> 'BaggingCommittee':
        """Trains the committee members.

        Args:
            X: Labeled samples of shape (n_samples, n_features).
            y: Labels of shape (n_samples).
            fit_params: Passed to the training of every member.

        Returns:
            The object itself

        Raises:
            TrainingError: If any member fails to train.
        """
        X = np.asarray(X)
        y = np.asarray(y)
        if X.shape[0] == 0:
            raise ValueError('Cannot train a committee without samples')

        self.classes_ = np.unique(y)
        random_state = check_random_state(self.random_state)
        seeds = random_state.randint(np.iinfo(np.int32).max,
                                     size=self.n_members)

        try:
            members = Parallel(n_jobs=self.n_jobs, verbose=self.verbose)(
                delayed(_fit_member)(self.classifier_, X, y, seed, fit_params)
                for seed in seeds)
        except Exception as exc:
            raise TrainingError(
                'The following error occurred while training the bagged '
                'classifiers:\n{}'.format(exc)) from exc

        self.estimators_ = [model for model, _ in members]
        self._resample_classes = [classes for _, classes in members]
        logger.info('Trained a committee of %d members on %d samples',
                    self.n_members, X.shape[0])
        return self

    def _member_proba(self, i: int, output: np.ndarray) -> np.ndarray:
        if output.ndim == 1:
            return probas_from_votes(output[None, :], self.classes_)[0]

        model_classes = self.classifier_.classes_of(self.estimators_[i])
        if model_classes is None:
            # Without explicit classes, columns follow the resample classes
            # or, failing that, the committee classes
            model_classes = self._resample_classes[i]
            if output.shape[1] != model_classes.shape[0]:
                model_classes = self.classes_
        return align_proba(output, model_classes, self.classes_)

    def predict_proba(self, X: np.array) -> np.array:
        """Class probabilities predicted by each member.

        Members that only predict labels give one-hot probabilities.

        Args:
            X: Samples of shape (n_samples, n_features).

        Returns:
            Probabilities of shape (n_members, n_samples, n_classes).
        """
        return np.stack([
            self._member_proba(i, np.asarray(self.classifier_.infer(model, X)))
            for i, model in enumerate(self.estimators_)])

    def predict_labels(self, X: np.array) -> np.array:
        """Labels predicted by each member.

        Members that predict probabilities vote for their most probable class.

        Args:
            X: Samples of shape (n_samples, n_features).

        Returns:
            Labels of shape (n_members, n_samples).
        """
        votes = []
        for i, model in enumerate(self.estimators_):
            output = np.asarray(self.classifier_.infer(model, X))
            if output.ndim == 1:
                votes.append(output)
            else:
                proba = self._member_proba(i, output)
                votes.append(self.classes_[np.argmax(proba, axis=1)])
        return np.stack(votes)


class QueryByBaggingSampler(ScoredQuerySampler):
    """Selects samples on which a bagged committee disagrees the most.

    A committee of classifiers is trained on bootstrap resamples of the
    labeled data. Unlabeled samples are scored with one of the measures:

    * ``kullback``: mean Kullback-Leibler divergence between the class
      distribution of each member and the consensus,
    * ``vote_entropy``: entropy of the members votes,
    * ``post_entropy``: entropy of the averaged class distribution.

    Parameters:
        classifier: A `Classifier`, or an estimator complying with
            scikit-learn interface.
        batch_size: Number of samples to draw when predicting.
        disagreement: Disagreement measure, a `Disagreement` or its name.
        n_members: Number of committee members, at least 2.
        strategy: Selection strategy, "top" or "weighted".
        n_jobs: Number of jobs used to train members.
        random_state: Random seeding.
        verbose: The verbosity level. Defaults to 0.

    Attributes:
        committee_: The bagging committee.
    """
    def __init__(self, classifier, batch_size: int,
                 disagreement='kullback', n_members: int = 50,
                 strategy: str = 'top', n_jobs: int = None,
                 random_state: RandomStateType = None, verbose: int = 0):
        super().__init__(batch_size, strategy=strategy,
                         random_state=random_state)
        self.disagreement = Disagreement.parse(disagreement)
        self.committee_ = BaggingCommittee(
            classifier, n_members=n_members, n_jobs=n_jobs,
            random_state=random_state, verbose=verbose)

    def fit(self, X: np.array, y: np.array,
            **fit_params) -> 'QueryByBaggingSampler':
        """Train the committee on labeled samples.

        Args:
            X: Labeled samples of shape (n_samples, n_features).
            y: Labels of shape (n_samples).

        Returns:
            The object itself
        """
        self.committee_.fit(X, y, **fit_params)
        return self

    def score_samples(self, X: np.array) -> np.array:
        """Disagreement of the committee on each sample.

        Args:
            X: shape (n_samples, n_features), Samples to evaluate.

        Returns:
            The non-negative disagreement score of each sample.
        """
        if self.disagreement.needs_votes:
            predictions = self.committee_.predict_labels(X)
        else:
            predictions = self.committee_.predict_proba(X)
        return disagreement_score(self.disagreement, predictions,
                                  self.committee_.classes_)


def query_bagging(X, y, fit, predict, disagreement='kullback',
                  num_query: int = 1, C: int = 50, n_jobs: int = None,
                  random_state: RandomStateType = None,
                  missing_label=MISSING_LABEL, verbose: int = 0,
                  **fit_params) -> dict:
    """Active learning with "query by bagging".

    Trains a committee of C classifiers on bootstrap resamples of the
    labeled observations and asks the oracle about the unlabeled
    observations on which the committee disagrees the most. Ties are
    broken by the order of the unlabeled observations.

    Args:
        X: Labeled and unlabeled observations of shape (n_samples, n_features).
        y: Labels of shape (n_samples), missing_label marks unlabeled rows.
        fit: Function called as ``fit(X, y, **fit_params)`` returning a model.
        predict: Function called as ``predict(model, X)`` returning labels or
            class probabilities.
        disagreement: One of "kullback", "vote_entropy", "post_entropy".
        num_query: Number of observations to query.
        C: Number of committee members.
        n_jobs: Number of jobs used to train the committee.
        random_state: Random seeding of the resamples.
        missing_label: Marker of unlabeled entries in y.
        verbose: The verbosity level. Defaults to 0.
        fit_params: Passed to fit.

    Returns:
        A dict with ``query``, the indices among unlabeled observations to
        label, most disagreed first, and ``disagreement``, the score of
        every unlabeled observation.

    Raises:
        InvalidConfigurationError: If disagreement is unknown or C < 2.
        EmptyPartitionError: If no observation is labeled or unlabeled.
        TrainingError: If a committee member cannot be trained.
    """
    disagreement = Disagreement.parse(disagreement)
    check_committee_size(C)
    X_labeled, y_labeled, X_unlabeled = split_labeled(X, y, missing_label)

    sampler = QueryByBaggingSampler(
        FunctionClassifier(fit, predict), num_query,
        disagreement=disagreement, n_members=C, n_jobs=n_jobs,
        random_state=random_state, verbose=verbose)
    sampler.fit(X_labeled, y_labeled, **fit_params)

    with warnings.catch_warnings():
        # Asking for more than available returns everything ranked
        warnings.simplefilter('ignore', NotEnoughSamplesWarning)
        query = sampler.select_samples(X_unlabeled)

    return {'query': query, 'disagreement': sampler.sample_scores_}


query_by_bagging = query_bagging
