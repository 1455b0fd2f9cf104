import numpy as np
import pytest
from numpy.testing import assert_array_equal, assert_allclose
from sklearn.datasets import make_blobs
from sklearn.naive_bayes import GaussianNB

from querybag.classifier import (Classifier, FunctionClassifier,
                                 SklearnClassifier, as_classifier)
from querybag.committee import (BaggingCommittee, QueryByBaggingSampler,
                                align_proba, query_bagging)
from querybag.typeutils import (EmptyPartitionError,
                                InvalidConfigurationError, TrainingError)


def _partially_labeled(n_labeled_per_class=10, random_state=0):
    X, y = make_blobs(n_samples=60, centers=2, cluster_std=2.,
                      random_state=random_state)
    y = y.astype(float)
    labeled = np.concatenate([np.where(y == c)[0][:n_labeled_per_class]
                              for c in (0, 1)])
    y_partial = np.full(y.shape[0], np.nan)
    y_partial[labeled] = y[labeled]
    return X, y_partial


def fit_nb(X, y):
    return GaussianNB().fit(X, y)


def predict_proba_nb(model, X):
    return model.predict_proba(X)


def predict_nb(model, X):
    return model.predict(X)


def test_align_proba():
    classes = np.array(['a', 'b', 'c'])
    proba = np.array([[0.3, 0.7],
                      [1.0, 0.0]])

    # A resample lacking class 'b' gets a null column
    aligned = align_proba(proba, np.array(['a', 'c']), classes)
    assert_allclose(aligned, [[0.3, 0.0, 0.7],
                              [1.0, 0.0, 0.0]])

    with pytest.raises(ValueError):
        align_proba(proba, np.array(['a', 'd']), classes)
    with pytest.raises(ValueError):
        align_proba(proba, np.array(['a']), classes)


def test_committee_predictions():
    X, y = _partially_labeled()
    labeled = ~np.isnan(y)

    committee = BaggingCommittee(GaussianNB(), n_members=5, random_state=0)
    committee.fit(X[labeled], y[labeled])
    assert len(committee.estimators_) == 5
    assert_array_equal(committee.classes_, [0., 1.])

    proba = committee.predict_proba(X[~labeled])
    assert proba.shape == (5, 40, 2)
    assert_allclose(proba.sum(axis=2), 1.)

    votes = committee.predict_labels(X[~labeled])
    assert votes.shape == (5, 40)
    assert np.isin(votes, [0., 1.]).all()


def test_committee_label_only_members():
    X, y = _partially_labeled()
    labeled = ~np.isnan(y)

    committee = BaggingCommittee(FunctionClassifier(fit_nb, predict_nb),
                                 n_members=3, random_state=0)
    committee.fit(X[labeled], y[labeled])

    # Labels become one-hot probabilities
    proba = committee.predict_proba(X[~labeled])
    assert proba.shape == (3, 40, 2)
    assert np.isin(proba, [0., 1.]).all()
    assert_allclose(proba.sum(axis=2), 1.)


def test_committee_missing_class_in_resample():
    X = np.arange(12, dtype=float).reshape(6, 2)
    y = np.array([0, 0, 0, 0, 0, 1])

    class Majority:
        # Predicts the class frequencies of its resample, no classes_
        def __init__(self, y):
            self.labels, counts = np.unique(y, return_counts=True)
            self.freq = counts / counts.sum()

    committee = BaggingCommittee(
        FunctionClassifier(lambda X, y: Majority(y),
                           lambda m, X: np.tile(m.freq, (X.shape[0], 1))),
        n_members=20, random_state=0)
    committee.fit(X, y)

    proba = committee.predict_proba(X[:2])
    assert proba.shape == (20, 2, 2)
    assert_allclose(proba.sum(axis=2), 1.)
    # Some resamples miss the rare class, its column is then zero-filled
    missing = [1 not in classes for classes in committee._resample_classes]
    assert any(missing)
    assert_allclose(proba[np.array(missing), :, 1], 0.)


def test_committee_is_reproducible():
    X, y = _partially_labeled()
    labeled = ~np.isnan(y)

    probas = []
    for n_jobs in (1, 2):
        committee = BaggingCommittee(GaussianNB(), n_members=4, n_jobs=n_jobs,
                                     random_state=42)
        committee.fit(X[labeled], y[labeled])
        probas.append(committee.predict_proba(X[~labeled]))
    assert_allclose(probas[0], probas[1])


def test_committee_training_error():

    def failing_fit(X, y):
        raise ValueError('singular matrix')

    committee = BaggingCommittee(FunctionClassifier(failing_fit, predict_nb),
                                 n_members=3)
    with pytest.raises(TrainingError) as excinfo:
        committee.fit(np.zeros((4, 2)), np.array([0, 1, 0, 1]))
    assert 'singular matrix' in str(excinfo.value)
    assert isinstance(excinfo.value.__cause__, ValueError)


def test_committee_configuration():
    with pytest.raises(InvalidConfigurationError):
        BaggingCommittee(GaussianNB(), n_members=1)


class WithAllMethods:

    def fit(X, y=None):
        pass

    def predict_proba(X):
        pass


class MissingMethods:

    def fit(X, y=None):
        pass


def test_types():
    assert isinstance(as_classifier(WithAllMethods()), SklearnClassifier)
    classifier = FunctionClassifier(fit_nb, predict_nb)
    assert as_classifier(classifier) is classifier
    assert isinstance(classifier, Classifier)
    with pytest.raises(TypeError):
        as_classifier(MissingMethods())
    with pytest.raises(TypeError):
        FunctionClassifier(fit_nb, None)


@pytest.mark.parametrize('disagreement',
                         ['kullback', 'vote_entropy', 'post_entropy'])
def test_query_bagging(disagreement):
    X, y = _partially_labeled()

    result = query_bagging(X, y, fit_nb, predict_proba_nb,
                           disagreement=disagreement, num_query=5, C=10,
                           random_state=0)
    scores = result['disagreement']
    query = result['query']

    assert scores.shape == (40,)
    assert (scores >= 0).all()
    assert query.shape == (5,)
    # Most disagreed first, ties broken by unlabeled order
    ranked = sorted(range(40), key=lambda i: (-scores[i], i))
    assert_array_equal(query, ranked[:5])

    again = query_bagging(X, y, fit_nb, predict_proba_nb,
                          disagreement=disagreement, num_query=5, C=10,
                          random_state=0)
    assert_array_equal(again['query'], query)
    assert_allclose(again['disagreement'], scores)


def test_query_bagging_votes():
    X, y = _partially_labeled()
    result = query_bagging(X, y, fit_nb, predict_nb,
                           disagreement='vote_entropy', num_query=3, C=6,
                           random_state=0)
    assert result['query'].shape == (3,)
    assert (result['disagreement'] <= np.log(2) + 1e-12).all()


def test_query_bagging_head_semantics():
    X, y = _partially_labeled()

    result = query_bagging(X, y, fit_nb, predict_proba_nb, num_query=100,
                           C=3, random_state=0)
    assert_array_equal(np.sort(result['query']), np.arange(40))

    result = query_bagging(X, y, fit_nb, predict_proba_nb, num_query=0,
                           C=3, random_state=0)
    assert result['query'].shape == (0,)
    assert result['disagreement'].shape == (40,)


def test_query_bagging_fit_params():
    X, y = _partially_labeled()
    seen = []

    def fit(X, y, var_smoothing=1e-9):
        seen.append(var_smoothing)
        return GaussianNB(var_smoothing=var_smoothing).fit(X, y)

    query_bagging(X, y, fit, predict_proba_nb, C=2, var_smoothing=1e-3)
    assert seen == [1e-3, 1e-3]


def test_query_bagging_errors():
    X, y = _partially_labeled()

    with pytest.raises(InvalidConfigurationError):
        query_bagging(X, y, fit_nb, predict_proba_nb, C=1)
    with pytest.raises(InvalidConfigurationError):
        query_bagging(X, y, fit_nb, predict_proba_nb, disagreement='sample')
    with pytest.raises(EmptyPartitionError):
        query_bagging(X, np.full(y.shape[0], np.nan), fit_nb,
                      predict_proba_nb, C=2)

    def failing_fit(X, y):
        raise np.linalg.LinAlgError('singular matrix')

    with pytest.raises(TrainingError, match='singular matrix'):
        query_bagging(X, y, failing_fit, predict_proba_nb, C=2)


def test_sampler_with_estimator():
    X, y = _partially_labeled()
    labeled = ~np.isnan(y)

    sampler = QueryByBaggingSampler(GaussianNB(), 4,
                                    disagreement='post_entropy',
                                    n_members=5, random_state=0)
    sampler.fit(X[labeled], y[labeled])
    selected = sampler.select_samples(X[~labeled])
    assert selected.shape == (4,)
    assert_array_equal(selected, np.argsort(-sampler.sample_scores_,
                                            kind='stable')[:4])


def test_query_bagging_string_labels():
    X, y = _partially_labeled()
    # Plain list of strings, nan marks the unlabeled rows
    y = [np.nan if np.isnan(v) else ('a' if v == 0 else 'b') for v in y]

    for disagreement in ('kullback', 'vote_entropy'):
        result = query_bagging(X, y, fit_nb, predict_proba_nb,
                               disagreement=disagreement, num_query=3, C=4,
                               random_state=0)
        assert result['query'].shape == (3,)
        assert result['disagreement'].shape == (40,)
        assert (result['disagreement'] >= 0).all()
