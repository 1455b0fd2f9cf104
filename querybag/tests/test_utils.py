import numpy as np
from numpy.testing import assert_array_equal
from pytest import raises

from querybag.random import RandomSampler
from querybag.typeutils import EmptyPartitionError
from querybag.utils import LabelingSession, is_missing, split_labeled


def test_is_missing():
    assert_array_equal(is_missing([0., np.nan, 1.]), [False, True, False])
    assert_array_equal(is_missing(np.array(['a', None, 'b'], dtype=object)),
                       [False, True, False])
    assert_array_equal(is_missing([1, 2, 3]), [False, False, False])
    assert_array_equal(is_missing([1, -1, 3], missing_label=-1),
                       [False, True, False])


def test_split_labeled():
    X = np.arange(12).reshape(6, 2)
    y = np.array(['a', None, 'b', None, 'a', None], dtype=object)

    X_labeled, y_labeled, X_unlabeled = split_labeled(X, y)
    assert_array_equal(X_labeled, [[0, 1], [4, 5], [8, 9]])
    assert_array_equal(y_labeled, ['a', 'b', 'a'])
    assert y_labeled.dtype.kind == 'U'
    assert_array_equal(X_unlabeled, [[2, 3], [6, 7], [10, 11]])

    y = np.array([1, 0, 0, 0, 1, 1])
    X_labeled, y_labeled, X_unlabeled = split_labeled(X, y, missing_label=0)
    assert_array_equal(y_labeled, [1, 1, 1])
    assert X_unlabeled.shape == (3, 2)


def test_split_labeled_errors():
    X = np.zeros((3, 2))
    with raises(EmptyPartitionError):
        split_labeled(X, [np.nan, np.nan, np.nan])
    with raises(EmptyPartitionError):
        split_labeled(X, [0, 1, 1])
    with raises(ValueError):
        split_labeled(X, [0, np.nan])


def test_labeling_session():
    X = np.arange(20).reshape(10, 2)
    truth = np.array([0, 1] * 5)
    y = np.full(10, np.nan)
    y[[0, 1]] = truth[[0, 1]]

    session = LabelingSession(X, y)
    assert session.current_iter == 0
    assert session.labeled.sum() == 2
    assert session.unlabeled.sum() == 8

    indices = session.step(RandomSampler(3, random_state=0),
                           lambda idx: truth[idx])
    assert indices.shape == (3,)
    assert not np.isin(indices, [0, 1]).any()
    assert session.current_iter == 1
    assert session.labeled.sum() == 5
    assert session.labeled_at(0).sum() == 2
    assert_array_equal(np.where(session.batch_at(1))[0], np.sort(indices))

    X_labeled, y_labeled = session.get_labeled()
    assert X_labeled.shape == (5, 2)
    assert_array_equal(y_labeled, truth[session.labeled])

    with raises(ValueError):
        session.label(indices[:1], [0])
    with raises(ValueError):
        session.batch_at(2)

    # Query indices refer to the whole dataset
    remaining = np.where(session.unlabeled)[0]
    assert_array_equal(session.dereference([0, 1]), remaining[:2])


def test_labeling_session_needs_both_partitions():
    X = np.zeros((3, 2))
    session = LabelingSession(X, [np.nan] * 3)
    with raises(EmptyPartitionError):
        session.query(RandomSampler(1))


def test_string_labels_with_nan():
    # Lists must not turn nan into the string 'nan'
    y = ['a', 'b', np.nan, 'a', np.nan]
    assert_array_equal(is_missing(y), [False, False, True, False, True])
    assert_array_equal(is_missing(['a', None, 'b']), [False, True, False])
    assert_array_equal(is_missing([0, np.nan, 1]), [False, True, False])

    X = np.arange(10).reshape(5, 2)
    X_labeled, y_labeled, X_unlabeled = split_labeled(X, y)
    assert_array_equal(X_labeled, [[0, 1], [2, 3], [6, 7]])
    assert_array_equal(y_labeled, ['a', 'b', 'a'])
    assert y_labeled.dtype.kind == 'U'
    assert_array_equal(X_unlabeled, [[4, 5], [8, 9]])

    # Plain int lists keep their dtype once split
    _, y_labeled, _ = split_labeled(X, [1, 0, np.nan, 1, np.nan])
    assert_array_equal(y_labeled, [1, 0, 1])

    session = LabelingSession(X, y)
    assert_array_equal(session.unlabeled, [False, False, True, False, True])
    session.label([2], ['b'])
    assert_array_equal(session.get_labeled()[1], ['a', 'b', 'b', 'a'])


def test_labeling_session_rejects_bad_batches():
    X = np.zeros((4, 2))
    session = LabelingSession(X, [0, np.nan, np.nan, 1])

    with raises(ValueError):
        session.label([-1], [0])
    with raises(ValueError):
        session.label([4], [0])
    with raises(ValueError):
        session.label([], [])
    with raises(ValueError):
        session.label([1, 1], [0, 0])
    assert session.current_iter == 0
    assert session.unlabeled.sum() == 2
