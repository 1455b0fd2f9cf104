from abc import ABC, abstractmethod

import numpy as np

from .typeutils import check_estimator, _has_method


class Classifier(ABC):
    """Abstract Base Class for the classifiers trained by a committee.

    A classifier knows how to produce a model from labeled samples and how
    to apply a model to new samples. It holds no fitted state itself so that
    a committee can train many models from the same classifier.
    """

    @abstractmethod
    def train(self, X: np.ndarray, y: np.ndarray, **fit_params):
        """Fit a new model.

        Args:
            X: Labeled samples of shape (n_samples, n_features).
            y: Labels of shape (n_samples).
            fit_params: Additional parameters of the fitting procedure.

        Returns:
            The fitted model.
        """
        pass

    @abstractmethod
    def infer(self, model, X: np.ndarray) -> np.ndarray:
        """Predict with a model trained by this classifier.

        Args:
            model: A model returned by `train`.
            X: Samples of shape (n_samples, n_features).

        Returns:
            Either labels of shape (n_samples) or class probabilities of
            shape (n_samples, n_classes).
        """
        pass

    def classes_of(self, model):
        """Classes matching the probability columns of a model, if known."""
        return getattr(model, 'classes_', None)


class FunctionClassifier(Classifier):
    """Classifier built from a pair of functions.

    Args:
        fit: Function called as ``fit(X, y, **fit_params)`` that returns a
            model.
        predict: Function called as ``predict(model, X)`` that returns
            labels or class probabilities.
    """
    def __init__(self, fit, predict):
        if not callable(fit) or not callable(predict):
            raise TypeError('fit and predict must be callables')
        self.fit = fit
        self.predict = predict

    def train(self, X, y, **fit_params):
        return self.fit(X, y, **fit_params)

    def infer(self, model, X):
        return self.predict(model, X)


class SklearnClassifier(Classifier):
    """Classifier wrapping a scikit-learn estimator.

    Each call to `train` fits a fresh clone of the estimator.

    Parameters:
        estimator: Estimator complying with scikit-learn interface.
        use_proba: If True, models are applied with `predict_proba`,
            otherwise with `predict`. If None (default), `predict_proba` is
            used when the estimator has it.
    """
    def __init__(self, estimator, use_proba: bool = None):
        if use_proba is None:
            use_proba = _has_method(estimator, 'predict_proba')
        check_estimator(estimator, use_proba=use_proba)
        self.estimator = estimator
        self.use_proba = use_proba

    def train(self, X, y, **fit_params):
        from sklearn.base import clone

        model = clone(self.estimator)
        model.fit(X, y, **fit_params)
        return model

    def infer(self, model, X):
        if self.use_proba:
            return model.predict_proba(X)
        return model.predict(X)


def as_classifier(obj) -> Classifier:
    """Returns obj if it is a Classifier, wraps it if it is an estimator.

    Raises:
        TypeError: If obj is neither.
    """
    if isinstance(obj, Classifier):
        return obj
    return SklearnClassifier(obj)
