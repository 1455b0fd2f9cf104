"""
Query by bagging on iris
========================

Only 30 of the 150 iris flowers are labeled. A committee of linear
discriminant analysis models, each trained on a bootstrap resample of the
labeled flowers, tells us which flowers the oracle should label next.
We then simulate the oracle with the true labels for a few rounds and
compare with random queries.

"""


##############################################################################
# Those are the necessary imports and initializations

import logging

import numpy as np
from sklearn.datasets import load_iris
from sklearn.discriminant_analysis import LinearDiscriminantAnalysis

from querybag import (LabelingSession, QueryByBaggingSampler, RandomSampler,
                      query_bagging)


logging.basicConfig(level=logging.INFO)

X, y_true = load_iris(return_X_y=True)

# For demonstration, suppose that few observations are labeled
y = np.full(y_true.shape[0], np.nan)
labeled = np.r_[0:10, 50:60, 100:110]
y[labeled] = y_true[labeled]


##############################################################################
# The function interface takes a fit and a predict function. Predicting
# labels is enough, probabilities are used when available.

def fit_f(X, y, **kwargs):
    return LinearDiscriminantAnalysis(**kwargs).fit(X, y)


def predict_f(model, X):
    return model.predict_proba(X)


result = query_bagging(X, y, fit_f, predict_f, C=10, random_state=0)
print('Kullback query:', result['query'])

result = query_bagging(X, y, fit_f, predict_f, C=10, num_query=5,
                       disagreement='vote_entropy', random_state=0)
print('Vote entropy query:', result['query'])


##############################################################################
# Active learning loop
# ^^^^^^^^^^^^^^^^^^^^
#
# A session keeps the labels gathered so far. At each round the sampler
# picks 5 flowers and the oracle labels them.

samplers = [
    ('Random', RandomSampler(5, random_state=0)),
    ('Query by bagging', QueryByBaggingSampler(
        LinearDiscriminantAnalysis(), 5, n_members=10, random_state=0)),
]

for name, sampler in samplers:
    session = LabelingSession(X, y)
    for _ in range(4):
        session.step(sampler, lambda indices: y_true[indices])
    model = LinearDiscriminantAnalysis().fit(*session.get_labeled())
    print('{}: {} labels, accuracy {:.3f}'.format(
        name, session.labeled.sum(), model.score(X, y_true)))
