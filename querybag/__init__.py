# Query by bagging active learning.
#
# A committee of classifiers is trained on bootstrap resamples of the
# labeled data, the oracle is asked about the samples it disagrees on.

from .version import __version__
from .typeutils import (EmptyPartitionError, InvalidConfigurationError,
                        TrainingError, NotEnoughSamplesWarning)
from .utils import MISSING_LABEL, is_missing, split_labeled, LabelingSession
from .disagreement import (Disagreement, disagreement_score, kullback_score,
                           vote_entropy_score, post_entropy_score)
from .classifier import Classifier, FunctionClassifier, SklearnClassifier
from .committee import (BaggingCommittee, QueryByBaggingSampler,
                        query_bagging, query_by_bagging)
from .random import RandomSampler

__all__ = [
    '__version__',
    'EmptyPartitionError', 'InvalidConfigurationError', 'TrainingError',
    'NotEnoughSamplesWarning',
    'MISSING_LABEL', 'is_missing', 'split_labeled', 'LabelingSession',
    'Disagreement', 'disagreement_score', 'kullback_score',
    'vote_entropy_score', 'post_entropy_score',
    'Classifier', 'FunctionClassifier', 'SklearnClassifier',
    'BaggingCommittee', 'QueryByBaggingSampler', 'query_bagging',
    'query_by_bagging', 'RandomSampler',
]
