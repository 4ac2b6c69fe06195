"""Streaming, cancellable multi-algorithm file checksum engine."""

from .algorithms import AlgorithmId, PRIORITY_ORDER, create_accumulator, to_hex
from .cancellation import CancelToken
from .comparison import ComparisonOutcome, OutcomeKind, compare, describe
from .digest_set import DigestSet
from .engine import ChecksumEngine, DEFAULT_CHUNK_SIZE, RunContext
from .errors import (
    ChecksumError, UnreadableSourceError, AlgorithmUnavailableError,
    UserCancelledError, AccumulatorStateError, RunInProgressError,
    WorkerFailedError, InvalidBufferSizeError, classify_error
)
from .normalizer import normalize
from .progress import ProgressReporter, ProgressState
from .result import ChecksumResult, DigestSlot, RunStatus, SlotStatus
from .worker import ChecksumWorker

__all__ = [
    'AlgorithmId',
    'PRIORITY_ORDER',
    'create_accumulator',
    'to_hex',
    'CancelToken',
    'ComparisonOutcome',
    'OutcomeKind',
    'compare',
    'describe',
    'DigestSet',
    'ChecksumEngine',
    'DEFAULT_CHUNK_SIZE',
    'RunContext',
    'ChecksumError',
    'UnreadableSourceError',
    'AlgorithmUnavailableError',
    'UserCancelledError',
    'AccumulatorStateError',
    'RunInProgressError',
    'WorkerFailedError',
    'InvalidBufferSizeError',
    'classify_error',
    'normalize',
    'ProgressReporter',
    'ProgressState',
    'ChecksumResult',
    'DigestSlot',
    'RunStatus',
    'SlotStatus',
    'ChecksumWorker',
]
