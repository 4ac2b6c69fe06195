"""The set of active accumulators for one run."""

import logging
from typing import Callable, Dict, FrozenSet, Iterable

from .algorithms import AlgorithmId, DigestAccumulator, PRIORITY_ORDER, create_accumulator
from .errors import AccumulatorStateError, AlgorithmUnavailableError

logger = logging.getLogger(__name__)

AccumulatorFactory = Callable[[AlgorithmId], DigestAccumulator]


class DigestSet:
    """Accumulators for the enabled algorithms of a single run.

    CRC32 is always added to the requested set. Algorithms whose
    accumulator cannot be created are recorded in ``unavailable`` and
    skipped; the remaining ones are fed identical chunks.
    """

    def __init__(
        self,
        enabled: Iterable[AlgorithmId],
        factory: AccumulatorFactory = create_accumulator,
    ) -> None:
        self.requested: FrozenSet[AlgorithmId] = frozenset(enabled) | {AlgorithmId.CRC32}
        self.unavailable: Dict[AlgorithmId, AlgorithmUnavailableError] = {}
        self._accumulators: Dict[AlgorithmId, DigestAccumulator] = {}
        self._finalized = False

        for algorithm in PRIORITY_ORDER:
            if algorithm not in self.requested:
                continue
            try:
                self._accumulators[algorithm] = factory(algorithm)
            except AlgorithmUnavailableError as e:
                if algorithm is AlgorithmId.CRC32:
                    raise
                logger.warning(e.message)
                self.unavailable[algorithm] = e

    @property
    def active(self) -> tuple[AlgorithmId, ...]:
        """Algorithms that are actually being computed, in priority order."""
        return tuple(self._accumulators)

    @property
    def finalized(self) -> bool:
        return self._finalized

    def update(self, chunk: bytes) -> None:
        """Feed the same chunk to every accumulator."""
        if self._finalized:
            raise AccumulatorStateError("DigestSet already finalized")
        for accumulator in self._accumulators.values():
            accumulator.update(chunk)

    def finalize_all(self) -> Dict[AlgorithmId, bytes]:
        """Finalize every accumulator exactly once."""
        if self._finalized:
            raise AccumulatorStateError("DigestSet already finalized")
        self._finalized = True
        return {
            algorithm: accumulator.finalize()
            for algorithm, accumulator in self._accumulators.items()
        }
