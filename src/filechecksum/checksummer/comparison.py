"""Matching user-supplied checksums against a run's digests."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .algorithms import AlgorithmId, PRIORITY_ORDER
from .result import ChecksumResult


class OutcomeKind(Enum):
    MATCHED = "matched"
    NO_MATCH = "no_match"
    INDETERMINATE = "indeterminate"  # nothing to compare against


@dataclass(frozen=True)
class ComparisonOutcome:
    """Tri-state comparison result; ``algorithm`` is set only when MATCHED."""
    kind: OutcomeKind
    algorithm: Optional[AlgorithmId] = None

    @classmethod
    def matched(cls, algorithm: AlgorithmId) -> "ComparisonOutcome":
        return cls(OutcomeKind.MATCHED, algorithm)

    @classmethod
    def no_match(cls) -> "ComparisonOutcome":
        return cls(OutcomeKind.NO_MATCH)

    @classmethod
    def indeterminate(cls) -> "ComparisonOutcome":
        return cls(OutcomeKind.INDETERMINATE)

    @property
    def is_match(self) -> bool:
        return self.kind is OutcomeKind.MATCHED


def compare(candidate: str, result: Optional[ChecksumResult]) -> ComparisonOutcome:
    """Compare a normalized candidate against every computed digest.

    Algorithms are tried in priority order CRC32, MD5, SHA1, SHA256,
    SHA512 and the first exact match wins.

    Args:
        candidate: Checksum string, already passed through normalize()
        result: Finished run result, or None while a run is still going

    Returns:
        MATCHED(algorithm), NO_MATCH, or INDETERMINATE when the candidate is
        empty or the result holds no completed digests
    """
    if not candidate or result is None or not result.is_completed:
        return ComparisonOutcome.indeterminate()

    computed = result.computed()
    if not computed:
        return ComparisonOutcome.indeterminate()

    for algorithm in PRIORITY_ORDER:
        if computed.get(algorithm) == candidate:
            return ComparisonOutcome.matched(algorithm)
    return ComparisonOutcome.no_match()


def describe(outcome: ComparisonOutcome, candidate: str) -> str:
    """Console wording for a comparison outcome."""
    if outcome.kind is OutcomeKind.MATCHED:
        return f"Successfully matched the {outcome.algorithm.label} checksum."
    if outcome.kind is OutcomeKind.NO_MATCH:
        return f"Supplied checksum <{candidate}> does not match calculated checksums."
    return f"Nothing to compare for supplied checksum <{candidate}>."
