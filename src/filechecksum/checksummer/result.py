"""Immutable outcome of a checksum run."""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional

from .algorithms import AlgorithmId, PRIORITY_ORDER, to_hex
from .errors import AlgorithmUnavailableError, UnreadableSourceError, UserCancelledError


class RunStatus(Enum):
    """How a run ended."""
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"


class SlotStatus(Enum):
    """State of one algorithm's slot in a result."""
    COMPUTED = "computed"
    UNAVAILABLE = "unavailable"
    NOT_REQUESTED = "not_requested"
    ABANDONED = "abandoned"  # requested, but the run was cancelled or failed


@dataclass(frozen=True)
class DigestSlot:
    """Per-algorithm result.

    Attributes:
        status: Slot state
        hex: Lowercase hex digest, only set when status is COMPUTED
        error: Why the algorithm could not be created, when UNAVAILABLE
    """
    status: SlotStatus
    hex: Optional[str] = None
    error: Optional[AlgorithmUnavailableError] = None

    @property
    def computed(self) -> bool:
        return self.status is SlotStatus.COMPUTED


_NOT_REQUESTED = DigestSlot(SlotStatus.NOT_REQUESTED)
_ABANDONED = DigestSlot(SlotStatus.ABANDONED)


@dataclass(frozen=True)
class ChecksumResult:
    """Finalized outcome of one run. Created once, never mutated."""

    status: RunStatus
    slots: Mapping[AlgorithmId, DigestSlot]
    bytes_processed: int = 0
    bytes_total: int = 0
    elapsed_seconds: float = 0.0
    error: Optional[UnreadableSourceError] = None
    source_name: Optional[str] = field(default=None, compare=False)

    def __post_init__(self) -> None:
        # Freeze the mapping and fill in slots for algorithms nobody asked for
        slots: Dict[AlgorithmId, DigestSlot] = {
            algorithm: self.slots.get(algorithm, _NOT_REQUESTED)
            for algorithm in PRIORITY_ORDER
        }
        object.__setattr__(self, "slots", MappingProxyType(slots))

    @classmethod
    def completed(
        cls,
        digests: Mapping[AlgorithmId, bytes],
        unavailable: Mapping[AlgorithmId, AlgorithmUnavailableError],
        bytes_processed: int,
        bytes_total: int,
        elapsed_seconds: float = 0.0,
        source_name: Optional[str] = None,
    ) -> "ChecksumResult":
        slots: Dict[AlgorithmId, DigestSlot] = {
            algorithm: DigestSlot(SlotStatus.COMPUTED, hex=to_hex(raw))
            for algorithm, raw in digests.items()
        }
        for algorithm, error in unavailable.items():
            slots[algorithm] = DigestSlot(SlotStatus.UNAVAILABLE, error=error)
        return cls(
            status=RunStatus.COMPLETED,
            slots=slots,
            bytes_processed=bytes_processed,
            bytes_total=bytes_total,
            elapsed_seconds=elapsed_seconds,
            source_name=source_name,
        )

    @classmethod
    def abandoned(
        cls,
        status: RunStatus,
        requested: Iterable[AlgorithmId],
        unavailable: Mapping[AlgorithmId, AlgorithmUnavailableError],
        bytes_processed: int,
        bytes_total: int,
        elapsed_seconds: float = 0.0,
        error: Optional[UnreadableSourceError] = None,
        source_name: Optional[str] = None,
    ) -> "ChecksumResult":
        """Result for a cancelled or failed run: no digest is filled in."""
        if status is RunStatus.COMPLETED:
            raise ValueError("abandoned() requires CANCELLED or FAILED status")
        slots: Dict[AlgorithmId, DigestSlot] = {}
        for algorithm in requested:
            if algorithm in unavailable:
                slots[algorithm] = DigestSlot(SlotStatus.UNAVAILABLE, error=unavailable[algorithm])
            else:
                slots[algorithm] = _ABANDONED
        return cls(
            status=status,
            slots=slots,
            bytes_processed=bytes_processed,
            bytes_total=bytes_total,
            elapsed_seconds=elapsed_seconds,
            error=error,
            source_name=source_name,
        )

    @property
    def is_completed(self) -> bool:
        return self.status is RunStatus.COMPLETED

    @property
    def requested(self) -> tuple[AlgorithmId, ...]:
        """Algorithms the caller enabled (CRC32 included), in priority order."""
        return tuple(
            algorithm for algorithm, slot in self.slots.items()
            if slot.status is not SlotStatus.NOT_REQUESTED
        )

    def hex_for(self, algorithm: AlgorithmId) -> Optional[str]:
        """Hex digest for an algorithm, or None if it was not computed."""
        return self.slots[algorithm].hex

    def computed(self) -> Dict[AlgorithmId, str]:
        """All computed digests, in priority order."""
        return {
            algorithm: slot.hex
            for algorithm, slot in self.slots.items()
            if slot.computed
        }

    def raise_for_status(self) -> None:
        """Raise the terminal error of a run that did not complete."""
        if self.status is RunStatus.FAILED:
            raise self.error or UnreadableSourceError(
                "Checksum run failed", source=self.source_name
            )
        if self.status is RunStatus.CANCELLED:
            raise UserCancelledError(
                "Checksum calculation cancelled by user",
                source=self.source_name,
                bytes_processed=self.bytes_processed,
            )
