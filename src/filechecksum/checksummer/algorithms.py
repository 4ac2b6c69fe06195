"""Digest algorithms and their running accumulators.

CRC32 comes from zlib and the cryptographic digests from hashlib; nothing
here reimplements an algorithm. Each accumulator is single-use: once
finalized it rejects further input.
"""

import hashlib
import zlib
from enum import Enum
from typing import Protocol

from .errors import AccumulatorStateError, AlgorithmUnavailableError


class AlgorithmId(Enum):
    """Supported checksum algorithms, in comparison priority order."""

    CRC32 = "crc32"
    MD5 = "md5"
    SHA1 = "sha1"
    SHA256 = "sha256"
    SHA512 = "sha512"

    @property
    def label(self) -> str:
        """Display name (e.g. "SHA256")."""
        return self.name

    @property
    def hex_length(self) -> int:
        """Number of hex characters in a finalized digest."""
        return _HEX_LENGTHS[self]

    @property
    def hashlib_name(self) -> str | None:
        """Name understood by hashlib.new(), or None for CRC32."""
        return None if self is AlgorithmId.CRC32 else self.value


_HEX_LENGTHS = {
    AlgorithmId.CRC32: 8,
    AlgorithmId.MD5: 32,
    AlgorithmId.SHA1: 40,
    AlgorithmId.SHA256: 64,
    AlgorithmId.SHA512: 128,
}

# Fixed priority used when comparing a candidate against a result
PRIORITY_ORDER = tuple(AlgorithmId)


def to_hex(raw: bytes) -> str:
    """Format raw digest bytes as lowercase, zero-padded hex."""
    return raw.hex()


class DigestAccumulator(Protocol):
    """Running state for one algorithm."""

    algorithm: AlgorithmId

    def update(self, data: bytes) -> None: ...

    def finalize(self) -> bytes: ...


class _SingleUseAccumulator:
    """Shared finalize-once bookkeeping."""

    def __init__(self, algorithm: AlgorithmId) -> None:
        self.algorithm = algorithm
        self._finalized = False

    @property
    def finalized(self) -> bool:
        return self._finalized

    def _check_open(self) -> None:
        if self._finalized:
            raise AccumulatorStateError(
                f"{self.algorithm.label} accumulator already finalized",
                algorithm=self.algorithm.value,
            )

    def update(self, data: bytes) -> None:
        self._check_open()
        self._update(data)

    def finalize(self) -> bytes:
        self._check_open()
        self._finalized = True
        return self._finalize()

    def _update(self, data: bytes) -> None:
        raise NotImplementedError

    def _finalize(self) -> bytes:
        raise NotImplementedError


class Crc32Accumulator(_SingleUseAccumulator):
    """CRC32 via zlib; finalizes to the 32-bit value as 4 big-endian bytes."""

    def __init__(self) -> None:
        super().__init__(AlgorithmId.CRC32)
        self._crc = 0

    def _update(self, data: bytes) -> None:
        self._crc = zlib.crc32(data, self._crc)

    def _finalize(self) -> bytes:
        return (self._crc & 0xFFFFFFFF).to_bytes(4, "big")


class HashlibAccumulator(_SingleUseAccumulator):
    """Message digest backed by hashlib."""

    def __init__(self, algorithm: AlgorithmId) -> None:
        if algorithm.hashlib_name is None:
            raise ValueError(f"{algorithm.label} is not a hashlib algorithm")
        super().__init__(algorithm)
        self._hash = hashlib.new(algorithm.hashlib_name)

    def _update(self, data: bytes) -> None:
        self._hash.update(data)

    def _finalize(self) -> bytes:
        return self._hash.digest()


def create_accumulator(algorithm: AlgorithmId) -> DigestAccumulator:
    """Create a fresh accumulator for an algorithm.

    Raises:
        AlgorithmUnavailableError: If the runtime does not provide the
            algorithm (e.g. MD5 on a FIPS-restricted OpenSSL build)
    """
    if algorithm is AlgorithmId.CRC32:
        return Crc32Accumulator()
    try:
        return HashlibAccumulator(algorithm)
    except ValueError as e:
        raise AlgorithmUnavailableError(
            f"Unsupported checksum algorithm: {algorithm.label} ({e})",
            algorithm=algorithm.value,
        ) from e
