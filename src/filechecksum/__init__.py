"""File checksum tool: CRC32, MD5, SHA1, SHA256 and SHA512 in one pass."""

__version__ = "0.1.0"
