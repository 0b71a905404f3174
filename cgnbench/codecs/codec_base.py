"""
Base interface for PGN compression codecs.

A codec is an opaque pair of transforms, compress(text) -> bytes and
decompress(bytes) -> text. Empty output from either side signals that the
transform failed.
"""

from abc import ABC, abstractmethod
from typing import Callable


class Codec(ABC):
    """
    Abstract base class for the compression variants that get benchmarked.

    Codecs hold no per-call state, so one instance can be shared by every
    record of a benchmark run.
    """

    name = "Codec"  # Class attribute - accessible without instantiation

    @abstractmethod
    def compress(self, text: str) -> bytes:
        """
        Compress a single PGN game record.

        Args:
            text: Game record in tag-pair plus movetext form

        Returns:
            Compressed bytes, or b"" if the record could not be compressed
        """
        pass

    @abstractmethod
    def decompress(self, data: bytes) -> str:
        """
        Restore a game record from its compressed form.

        Args:
            data: Bytes previously produced by compress()

        Returns:
            The record text, or "" if the data could not be decoded
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}()"


class FunctionCodec(Codec):
    """Adapts a plain (name, compress_fn, decompress_fn) triple to the Codec interface."""

    def __init__(
        self,
        name: str,
        compress_fn: Callable[[str], bytes],
        decompress_fn: Callable[[bytes], str],
    ):
        self.name = name
        self._compress_fn = compress_fn
        self._decompress_fn = decompress_fn

    def compress(self, text: str) -> bytes:
        return self._compress_fn(text)

    def decompress(self, data: bytes) -> str:
        return self._decompress_fn(data)

    def __repr__(self) -> str:
        return f"FunctionCodec({self.name!r})"
