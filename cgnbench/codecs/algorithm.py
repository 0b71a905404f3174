"""Closed set of compression variants selectable by optimization level."""

from enum import Enum

from cgnbench.codecs.codec_base import Codec
from cgnbench.codecs.bincode_codec import BincodeCodec
from cgnbench.codecs.huffman_codec import HuffmanCodec
from cgnbench.codecs.dynamic_huffman_codec import DynamicHuffmanCodec
from cgnbench.codecs.opening_huffman_codec import OpeningHuffmanCodec
from cgnbench.errors import ConfigError


class Algorithm(Enum):
    """Compression variants, ordered from fastest to strongest compression."""

    BINCODE = 0
    HUFFMAN = 1
    DYNAMIC_HUFFMAN = 2
    OPENING_HUFFMAN = 3

    @classmethod
    def from_level(cls, level: int) -> "Algorithm":
        """Map a CLI optimization level (0-3) to its algorithm."""
        try:
            return cls(level)
        except ValueError:
            raise ConfigError(
                f"Optimization level must be between 0 and 3, got {level}"
            ) from None

    @property
    def codec_class(self) -> type[Codec]:
        return _CODEC_CLASSES[self]

    def codec(self) -> Codec:
        """Create the codec with its default parameters."""
        return self.codec_class()

    @classmethod
    def all_codecs(cls) -> dict[str, Codec]:
        """Codec instance for every variant, keyed by codec name."""
        return {algorithm.codec_class.name: algorithm.codec() for algorithm in cls}


_CODEC_CLASSES: dict[Algorithm, type[Codec]] = {
    Algorithm.BINCODE: BincodeCodec,
    Algorithm.HUFFMAN: HuffmanCodec,
    Algorithm.DYNAMIC_HUFFMAN: DynamicHuffmanCodec,
    Algorithm.OPENING_HUFFMAN: OpeningHuffmanCodec,
}

if set(_CODEC_CLASSES) != set(Algorithm):
    raise RuntimeError("every Algorithm member needs a codec class")
