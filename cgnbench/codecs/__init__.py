"""
Compression codecs for PGN game records.

Four fixed variants are benchmarked against each other; the dynamic Huffman
coder is the one whose parameters get tuned.
"""

from .codec_base import Codec, FunctionCodec
from .bincode_codec import BincodeCodec
from .huffman_codec import HuffmanCodec
from .dynamic_huffman_codec import DynamicHuffmanCodec
from .opening_huffman_codec import OpeningHuffmanCodec
from .algorithm import Algorithm

__all__ = [
    'Codec',
    'FunctionCodec',
    'BincodeCodec',
    'HuffmanCodec',
    'DynamicHuffmanCodec',
    'OpeningHuffmanCodec',
    'Algorithm',
]
