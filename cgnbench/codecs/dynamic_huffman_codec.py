"""
DynamicHuffmanCodec implementation.

Adaptive Huffman coding over the UTF-8 bytes of a record. Before any data has
been seen, symbol weights follow a Gaussian prior over a fixed ranking of the
characters that dominate PGN text:

    weight(rank) = BASE_WEIGHT + height * exp(-rank**2 / (2 * dev**2))

As symbols are coded their counts are added to the weights and the code is
rebuilt at growing intervals. The decoder mirrors every update, so only the
coded bits are stored. `height` sets how strongly the prior dominates the
observed counts and `dev` how many ranked symbols it favours; those two
parameters are what the genetic algorithm tunes.
"""

import math

from cgnbench.codecs.codec_base import Codec
from cgnbench.codecs.huffman_tree import BitWriter, HuffmanTable, iter_bits

DEFAULT_HEIGHT = 120.0
DEFAULT_DEV = 12.0

BASE_WEIGHT = 1.0
FIRST_REBUILD = 64
REBUILD_GROWTH = 4

END_OF_RECORD = 256
ALPHABET_SIZE = 257

# Most to least frequent in typical database games.
PGN_SYMBOL_RANKING = b' .1234567\n8eNxdcfgBabhRQ+"K-O0]/[#=ltnrEoeiaWkmsTDCuSyv9pBUw'


def _build_ranks() -> list[int]:
    ranks = [-1] * ALPHABET_SIZE
    next_rank = 0
    for byte in PGN_SYMBOL_RANKING:
        if ranks[byte] < 0:
            ranks[byte] = next_rank
            next_rank += 1
    for symbol in range(256):
        if ranks[symbol] < 0:
            ranks[symbol] = next_rank
            next_rank += 1
    ranks[END_OF_RECORD] = next_rank
    return ranks


SYMBOL_RANKS = _build_ranks()


def prior_weights(height: float, dev: float) -> list[float]:
    """Initial weight of every symbol for the given curve parameters."""
    weights = []
    spread = 2.0 * dev * dev if dev > 0 else 0.0
    for symbol in range(ALPHABET_SIZE):
        rank = SYMBOL_RANKS[symbol]
        # spread underflows to 0.0 for tiny dev; treat that as the spike
        if spread > 0:
            bump = height * math.exp(-(rank * rank) / spread)
        else:
            bump = height if rank == 0 else 0.0
        weights.append(BASE_WEIGHT + max(0.0, bump))
    return weights


class _AdaptiveModel:
    """Symbol weights plus the current table, updated identically on both sides."""

    def __init__(self, initial_weights: list[float], initial_table: HuffmanTable):
        self.weights = list(initial_weights)
        self.table = initial_table
        self.coded = 0
        self.next_rebuild = FIRST_REBUILD

    def update(self, symbol: int) -> None:
        self.weights[symbol] += 1.0
        self.coded += 1
        if self.coded >= self.next_rebuild:
            self.table = HuffmanTable(self.weights)
            self.next_rebuild *= REBUILD_GROWTH


class DynamicHuffmanCodec(Codec):
    """Adaptive Huffman coder parameterised by a Gaussian prior (height, dev)."""

    name = "dynamic-huffman"

    def __init__(self, height: float = DEFAULT_HEIGHT, dev: float = DEFAULT_DEV):
        if not (math.isfinite(height) and math.isfinite(dev)):
            raise ValueError(f"height and dev must be finite, got {height}, {dev}")
        self.height = float(height)
        self.dev = float(dev)
        self._initial_weights = prior_weights(self.height, self.dev)
        self._initial_table = HuffmanTable(self._initial_weights)

    def compress(self, text: str) -> bytes:
        if not text:
            return b""

        model = _AdaptiveModel(self._initial_weights, self._initial_table)
        writer = BitWriter()
        for symbol in text.encode("utf-8"):
            code, length = model.table.encode_map[symbol]
            writer.write_bits(code, length)
            model.update(symbol)

        code, length = model.table.encode_map[END_OF_RECORD]
        writer.write_bits(code, length)
        return writer.get_bytes()

    def decompress(self, data: bytes) -> str:
        if not data:
            return ""

        model = _AdaptiveModel(self._initial_weights, self._initial_table)
        out = bytearray()
        code = 0
        length = 0
        for bit in iter_bits(data):
            code = (code << 1) | bit
            length += 1
            symbol = model.table.decode_map.get((length, code))
            if symbol is None:
                if length >= model.table.max_length:
                    return ""
                continue
            if symbol == END_OF_RECORD:
                try:
                    return out.decode("utf-8")
                except UnicodeDecodeError:
                    return ""
            out.append(symbol)
            model.update(symbol)
            code = 0
            length = 0

        # ran out of bits before the end-of-record symbol
        return ""

    def __repr__(self) -> str:
        return f"DynamicHuffmanCodec(height={self.height!r}, dev={self.dev!r})"
