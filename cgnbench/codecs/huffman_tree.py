"""Huffman code construction and MSB-first bit I/O shared by the entropy coders."""

import heapq
from typing import Iterator, Sequence


def code_lengths(weights: Sequence[float]) -> list[int]:
    """Return the Huffman code length of every symbol.

    Symbols with a non-positive weight get length 0 (no code). Ties are broken
    by symbol order so the encoder and decoder always build the same tree.
    """
    heap: list[tuple[float, int, object]] = [
        (weight, symbol, symbol) for symbol, weight in enumerate(weights) if weight > 0
    ]
    lengths = [0] * len(weights)
    if not heap:
        return lengths
    if len(heap) == 1:
        lengths[heap[0][2]] = 1
        return lengths

    heapq.heapify(heap)
    order = len(weights)
    while len(heap) > 1:
        w1, _, left = heapq.heappop(heap)
        w2, _, right = heapq.heappop(heap)
        heapq.heappush(heap, (w1 + w2, order, (left, right)))
        order += 1

    stack: list[tuple[object, int]] = [(heap[0][2], 0)]
    while stack:
        node, depth = stack.pop()
        if isinstance(node, tuple):
            stack.append((node[0], depth + 1))
            stack.append((node[1], depth + 1))
        else:
            lengths[node] = depth
    return lengths


def canonical_codes(lengths: Sequence[int]) -> dict[int, tuple[int, int]]:
    """Assign canonical codes: symbol -> (code, length)."""
    pairs = sorted((length, symbol) for symbol, length in enumerate(lengths) if length > 0)
    codes: dict[int, tuple[int, int]] = {}
    code = 0
    prev_length = 0
    for length, symbol in pairs:
        code <<= length - prev_length
        codes[symbol] = (code, length)
        code += 1
        prev_length = length
    return codes


class HuffmanTable:
    """Encoding and decoding maps for one set of symbol weights."""

    __slots__ = ("encode_map", "decode_map", "max_length")

    def __init__(self, weights: Sequence[float]):
        self.encode_map = canonical_codes(code_lengths(weights))
        if not self.encode_map:
            raise ValueError("Huffman table needs at least one positive weight")
        self.decode_map = {
            (length, code): symbol for symbol, (code, length) in self.encode_map.items()
        }
        self.max_length = max(length for _, length in self.encode_map.values())


class BitWriter:
    __slots__ = ("_buf", "_bitbuf", "_bitcnt")

    def __init__(self) -> None:
        self._buf = bytearray()
        self._bitbuf = 0
        self._bitcnt = 0

    def write_bits(self, value: int, nbits: int) -> None:
        self._bitbuf = (self._bitbuf << nbits) | (value & ((1 << nbits) - 1))
        self._bitcnt += nbits
        while self._bitcnt >= 8:
            self._bitcnt -= 8
            self._buf.append((self._bitbuf >> self._bitcnt) & 0xFF)
        self._bitbuf &= (1 << self._bitcnt) - 1

    def get_bytes(self) -> bytes:
        if self._bitcnt > 0:
            self._buf.append((self._bitbuf << (8 - self._bitcnt)) & 0xFF)
            self._bitbuf = 0
            self._bitcnt = 0
        return bytes(self._buf)


def iter_bits(data: bytes) -> Iterator[int]:
    for byte in data:
        for shift in range(7, -1, -1):
            yield (byte >> shift) & 1
