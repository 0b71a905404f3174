"""
HuffmanCodec implementation.

Static Huffman coding of the record bytes. Deflate is restricted to
Huffman-only blocks, so no back references are emitted and the output size
reflects pure per-symbol entropy coding.
"""

import zlib

from cgnbench.codecs.codec_base import Codec

RAW_DEFLATE_WBITS = -15


class HuffmanCodec(Codec):
    """Huffman-only raw deflate over the UTF-8 record."""

    name = "huffman"

    def __init__(self, level: int = 9):
        self.level = level

    def compress(self, text: str) -> bytes:
        if not text:
            return b""
        compressor = zlib.compressobj(
            self.level, zlib.DEFLATED, RAW_DEFLATE_WBITS, 9, zlib.Z_HUFFMAN_ONLY
        )
        return compressor.compress(text.encode("utf-8")) + compressor.flush()

    def decompress(self, data: bytes) -> str:
        try:
            decompressor = zlib.decompressobj(RAW_DEFLATE_WBITS)
            raw = decompressor.decompress(data) + decompressor.flush()
            if not decompressor.eof:
                return ""
            return raw.decode("utf-8")
        except (zlib.error, UnicodeDecodeError):
            return ""

    def __repr__(self) -> str:
        return f"HuffmanCodec(level={self.level})"
