"""
OpeningHuffmanCodec implementation.

Deflate primed with a preset dictionary of the tag names and opening lines
that appear in almost every game of a public database. The first moves of a
game and its tag section then compress to short back references into the
dictionary instead of literal text.
"""

import zlib

from cgnbench.codecs.codec_base import Codec
from cgnbench.codecs.huffman_codec import RAW_DEFLATE_WBITS

# Later entries are cheaper to reference, so the most common material is last.
OPENING_LINES = (
    "1. b3 e5 2. Bb2 Nc6 3. e3 d5 4. Bb5 Bd6 ",
    "1. c4 e5 2. Nc3 Nf6 3. Nf3 Nc6 4. g3 d5 ",
    "1. d4 Nf6 2. c4 g6 3. Nc3 Bg7 4. e4 d6 5. Nf3 O-O ",
    "1. d4 Nf6 2. c4 e6 3. Nc3 Bb4 4. e3 O-O ",
    "1. e4 c6 2. d4 d5 3. e5 Bf5 4. Nf3 e6 ",
    "1. e4 e6 2. d4 d5 3. Nc3 Nf6 4. e5 Nfd7 ",
    "1. e4 c5 2. Nf3 Nc6 3. d4 cxd4 4. Nxd4 Nf6 5. Nc3 e5 ",
    "1. e4 c5 2. Nf3 d6 3. d4 cxd4 4. Nxd4 Nf6 5. Nc3 a6 ",
    "1. d4 d5 2. c4 e6 3. Nc3 Nf6 4. Bg5 Be7 ",
    "1. d4 d5 2. Bf4 Nf6 3. e3 e6 4. Nf3 c5 ",
    "1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. c3 Nf6 5. d3 d6 ",
    "1. e4 e5 2. Nf3 Nc6 3. Bb5 a6 4. Ba4 Nf6 5. O-O Be7 ",
)

TAG_TEMPLATE = (
    '[Event "Rated Blitz game"]\n'
    '[Event "Rated Rapid game"]\n'
    '[Event "Rated Bullet game"]\n'
    '[Site "https://lichess.org/"]\n'
    '[Date "20'
    '[Round "-"]\n'
    '[White "'
    '[Black "'
    '[Result "1-0"]\n'
    '[Result "0-1"]\n'
    '[Result "1/2-1/2"]\n'
    '[UTCDate "20'
    '[UTCTime "'
    '[WhiteElo "'
    '[BlackElo "'
    '[WhiteRatingDiff "+'
    '[BlackRatingDiff "-'
    '[ECO "'
    '[Opening "'
    '[TimeControl "'
    '[Termination "Normal"]\n'
    '[Termination "Time forfeit"]\n\n'
)

OPENING_DICTIONARY = (TAG_TEMPLATE + "".join(OPENING_LINES)).encode("utf-8")


class OpeningHuffmanCodec(Codec):
    """Raw deflate with a preset dictionary of common tags and openings."""

    name = "opening-huffman"

    def __init__(self, dictionary: bytes = OPENING_DICTIONARY, level: int = 9):
        self.dictionary = dictionary
        self.level = level

    def compress(self, text: str) -> bytes:
        if not text:
            return b""
        compressor = zlib.compressobj(
            self.level,
            zlib.DEFLATED,
            RAW_DEFLATE_WBITS,
            9,
            zlib.Z_DEFAULT_STRATEGY,
            self.dictionary,
        )
        return compressor.compress(text.encode("utf-8")) + compressor.flush()

    def decompress(self, data: bytes) -> str:
        try:
            decompressor = zlib.decompressobj(RAW_DEFLATE_WBITS, zdict=self.dictionary)
            raw = decompressor.decompress(data) + decompressor.flush()
            if not decompressor.eof:
                return ""
            return raw.decode("utf-8")
        except (zlib.error, UnicodeDecodeError):
            return ""

    def __repr__(self) -> str:
        return f"OpeningHuffmanCodec(level={self.level})"
