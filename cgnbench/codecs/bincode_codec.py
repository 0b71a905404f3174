"""
BincodeCodec implementation.

Static binary serialization of a game record: the tag pairs and the movetext
are written as length-prefixed little-endian UTF-8 strings, with no entropy
coding at all. It is the fastest variant and the baseline for the others.
"""

import re
import struct

from cgnbench.codecs.codec_base import Codec

TAG_LINE = re.compile(r'^\[([A-Za-z0-9_]+) "(.*)"\]$')

_LENGTH = struct.Struct("<Q")


def split_record(text: str) -> tuple[list[tuple[str, str]], str] | None:
    """Split a record into tag pairs and movetext.

    Returns None when the text is not in the canonical layout rendered by
    join_record(), since the serialization could not reproduce it exactly.
    """
    head, sep, movetext = text.partition("\n\n")
    if not sep or not movetext.endswith("\n"):
        return None

    tags = []
    for line in head.split("\n"):
        match = TAG_LINE.match(line)
        if match is None:
            return None
        tags.append((match.group(1), match.group(2)))

    movetext = movetext[:-1]
    if join_record(tags, movetext) != text:
        return None
    return tags, movetext


def join_record(tags: list[tuple[str, str]], movetext: str) -> str:
    tag_lines = "\n".join(f'[{key} "{value}"]' for key, value in tags)
    return f"{tag_lines}\n\n{movetext}\n"


def _pack_str(value: str) -> bytes:
    raw = value.encode("utf-8")
    return _LENGTH.pack(len(raw)) + raw


def _unpack_str(data: bytes, offset: int) -> tuple[str, int]:
    (length,) = _LENGTH.unpack_from(data, offset)
    offset += _LENGTH.size
    end = offset + length
    if end > len(data):
        raise ValueError("string runs past end of buffer")
    return data[offset:end].decode("utf-8"), end


class BincodeCodec(Codec):
    """Length-prefixed binary layout of tag pairs and movetext."""

    name = "bincode"

    def compress(self, text: str) -> bytes:
        parts = split_record(text)
        if parts is None:
            return b""

        tags, movetext = parts
        chunks = [_LENGTH.pack(len(tags))]
        for key, value in tags:
            chunks.append(_pack_str(key))
            chunks.append(_pack_str(value))
        chunks.append(_pack_str(movetext))
        return b"".join(chunks)

    def decompress(self, data: bytes) -> str:
        try:
            (tag_count,) = _LENGTH.unpack_from(data, 0)
            offset = _LENGTH.size
            tags = []
            for _ in range(tag_count):
                key, offset = _unpack_str(data, offset)
                value, offset = _unpack_str(data, offset)
                tags.append((key, value))
            movetext, offset = _unpack_str(data, offset)
        except (struct.error, ValueError, UnicodeDecodeError):
            return ""

        if offset != len(data):
            return ""
        return join_record(tags, movetext)
