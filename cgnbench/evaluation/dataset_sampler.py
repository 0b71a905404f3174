"""
Dataset sampler for PGN game databases.

Splits a corpus into blank-line separated paragraphs and pairs each tag
section with the movetext that follows it. Records are taken in file order
(first N encountered); malformed records are skipped and counted.
"""

import logging
import re
from pathlib import Path
from typing import Iterator

from cgnbench.errors import DataError, RecordError
from cgnbench.evaluation.benchmark_data import GameRecord, SampleSet, ToTake

logger = logging.getLogger(__name__)

TAG_PAIR = re.compile(r'^\[[A-Za-z0-9_]+\s+"(?:[^"\\]|\\.)*"\]$')
TERMINATION_MARKERS = ("1-0", "0-1", "1/2-1/2", "*")


def _paragraphs(lines: Iterator[str]) -> Iterator[tuple[int, list[str]]]:
    """Yield (first line number, lines) for each blank-line separated block."""
    block: list[str] = []
    start = 0
    for line_number, raw in enumerate(lines, start=1):
        line = raw.rstrip("\r\n").rstrip()
        if line:
            if not block:
                start = line_number
            block.append(line)
        elif block:
            yield start, block
            block = []
    if block:
        yield start, block


def _is_tag_section(block: list[str]) -> bool:
    return block[0].startswith("[")


def _check_tag_section(start: int, block: list[str]) -> None:
    for offset, line in enumerate(block):
        if not TAG_PAIR.match(line):
            raise RecordError(f"malformed tag pair {line[:40]!r}", start + offset)


def _check_movetext(start: int, block: list[str]) -> None:
    for offset, line in enumerate(block):
        if line.startswith("["):
            raise RecordError("tag pair inside movetext", start + offset)
    last_token = block[-1].split()[-1]
    if last_token not in TERMINATION_MARKERS:
        raise RecordError("movetext has no game termination marker", start)


def parse_records(lines: Iterator[str]) -> Iterator[GameRecord | RecordError]:
    """Yield well-formed records and the errors for malformed ones, in file order."""
    pending: tuple[int, list[str]] | None = None
    record_id = 0

    for start, block in _paragraphs(lines):
        if _is_tag_section(block):
            if pending is not None:
                yield RecordError("tag section without movetext", pending[0])
            pending = (start, block)
            continue

        if pending is None:
            yield RecordError("movetext without tag section", start)
            continue

        tag_start, tags = pending
        pending = None
        try:
            _check_tag_section(tag_start, tags)
            _check_movetext(start, block)
        except RecordError as error:
            yield error
            continue

        text = "\n".join(tags) + "\n\n" + "\n".join(block) + "\n"
        yield GameRecord(text=text, record_id=record_id, first_line=tag_start)
        record_id += 1

    if pending is not None:
        yield RecordError("tag section without movetext", pending[0])


class DatasetSampler:
    """Extracts a SampleSet from a corpus file.

    Sampling is restartable: each call re-reads the corpus from the start, so
    the same selector always yields the same records.
    """

    def __init__(self, corpus_path: str | Path):
        self.corpus_path = Path(corpus_path)

    def sample(self, selector: ToTake) -> SampleSet:
        """Collect min(n, well-formed) records for a count, or all of them."""
        if not self.corpus_path.exists():
            raise DataError(f"Corpus not found: {self.corpus_path}")
        if not self.corpus_path.is_file():
            raise DataError(f"Corpus is not a file: {self.corpus_path}")

        records: list[GameRecord] = []
        skipped: list[RecordError] = []

        if not selector.satisfied_by(0):
            try:
                with open(self.corpus_path, "r", encoding="utf-8") as f:
                    for item in parse_records(iter(f)):
                        if isinstance(item, RecordError):
                            logger.debug("Skipping record: %s", item)
                            skipped.append(item)
                            continue
                        records.append(item)
                        if selector.satisfied_by(len(records)):
                            break
            except UnicodeDecodeError as e:
                raise DataError(f"Corpus is not valid UTF-8: {self.corpus_path}: {e}") from e
            except OSError as e:
                raise DataError(f"Cannot read corpus {self.corpus_path}: {e}") from e

            if not records:
                raise DataError(f"No well-formed game records in {self.corpus_path}")

        if skipped:
            logger.warning(
                "Skipped %d malformed record(s) in %s", len(skipped), self.corpus_path
            )

        return SampleSet(
            records=tuple(records),
            skipped=tuple(skipped),
            source=self.corpus_path,
            selector=selector,
        )
