"""
Shared test utilities for cgnbench tests.

Provides small PGN corpora written to temporary files:
- WELL_FORMED_GAMES: ten complete games in Lichess export layout
- MALFORMED_RECORDS: two records the sampler must skip
- write_corpus(): helper that writes any mix of them to disk
"""

import tempfile
from pathlib import Path

import pytest

from cgnbench.evaluation.benchmark_data import ToTake
from cgnbench.evaluation.dataset_sampler import DatasetSampler

OPENINGS = [
    "1. e4 e5 2. Nf3 Nc6 3. Bb5 a6 4. Ba4 Nf6 5. O-O Be7 6. Re1 b5 7. Bb3 d6 8. c3 O-O 1-0",
    "1. d4 d5 2. c4 e6 3. Nc3 Nf6 4. Bg5 Be7 5. e3 O-O 6. Nf3 h6 7. Bh4 b6 0-1",
    "1. e4 c5 2. Nf3 d6 3. d4 cxd4 4. Nxd4 Nf6 5. Nc3 a6 6. Be3 e5 7. Nb3 Be6 1/2-1/2",
    "1. c4 e5 2. Nc3 Nf6 3. Nf3 Nc6 4. g3 d5 5. cxd5 Nxd5 6. Bg2 Nb6 7. O-O Be7 1-0",
    "1. e4 e6 2. d4 d5 3. Nc3 Nf6 4. e5 Nfd7 5. f4 c5 6. Nf3 Nc6 7. Be3 cxd4 0-1",
    "1. d4 Nf6 2. c4 g6 3. Nc3 Bg7 4. e4 d6 5. Nf3 O-O 6. Be2 e5 7. O-O Nc6 1-0",
    "1. e4 c6 2. d4 d5 3. e5 Bf5 4. Nf3 e6 5. Be2 c5 6. Be3 Qb6 7. Nc3 Qxb2 0-1",
    "1. e4 e5 2. Nf3 Nc6 3. Bc4 Bc5 4. c3 Nf6 5. d3 d6 6. O-O a6 7. a4 Ba7 *",
    "1. d4 d5 2. Bf4 Nf6 3. e3 e6 4. Nf3 c5 5. c3 Nc6 6. Nbd2 Bd6 7. Bg3 O-O 1-0",
    "1. b3 e5 2. Bb2 Nc6 3. e3 d5 4. Bb5 Bd6 5. f4 Qh4+ 6. g3 Qe7 7. Nf3 f6 0-1",
]

PLAYERS = ["Carlsen", "Müller", "Nakamura", "Ding", "Firouzja"]


def make_game(index: int) -> str:
    """Render one well-formed game as it appears in a database export."""
    movetext = OPENINGS[index % len(OPENINGS)]
    result = movetext.split()[-1]
    tags = [
        '[Event "Rated Blitz game"]',
        f'[Site "https://lichess.org/game{index:04d}"]',
        f'[White "{PLAYERS[index % len(PLAYERS)]}"]',
        f'[Black "{PLAYERS[(index + 2) % len(PLAYERS)]}"]',
        f'[Result "{result}"]',
        f'[WhiteElo "{1500 + 37 * index}"]',
        f'[BlackElo "{1620 - 11 * index}"]',
        '[TimeControl "180+0"]',
    ]
    # long movetext wraps onto a second line in real exports
    words = movetext.split()
    split_at = len(words) // 2
    body = " ".join(words[:split_at]) + "\n" + " ".join(words[split_at:])
    return "\n".join(tags) + "\n\n" + body + "\n"


WELL_FORMED_GAMES = [make_game(i) for i in range(10)]

MALFORMED_RECORDS = [
    # tag section with a broken tag pair
    '[Event "Rated Blitz game"]\n[White Carlsen]\n\n1. e4 e5 2. Nf3 1-0\n',
    # movetext without a termination marker
    '[Event "Rated Blitz game"]\n[White "Ding"]\n\n1. d4 d5 2. c4\n',
]


def write_corpus(directory: Path, records: list[str], name: str = "games.pgn") -> Path:
    """Write records separated by blank lines and return the file path."""
    path = Path(directory) / name
    path.write_text("\n".join(records), encoding="utf-8")
    return path


def mixed_records() -> list[str]:
    """Ten well-formed games with the two malformed records interleaved."""
    records = list(WELL_FORMED_GAMES)
    records.insert(3, MALFORMED_RECORDS[0])
    records.insert(8, MALFORMED_RECORDS[1])
    return records


@pytest.fixture
def corpus_dir():
    with tempfile.TemporaryDirectory() as temp_dir:
        yield Path(temp_dir)


@pytest.fixture
def corpus_path(corpus_dir):
    """Corpus of 10 well-formed and 2 malformed records."""
    return write_corpus(corpus_dir, mixed_records())


@pytest.fixture
def small_sample(corpus_path):
    """First four well-formed games of the mixed corpus."""
    return DatasetSampler(corpus_path).sample(ToTake.of(4))
