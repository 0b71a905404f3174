"""
Tests for the command line interface.

Runs every subcommand in-process against temporary files.
"""

import json

import pytest

from cgnbench.main import build_parser, compress_file, decompress_file, main
from cgnbench.errors import ConfigError, TransformFailure

from .conftest import WELL_FORMED_GAMES


@pytest.fixture
def game_file(corpus_dir):
    path = corpus_dir / "game.pgn"
    path.write_text(WELL_FORMED_GAMES[0], encoding="utf-8")
    return path


class TestParser:
    def test_default_optimization_level(self):
        args = build_parser().parse_args(["compress", "in.pgn", "out.bin"])
        assert args.optimization_level == 3

    def test_invalid_optimization_level_rejected(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["compress", "-o", "4", "in.pgn", "out.bin"])

    def test_number_of_games_accepts_all(self):
        args = build_parser().parse_args(["bench", "all", "db.pgn"])
        assert args.number_of_games.is_all
        assert args.output_path is None

    def test_number_of_games_rejects_text(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["bench", "some", "db.pgn"])

    def test_mutation_rate_is_clamped(self):
        args = build_parser().parse_args(
            ["gen-algo", "10", "5", "3", "2.5", "2", "1", "10", "1", "5", "db.pgn", "out.json"]
        )
        assert args.mutation_rate == 1.0
        assert args.seed is None


class TestCompressDecompress:
    @pytest.mark.parametrize("level", ["0", "1", "2", "3"])
    def test_round_trip_through_files(self, corpus_dir, game_file, level):
        packed = corpus_dir / "game.bin"
        restored = corpus_dir / "restored.pgn"

        assert main(["compress", "-o", level, str(game_file), str(packed)]) == 0
        assert main(["decompress", "-o", level, str(packed), str(restored)]) == 0
        assert restored.read_text(encoding="utf-8") == WELL_FORMED_GAMES[0]

    def test_compression_failure_writes_nothing(self, corpus_dir, capsys):
        source = corpus_dir / "notes.txt"
        source.write_text("not a game record", encoding="utf-8")
        target = corpus_dir / "notes.bin"

        assert main(["compress", "-o", "0", str(source), str(target)]) == 1
        assert "Compression failed" in capsys.readouterr().out
        assert not target.exists()

    def test_decompression_failure_writes_nothing(self, corpus_dir, capsys):
        source = corpus_dir / "empty.bin"
        source.write_bytes(b"")
        target = corpus_dir / "restored.pgn"

        assert main(["decompress", str(source), str(target)]) == 1
        assert "Decompression failed" in capsys.readouterr().out
        assert not target.exists()

    def test_missing_input_is_an_error(self, corpus_dir, capsys):
        code = main(["compress", str(corpus_dir / "missing.pgn"), str(corpus_dir / "out.bin")])
        assert code == 2
        assert "Error" in capsys.readouterr().err

    def test_helpers_raise_transform_failure(self, corpus_dir):
        source = corpus_dir / "notes.txt"
        source.write_text("not a game record", encoding="utf-8")
        with pytest.raises(TransformFailure):
            compress_file(0, source, corpus_dir / "out.bin")

    def test_helpers_reject_unknown_level(self, game_file, corpus_dir):
        with pytest.raises(ConfigError):
            decompress_file(7, game_file, corpus_dir / "out.pgn")


class TestBenchCommand:
    def test_prints_table(self, corpus_path, capsys):
        assert main(["bench", "3", str(corpus_path)]) == 0

        out = capsys.readouterr().out
        assert "Benchmarking 3 games" in out
        for name in ("bincode", "huffman", "dynamic-huffman", "opening-huffman"):
            assert name in out

    def test_writes_json_report(self, corpus_path, corpus_dir):
        output = corpus_dir / "bench.json"
        assert main(["bench", "all", str(corpus_path), str(output)]) == 0

        payload = json.loads(output.read_text())
        assert payload["kind"] == "benchmark"
        assert payload["data"]["sample_size"] == 10
        assert payload["data"]["skipped_records"] == 2

    def test_missing_corpus_exit_code(self, corpus_dir, capsys):
        assert main(["bench", "5", str(corpus_dir / "missing.pgn")]) == 2
        assert "not found" in capsys.readouterr().err


class TestGenAlgoCommand:
    def _args(self, corpus_path, output, *extra):
        # population, games, generations, rate, tournament, height and dev bounds
        return [
            "gen-algo", "4", "2", "2", "0.3", "2", "10", "200", "1", "30",
            str(corpus_path), str(output), "--seed", "3", *extra,
        ]

    def test_runs_and_writes_results(self, corpus_path, corpus_dir, capsys):
        output = corpus_dir / "ga.json"
        assert main(self._args(corpus_path, output)) == 0

        assert "Best height=" in capsys.readouterr().out
        payload = json.loads(output.read_text())
        assert payload["kind"] == "optimization"
        assert payload["data"]["config"]["seed"] == 3
        assert len(payload["data"]["history"]) == 2

    def test_invalid_bounds_exit_code(self, corpus_path, corpus_dir, capsys):
        args = self._args(corpus_path, corpus_dir / "ga.json")
        args[6], args[7] = "200", "10"
        assert main(args) == 2
        assert "height_min" in capsys.readouterr().err
        assert not (corpus_dir / "ga.json").exists()

    def test_tournament_larger_than_population(self, corpus_path, corpus_dir):
        args = self._args(corpus_path, corpus_dir / "ga.json")
        args[5] = "9"
        assert main(args) == 2

    def test_pickle_output(self, corpus_path, corpus_dir):
        output = corpus_dir / "ga.pkl"
        assert main(self._args(corpus_path, output, "--storage", "pickle")) == 0
        assert output.read_bytes()[:1] == b"\x80"

    def test_unbounded_height_range_exit_code(self, corpus_path, corpus_dir, capsys):
        args = self._args(corpus_path, corpus_dir / "ga.json")
        args[6], args[7] = "0", "1e308"
        assert main(args) == 2
        assert "too wide" in capsys.readouterr().err

    def test_vanishing_dev_range_runs(self, corpus_path, corpus_dir, capsys):
        args = self._args(corpus_path, corpus_dir / "ga.json")
        args[8], args[9] = "0", "1e-160"
        assert main(args) == 0
        assert "Best height=" in capsys.readouterr().out
