"""
Command line interface for compressing PGN files and tuning the codecs.

Commands:
  compress / decompress   single-file transforms at optimization level 0-3
  bench                   compare all four algorithms on a PGN database
  gen-algo                search height/dev for the dynamic Huffman coder
"""

import argparse
import logging
import sys
from pathlib import Path

from cgnbench import __version__
from cgnbench.codecs.algorithm import Algorithm
from cgnbench.errors import CgnBenchError, TransformFailure
from cgnbench.evaluation.benchmark_data import ToTake
from cgnbench.evaluation.benchmark_scripts import bench
from cgnbench.evaluation.result_reporter_factory import STORAGE_TYPES
from cgnbench.optimization.ga_types import FitnessObjective, GeneticAlgorithmConfig
from cgnbench.optimization.genetic_algorithm import genetic_algorithm


def _optimization_level(value: str) -> int:
    try:
        level = int(value)
    except ValueError:
        level = -1
    if not 0 <= level <= 3:
        raise argparse.ArgumentTypeError("Optimization level must be between 0 and 3")
    return level


def _to_take(value: str) -> ToTake:
    try:
        return ToTake.parse(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def _mutation_rate(value: str) -> float:
    try:
        rate = float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid mutation rate: {value!r}") from None
    return min(1.0, max(0.0, rate))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cgnbench",
        description="Compress PGN files and benchmark or tune the compression algorithms",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    for name, verb in (("compress", "Compress"), ("decompress", "Decompress")):
        sub = subparsers.add_parser(name, help=f"{verb} a single PGN file")
        sub.add_argument(
            "-o",
            dest="optimization_level",
            type=_optimization_level,
            default=3,
            help="Optimization level (0-3, default: 3)",
        )
        sub.add_argument("input_path", type=Path, help="Input file path")
        sub.add_argument("output_path", type=Path, help="Output file path")

    bench_parser = subparsers.add_parser(
        "bench", help="Benchmark the algorithms against a Lichess PGN database"
    )
    bench_parser.add_argument(
        "number_of_games",
        type=_to_take,
        help="Number of games to benchmark each algorithm on, or 'all'",
    )
    bench_parser.add_argument("input_db_path", type=Path, help="Input database path")
    bench_parser.add_argument(
        "output_path", nargs="?", default=None, help="Optional output path for the results"
    )
    _add_execution_arguments(bench_parser)

    ga_parser = subparsers.add_parser(
        "gen-algo",
        help="Run a genetic algorithm to find the best height and dev for dynamic Huffman",
    )
    ga_parser.add_argument("init_population", type=int, help="Initial population size")
    ga_parser.add_argument(
        "number_of_games",
        type=_to_take,
        help="Number of games to benchmark each individual on, or 'all'",
    )
    ga_parser.add_argument("generations", type=int, help="Number of generations to run")
    ga_parser.add_argument(
        "mutation_rate", type=_mutation_rate, help="Mutation rate (clamped to 0.0-1.0)"
    )
    ga_parser.add_argument("tournament_size", type=int, help="Tournament size")
    ga_parser.add_argument("height_min", type=float, help="Minimum height value")
    ga_parser.add_argument("height_max", type=float, help="Maximum height value")
    ga_parser.add_argument("dev_min", type=float, help="Minimum dev value")
    ga_parser.add_argument("dev_max", type=float, help="Maximum dev value")
    ga_parser.add_argument("input_db_path", type=Path, help="Input database path")
    ga_parser.add_argument("output_path", help="Output path for the results")
    ga_parser.add_argument("--seed", type=int, default=None, help="Random seed for a reproducible run")
    ga_parser.add_argument(
        "--mutation-scale",
        type=float,
        default=0.1,
        help="Largest mutation step as a fraction of the gene range (default: 0.1)",
    )
    ga_parser.add_argument(
        "--size-weight", type=float, default=1.0, help="Fitness weight of the compression ratio"
    )
    ga_parser.add_argument(
        "--time-weight", type=float, default=0.0, help="Fitness weight of mean seconds per record"
    )
    ga_parser.add_argument(
        "--failure-weight", type=float, default=1.0, help="Fitness weight of the failure share"
    )
    _add_execution_arguments(ga_parser)

    return parser


def _add_execution_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--use-ray", action="store_true", help="Evaluate in parallel with Ray (if installed)"
    )
    parser.add_argument("--ray-num-cpus", type=int, default=None, help="CPU limit for Ray")
    parser.add_argument(
        "--storage",
        choices=STORAGE_TYPES,
        default=None,
        help="Output format (default: inferred from the output path)",
    )


def compress_file(level: int, input_path: Path, output_path: Path) -> None:
    """Compress a PGN file; raises TransformFailure without writing on empty output."""
    algorithm = Algorithm.from_level(level)
    codec = algorithm.codec()
    pgn_str = input_path.read_text(encoding="utf-8")

    compressed = codec.compress(pgn_str)
    if not compressed:
        raise TransformFailure(codec.name, "compression")

    output_path.write_bytes(compressed)


def decompress_file(level: int, input_path: Path, output_path: Path) -> None:
    """Decompress a file; raises TransformFailure without writing on empty output."""
    algorithm = Algorithm.from_level(level)
    codec = algorithm.codec()
    data = input_path.read_bytes()

    pgn_str = codec.decompress(data)
    if not pgn_str:
        raise TransformFailure(codec.name, "decompression")

    output_path.write_text(pgn_str, encoding="utf-8")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    try:
        if args.command == "compress":
            try:
                compress_file(args.optimization_level, args.input_path, args.output_path)
            except TransformFailure:
                print("Compression failed")
                return 1

        elif args.command == "decompress":
            try:
                decompress_file(args.optimization_level, args.input_path, args.output_path)
            except TransformFailure:
                print("Decompression failed")
                return 1

        elif args.command == "bench":
            bench(
                args.number_of_games,
                args.input_db_path,
                args.output_path,
                use_ray=args.use_ray,
                ray_num_cpus=args.ray_num_cpus,
                storage_type=args.storage,
            )

        elif args.command == "gen-algo":
            config = GeneticAlgorithmConfig(
                init_population=args.init_population,
                number_of_games=args.number_of_games,
                generations=args.generations,
                mutation_rate=args.mutation_rate,
                tournament_size=args.tournament_size,
                height_min=args.height_min,
                height_max=args.height_max,
                dev_min=args.dev_min,
                dev_max=args.dev_max,
                input_db_path=args.input_db_path,
                output_path=args.output_path,
                seed=args.seed,
                mutation_scale=args.mutation_scale,
                objective=FitnessObjective(
                    size_weight=args.size_weight,
                    time_weight=args.time_weight,
                    failure_weight=args.failure_weight,
                ),
                use_ray=args.use_ray,
                ray_num_cpus=args.ray_num_cpus,
            )
            outcome = genetic_algorithm(config, storage_type=args.storage)
            print(
                f"Best height={outcome.best_params.height:.6f} "
                f"dev={outcome.best_params.dev:.6f} "
                f"fitness={outcome.best_fitness:.6f}"
            )

    except (CgnBenchError, ValueError, OSError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


def run() -> None:
    sys.exit(main())


if __name__ == "__main__":
    run()
