"""Command-line interface for the breeding simulator."""

from __future__ import annotations

import argparse
import logging
import random
from typing import List, Optional

from .advisor import OfflineAdvisor
from .config import FOUNDER_ALLELE_FREQUENCY, INITIAL_ENV_VARIANCE, POPULATION_SIZE, SimulationConfig
from .data import write_genotype_csv, write_history_csv, write_phenotype_csv
from .loci import parse_trait
from .plotting import genome_heatmap, progress_plot, trait_distribution_plot
from .population import create_initial_population
from .selection import SelectionCriterion
from .simulation import BreedingProgram

logger = logging.getLogger("cornbreeder")


def _config(args: argparse.Namespace) -> SimulationConfig:
    return SimulationConfig(
        population_size=args.population_size,
        founder_allele_frequency=args.allele_frequency,
        initial_env_variance=args.env_variance,
    )


def command_init(args: argparse.Namespace) -> None:
    config = _config(args)
    population = create_initial_population(config.initial_env_variance, rng=random.Random(args.seed), config=config)
    write_genotype_csv(population, args.genotype_out)
    if args.phenotype_out:
        write_phenotype_csv(population, args.phenotype_out)
    if args.heatmap_html:
        genome_heatmap(population, args.heatmap_html)


def command_run(args: argparse.Namespace) -> None:
    config = _config(args)
    rng = random.Random(args.seed)
    advisor = OfflineAdvisor(random.Random(rng.random())) if args.scenarios else None
    program = BreedingProgram(config, rng=rng, advisor=advisor)
    for _ in range(args.generations):
        parents = program.select(args.criterion, args.intensity, use_breeding_value=args.use_gebv)
        result = program.advance(plant.id for plant in parents)
        logger.info("F%d [%s] %s", result.generation, result.weather, result.analysis)
    write_history_csv(program.history, args.history_out)
    if args.genotype_out:
        write_genotype_csv(program.population, args.genotype_out)
    if args.phenotype_out:
        write_phenotype_csv(program.population, args.phenotype_out)
    if args.plot_html:
        progress_plot(program.history, args.plot_html)
    if args.distribution_html:
        final_selection = program.select(args.criterion, args.intensity, use_breeding_value=args.use_gebv)
        trait_distribution_plot(
            program.population,
            parse_trait(args.distribution_trait),
            args.distribution_html,
            selected_ids=[plant.id for plant in final_selection],
        )


def _add_population_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--population-size", dest="population_size", type=int, default=POPULATION_SIZE)
    parser.add_argument("--env-variance", dest="env_variance", type=float, default=INITIAL_ENV_VARIANCE)
    parser.add_argument("--allele-frequency", dest="allele_frequency", type=float, default=FOUNDER_ALLELE_FREQUENCY)
    parser.add_argument("--seed", type=int, default=None)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="cornbreeder", description="Maize selective breeding simulator")
    parser.add_argument("--log-level", dest="log_level", default="INFO")
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser("init", help="Create a founder population")
    _add_population_arguments(init_parser)
    init_parser.add_argument("--genotype-out", dest="genotype_out", required=True)
    init_parser.add_argument("--phenotype-out", dest="phenotype_out")
    init_parser.add_argument("--heatmap-html", dest="heatmap_html")
    init_parser.set_defaults(func=command_init)

    run_parser = subparsers.add_parser("run", help="Run several generations of truncation selection")
    _add_population_arguments(run_parser)
    run_parser.add_argument("--generations", type=int, default=10)
    run_parser.add_argument(
        "--criterion",
        choices=[criterion.value for criterion in SelectionCriterion],
        default=SelectionCriterion.INDEX.value,
    )
    run_parser.add_argument("--intensity", type=float, default=0.2)
    run_parser.add_argument("--use-gebv", dest="use_gebv", action="store_true")
    run_parser.add_argument("--scenarios", action="store_true", help="Draw a new environment every generation")
    run_parser.add_argument("--history-out", dest="history_out", required=True)
    run_parser.add_argument("--genotype-out", dest="genotype_out")
    run_parser.add_argument("--phenotype-out", dest="phenotype_out")
    run_parser.add_argument("--plot-html", dest="plot_html")
    run_parser.add_argument("--distribution-html", dest="distribution_html")
    run_parser.add_argument("--distribution-trait", dest="distribution_trait", default="yield")
    run_parser.set_defaults(func=command_run)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level.upper(), format="%(levelname)s %(name)s: %(message)s")
    try:
        args.func(args)
    except ValueError as exc:
        raise SystemExit(f"error: {exc}") from exc


if __name__ == "__main__":
    main()
