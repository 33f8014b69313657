"""
Main application entry point for the Tabu VRP solver.
Provides a CLI for CSV instances and generated instances.
"""

import argparse
import logging
import os
import random
import sys
from typing import Dict

from tabu_vrp.algorithms.initial_solution import InitialSolutionBuilder
from tabu_vrp.algorithms.single_route import SingleRouteTabuSearch
from tabu_vrp.algorithms.tabu_search import TabuSearch
from tabu_vrp.algorithms.types import Transformation, NeighborhoodKind, GenerationMethod
from tabu_vrp.config import TABU_CONFIG, TABU_PRESETS, VRP_CONFIG, GENERATOR_CONFIG, PATHS
from tabu_vrp.core.exceptions import TabuVRPException
from tabu_vrp.core.logger import setup_logger
from tabu_vrp.core.validators import ConfigValidator
from tabu_vrp.data_processing.generator import InstanceGenerator
from tabu_vrp.data_processing.loader import load_instance
from tabu_vrp.evaluation.result_exporter import ResultExporter
from tabu_vrp.evaluation.validator import SolutionValidator
from tabu_vrp.models.vrp_model import create_vrp_problem_from_dict


def main():
    """Main application entry point."""
    parser = create_argument_parser()
    args = parser.parse_args()

    level = logging.DEBUG if args.verbose else logging.INFO
    logger = setup_logger('tabu_vrp', level=level, log_dir=PATHS['logs'])
    logger.info("=" * 60)
    logger.info("Tabu VRP Solver Starting")
    logger.info("=" * 60)

    try:
        problem = load_problem(args)
        run_optimization(problem, args)
    except KeyboardInterrupt:
        logger.info("Operation cancelled by user")
        print("\nOperation cancelled by user.")
        sys.exit(1)
    except TabuVRPException as e:
        logger.error(f"{e.kind.value}: {e}", exc_info=args.verbose)
        print(f"Error: {e}")
        sys.exit(1)
    except ValueError as e:
        logger.error(f"Invalid input: {e}", exc_info=args.verbose)
        print(f"Error: {e}")
        sys.exit(1)


def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Tabu VRP Solver: capacitated Vehicle Routing Problem solved with tabu search",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Solve a Solomon-format CSV instance
  python main.py --instance data/raw/C101.csv

  # Generate and solve a random instance
  python main.py --generate --customers 50 --capacity 100

  # Complex neighborhood from a nearest-neighbor start
  python main.py --generate --init greedy --neighborhood complex

  # Single giant route, split, then a second pass
  python main.py --generate --init random_single --double-pass --preset intensive
        """
    )

    data_group = parser.add_mutually_exclusive_group(required=True)
    data_group.add_argument('--instance', type=str,
                            help='Path to CSV instance (CUST NO., XCOORD., YCOORD., DEMAND)')
    data_group.add_argument('--generate', action='store_true',
                            help='Generate a random instance')

    parser.add_argument('--customers', type=int, default=GENERATOR_CONFIG['n_customers'],
                        help='Number of customers for generated instances')
    parser.add_argument('--capacity', type=float,
                        help=f"Vehicle capacity (default: from file or {VRP_CONFIG['vehicle_capacity']})")

    parser.add_argument('--init', type=str, default=GenerationMethod.RANDOM.value,
                        choices=[m.value for m in GenerationMethod],
                        help='Initial solution method')
    parser.add_argument('--transformation', type=str, default=TABU_CONFIG['transformation'],
                        choices=[t.value for t in Transformation],
                        help='Route transformation')
    parser.add_argument('--neighborhood', type=str, default=TABU_CONFIG['neighborhood_kind'],
                        choices=[k.value for k in NeighborhoodKind],
                        help='Neighborhood kind (complex requires swap)')
    parser.add_argument('--preset', type=str, choices=sorted(TABU_PRESETS),
                        help='Tabu parameter preset')
    parser.add_argument('--tabu-size', type=int, help='Tabu memory capacity (T)')
    parser.add_argument('--iterations', type=int, help='Number of iterations (M)')
    parser.add_argument('--neighborhood-size', type=int, help='Candidates per iteration (N)')
    parser.add_argument('--meta-attempts', type=int,
                        help='Cross-route exchanges tried per route pair')
    parser.add_argument('--double-pass', action='store_true',
                        help='Run a second tabu pass after splitting a single route')
    parser.add_argument('--seed', type=int, help='Random seed')

    parser.add_argument('--output', type=str, default=PATHS['results'],
                        help='Output directory for results')
    parser.add_argument('--no-export', action='store_true', help='Skip result files')
    parser.add_argument('--no-plots', action='store_true', help='Skip plots')
    parser.add_argument('--verbose', action='store_true', help='Debug logging')

    return parser


def build_config(args) -> Dict:
    """Merge defaults, preset and explicit CLI overrides."""
    config = TABU_CONFIG.copy()
    if args.preset:
        config.update(TABU_PRESETS[args.preset])

    overrides = {
        'tabu_capacity': args.tabu_size,
        'max_iterations': args.iterations,
        'neighborhood_size': args.neighborhood_size,
        'meta_exchange_attempts': args.meta_attempts,
        'seed': args.seed,
    }
    config.update({k: v for k, v in overrides.items() if v is not None})
    config['transformation'] = args.transformation
    config['neighborhood_kind'] = args.neighborhood
    config['double_pass'] = args.double_pass
    return config


def load_problem(args):
    """Load the CSV instance or generate a random one."""
    logger = logging.getLogger('tabu_vrp.main')

    if args.capacity is not None:
        ConfigValidator.validate_vrp_config({'vehicle_capacity': args.capacity})

    if args.instance:
        logger.info(f"Loading instance: {args.instance}")
        return load_instance(args.instance, args.capacity)

    generator_config = {'n_customers': args.customers}
    if args.seed is not None:
        generator_config['seed'] = args.seed
    generator = InstanceGenerator(generator_config)
    data = generator.generate(vehicle_capacity=args.capacity,
                              name=f"random_{args.customers}")

    if not args.no_export:
        output_file = os.path.join(args.output, f"{data['name']}.csv")
        generator.save_to_csv(data, output_file)

    return create_vrp_problem_from_dict(data)


def run_optimization(problem, args):
    """Build the initial solution, run the search and report."""
    logger = logging.getLogger('tabu_vrp.main')
    config = build_config(args)

    info = problem.get_problem_info()
    print(f"Problem '{info['name']}': {info['num_customers']} customers, "
          f"capacity {info['vehicle_capacity']:g}, "
          f"at least {info['min_vehicles_needed']} vehicles")

    method = GenerationMethod.parse(args.init)
    builder = InitialSolutionBuilder(problem, random.Random(config['seed']))
    initial = builder.build(method)
    print(f"Initial solution ({method.value}): cost {initial.global_cost:.2f}, "
          f"{initial.n_routes_used()} routes")

    if method is GenerationMethod.RANDOM_SINGLE:
        search = SingleRouteTabuSearch(config)
        best = search.run(initial)
        history = search.combined_history()
        statistics = search.get_statistics()
    else:
        search = TabuSearch(config)
        best = search.run(initial)
        history = search.history
        statistics = search.get_statistics()

    validation = SolutionValidator(problem).validate_solution(best)
    for error in validation['errors']:
        logger.warning(f"Validation error: {error}")

    print("=" * 60)
    print(f"Best cost: {best.global_cost:.2f} ({best.n_routes_used()} routes)")
    if initial.global_cost > 0:
        improvement = (initial.global_cost - best.global_cost) / initial.global_cost * 100
        print(f"Improvement over initial solution: {improvement:.2f}%")
    print(f"Valid: {validation['is_valid']}, feasible: {validation['is_feasible']}")
    print(f"Time: {statistics['execution_time']:.2f}s")

    if not args.no_export:
        exporter = ResultExporter(args.output)
        exporter.export_history(history)
        exporter.export_routes(best, problem)
        exporter.export_summary(best, problem, statistics, config, initial=initial)
        exporter.export_comparison({'initial': initial, 'tabu': best})

    if not args.no_plots:
        from tabu_vrp.visualization.plotter import Plotter

        os.makedirs(args.output, exist_ok=True)
        plotter = Plotter()
        fig = plotter.plot_routes(best, problem,
                                  save_path=os.path.join(args.output, 'routes.png'))
        plotter.close(fig)
        if history:
            fig = plotter.plot_convergence(history,
                                           save_path=os.path.join(args.output, 'convergence.png'))
            plotter.close(fig)
        print(f"Plots saved to: {args.output}")


if __name__ == "__main__":
    main()
