"""
ClausingSIM Command-line Entry Point
====================================

    python -m clausingsim [--r-screen R] [--r-accel R] [--thick-screen T]
                          [--thick-accel T] [--grid-space G] [--npart N]
                          [--seed S] [--workers K] [--max-collisions M] [-v]

Defaults reproduce the documented example grid pair.
"""

import argparse
import logging
import sys

from . import __version__
from .constants import EXAMPLE_PARAMS, MAX_COLLISIONS
from .params import ClausingParams, InvalidParameter
from .simulation import run_simulation

EXIT_INVALID_PARAMETER = 2


def build_parser():
    parser = argparse.ArgumentParser(
        prog='clausingsim',
        description='Monte Carlo Clausing factor of a screen/accel grid pair',
    )
    parser.add_argument('--thick-screen', type=float, default=EXAMPLE_PARAMS['thick_screen'],
                        help='Screen grid thickness (default: %(default)s)')
    parser.add_argument('--thick-accel', type=float, default=EXAMPLE_PARAMS['thick_accel'],
                        help='Accel grid thickness (default: %(default)s)')
    parser.add_argument('--r-screen', type=float, default=EXAMPLE_PARAMS['r_screen'],
                        help='Screen aperture radius (default: %(default)s)')
    parser.add_argument('--r-accel', type=float, default=EXAMPLE_PARAMS['r_accel'],
                        help='Accel aperture radius (default: %(default)s)')
    parser.add_argument('--grid-space', type=float, default=EXAMPLE_PARAMS['grid_space'],
                        help='Axial gap between grids (default: %(default)s)')
    parser.add_argument('--npart', type=int, default=EXAMPLE_PARAMS['npart'],
                        help='Number of particles (default: %(default)s)')
    parser.add_argument('--seed', type=int, default=None,
                        help='Random seed (default: fresh entropy)')
    parser.add_argument('--workers', type=int, default=1,
                        help='Concurrent particle batches (default: %(default)s)')
    parser.add_argument('--max-collisions', type=int, default=MAX_COLLISIONS,
                        help='Wall strikes before a particle is lost (default: %(default)s)')
    parser.add_argument('-v', '--verbose', action='store_true',
                        help='Log run progress')
    parser.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    return parser


def format_results(results):
    """Result lines in the order clausing_factor, max_count, nlost, den_cor."""
    return "\n".join([
        "Results:",
        f"  Clausing Factor: {results.clausing_factor:.6f}",
        f"  Max Count: {results.max_count}",
        f"  Particles Lost: {results.nlost}",
        f"  Downstream Correction Factor: {results.den_cor:.6f}",
    ])


def main(argv=None):
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format='%(asctime)s %(levelname)s %(name)s: %(message)s',
    )

    try:
        params = ClausingParams(
            thick_screen=args.thick_screen,
            thick_accel=args.thick_accel,
            r_screen=args.r_screen,
            r_accel=args.r_accel,
            grid_space=args.grid_space,
            npart=args.npart,
        )
        print("Running Clausing factor calculation...")
        print(f"Parameters: {params}")
        print()
        results = run_simulation(params, seed=args.seed, n_workers=args.workers,
                                 max_collisions=args.max_collisions)
    except InvalidParameter as exc:
        print(f"clausingsim: invalid parameter: {exc}", file=sys.stderr)
        return EXIT_INVALID_PARAMETER

    print(format_results(results))
    return 0


if __name__ == '__main__':
    sys.exit(main())
