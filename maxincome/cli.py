#!/usr/bin/env python3

import argparse
import logging
import sys # Import sys for sys.exit

import maxincome.core.data_loader as dl  # .Data
from maxincome.core.brackets import ConfigError
from maxincome.maxincome import MaxIncome
from maxincome.utils.pulp import SolveStatus


def main(argv=None):
    # Instantiate the parser
    parser = argparse.ArgumentParser(description="Allocate income across tax brackets to maximize after-tax income")
    parser.add_argument('-v', '--verbose', action='store_true',
                        help="Extra output from solver")
    parser.add_argument('--csv', action='store_true', help="Generate CSV outputs")
    parser.add_argument('--timelimit',
                        help="After given seconds return the best answer found (solver dependent)")
    parser.add_argument('--solver', choices=['cbc', 'highs'], default='cbc',
                        help="Solver backend (default: cbc, bundled with PuLP)")
    parser.add_argument('--interest', type=float,
                        help="Yearly interest rate in percent, overrides the configuration file")
    parser.add_argument('--reference-year', type=int,
                        help="Year future income is discounted to, overrides the configuration file")
    parser.add_argument('--rates-can-decrease', action='store_true',
                        help="Force brackets to fill lowest first even if a higher bracket has a lower rate")
    parser.add_argument('conffile', nargs='?', default=dl.SAMPLE_FILE,
                        help="Configuration file in TOML format (default: bundled 2012-2014 sample)")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO if args.verbose else logging.WARNING)

    # -- Load Configuration File --
    data = dl.Data()
    try:
        data.load_config(args.conffile)
    except (ConfigError, OSError) as e:
        print(f"Bad configuration: {e}")
        sys.exit(1)

    if args.interest is not None:
        data.interest_rate = args.interest / 100
    if args.reference_year is not None:
        data.reference_year = args.reference_year
    if args.rates_can_decrease:
        data.rates_can_decrease = True

    maxincome = MaxIncome(data, solver_name=args.solver)
    try:
        status = maxincome.solve(timelimit=args.timelimit, verbose=args.verbose)
    except ConfigError as e:
        print(f"Bad configuration: {e}")
        sys.exit(1)

    # --- Process Results ---
    if status is SolveStatus.OPTIMAL:
        maxincome.get_results()
        if args.csv:
            maxincome.print_results_csv()
        else:
            maxincome.print_results_ascii()
    elif status is SolveStatus.FEASIBLE:
        print("Feasible solution found, but it is not proven optimal.")
        sys.exit(1)
    elif status is SolveStatus.INFEASIBLE:
        print("The problem has no feasible solution.")
        sys.exit(1)
    elif status is SolveStatus.UNBOUNDED:
        print("The objective is unbounded.")
        sys.exit(1)
    else:
        print("Feasible solution hasn't been found (but may exist).")
        sys.exit(1)

if __name__== "__main__":
    main()
