import logging

from .core.model_builder import prepare_pulp
from .core.results_processor import retrieve_results, print_ascii, print_csv
from .utils.pulp import SolveStatus, get_solver, solve_status

class MaxIncome:
    """
    Encapsulates the income allocation model setup, solving, and results processing.
    """
    def __init__(self, data, solver_name='cbc'):
        """
        Initializes the MaxIncome object.

        Args:
            data: An instance of the Data class with loaded configuration.
            solver_name (str): 'cbc' (bundled with PuLP) or 'highs'.
        """
        self.data = data
        self.solver_name = solver_name
        self.prob = None
        self.allocations = None
        self.results = None
        self.status = None

    def solve(self, timelimit=None, verbose=False, timelimit_steps=None):
        """
        Builds and solves the problem.

        Args:
            timelimit (int, optional): Time limit for the solver in seconds.
            verbose (bool): Enable verbose solver output.
            timelimit_steps (list, optional): Increasing time limits to retry with
                while the solver ends without any solution. Infeasible and
                unbounded problems are never retried.

        Returns:
            SolveStatus of the last attempt.
        """
        steps = timelimit_steps or [timelimit]

        logging.info("Starting PuLP solver...")
        for step in steps:
            self.prob, self.allocations = prepare_pulp(self.data)
            self.prob.solve(get_solver(self.solver_name, step, verbose))
            self.status = solve_status(self.prob)
            if self.status is not SolveStatus.UNDEFINED:
                break
            logging.info(f"Solver status: {self.status.value} with timelimit={step}")
            if step != steps[-1]:
                logging.info("Trying again with a longer time limit...")

        logging.info(f"Final solver status: {self.status.value}")
        return self.status

    def get_results(self):
        """
        Processes and returns the results if the solver was successful.

        Returns:
            dict: Per-year bracket incomes and totals, or None if solving
                  failed or hasn't been run.
        """
        if self.prob is None or self.status is None:
            logging.info("Solver has not been run yet.")
            return None

        if self.status is not SolveStatus.OPTIMAL:
            logging.info(f"Solver did not find an optimal solution (Status: {self.status.value}).")
            return None

        self.results = retrieve_results(self.data, self.prob)
        return self.results

    def print_results_ascii(self):
        """Prints the results bracket by bracket."""
        if self.results:
            print_ascii(self.results, self.data)
        else:
            print("No results available to print.")

    def print_results_csv(self):
        """Prints the results in CSV format."""
        if self.results:
            print_csv(self.results, self.data)
        else:
            print("No results available to print.")
