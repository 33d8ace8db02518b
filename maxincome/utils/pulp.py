import enum

import pulp


class SolveStatus(enum.Enum):
    UNDEFINED = "Undefined"
    INFEASIBLE = "Infeasible"
    FEASIBLE = "Feasible"
    OPTIMAL = "Optimal"
    UNBOUNDED = "Unbounded"


def solve_status(prob):
    """
    Maps PuLP's (status, sol_status) pair onto a SolveStatus.

    PuLP reports a time-limited MIP that found an incumbent as status
    Optimal with sol_status IntegerFeasible, and a stopped run that found
    nothing as Not Solved.
    """
    if prob.status == pulp.LpStatusOptimal:
        if prob.sol_status == pulp.LpSolutionIntegerFeasible:
            return SolveStatus.FEASIBLE
        return SolveStatus.OPTIMAL
    if prob.status == pulp.LpStatusInfeasible:
        return SolveStatus.INFEASIBLE
    if prob.status == pulp.LpStatusUnbounded:
        return SolveStatus.UNBOUNDED
    if prob.status == pulp.LpStatusNotSolved and prob.sol_status == pulp.LpSolutionIntegerFeasible:
        return SolveStatus.FEASIBLE
    return SolveStatus.UNDEFINED


def get_solver(name='cbc', timelimit=None, verbose=False):
    """CBC ships with PuLP; HiGHS needs the highs executable on PATH."""
    if name == 'cbc':
        return pulp.PULP_CBC_CMD(timeLimit=float(timelimit) if timelimit else None, msg=verbose)
    if name == 'highs':
        return pulp.HiGHS_CMD(timeLimit=float(timelimit) if timelimit else None, msg=verbose)
    raise ValueError(f"Unknown solver '{name}', expected 'cbc' or 'highs'")


def add_fill_order_constraints(prob, current_var, current_width, previous_var, previous_width, tolerance, base_name):
    """
    Adds constraints to model: current_var > 0 only once previous_var is full.

    Uses a binary indicator variable (y):
    1. y <= (previous_var + eps) / previous_width
       y can only be 1 when previous_var is (within eps) at previous_width.
    2. current_var <= y * current_width
       With y = 0 nothing may be allocated to current_var.

    eps is tolerance * previous_width. It only absorbs rounding on a fully
    used bracket: it has to stay below the solver's primal feasibility
    tolerance, otherwise the solver can leave eps unfilled in the lower
    bracket and move it up.

    Args:
        prob: The PuLP LpProblem instance.
        current_var: LpVariable for the bracket being gated.
        current_width: Upper bound of current_var.
        previous_var: LpVariable for the bracket below it.
        previous_width: Upper bound of previous_var.
        tolerance: Relative slack on "previous_var is full".
        base_name: A string prefix for naming the indicator and constraints.

    Returns:
        The binary indicator variable.
    """
    y = pulp.LpVariable(f"Fill_Indicator_{base_name}", cat=pulp.LpBinary)
    eps = tolerance * previous_width

    prob += y <= (previous_var + eps) / previous_width, f"Fill_Order_{base_name}_prev_full"
    prob += current_var <= current_width * y, f"Fill_Order_{base_name}_gate"
    return y
