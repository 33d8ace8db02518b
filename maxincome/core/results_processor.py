import pulp

from maxincome.core.model_builder import cumulative_revenues
from maxincome.utils.pulp import SolveStatus, solve_status


def retrieve_results(S, prob):
    """
    Reads the bracket incomes of a solved problem back out, grouped by year.

    Raises:
        ValueError: If the problem has not been solved to optimality.
    """
    status = solve_status(prob)
    if status is not SolveStatus.OPTIMAL:
        raise ValueError(f"Results need an optimal solution, solver status is {status.value}")

    all_values = { v.name: v.varValue for v in prob.variables() }
    results = {
        'status': status.value,
        'objective': pulp.value(prob.objective),
        'interest_rate': S.interest_rate,
        'reference_year': S.reference_year,
        'years': {},
    }

    running_revenue = cumulative_revenues(S.revenues)
    cumulative_income = 0.0
    for i, (year, revenue) in enumerate(zip(S.years, S.revenues)):
        brackets = S.bracket_table.brackets_for(year)
        amounts = [all_values.get(f'Bracket_Income_{year}_{j}') or 0.0 for j in range(len(brackets))]
        total = sum(amounts)
        cumulative_income += total
        results['years'][year] = {
            'brackets': amounts,
            'rates': [b.rate for b in brackets],
            'total': total,
            'revenue': revenue,
            'cumulative_income': cumulative_income,
            'cumulative_revenue': running_revenue[i],
        }
    results['total'] = cumulative_income
    return results


def print_ascii(results, S):
    if results is None:
        print("No solution found to print.")
        return

    print(f"Solver Status: {results['status']}")
    print(f"After-tax income ({results['reference_year']} dollars): {results['objective']:.2f}")
    print()

    for year in S.years:
        r_res = results['years'][year]
        print(f"{year}:")
        for j, amount in enumerate(r_res['brackets']):
            print(f"bracket {j + 1} income: {amount:.2f}")
        print(f"total income: {r_res['total']:.2f}\n")


def print_csv(results, S):
    if results is None:
        print("No solution found to print.")
        return

    width = max(len(results['years'][year]['brackets']) for year in S.years)
    columns = ["year", "revenue"] + [f"bracket_{j + 1}" for j in range(width)] + ["total", "cumulative_income"]
    print(",".join(columns))
    for year in S.years:
        r_res = results['years'][year]
        amounts = r_res['brackets'] + [0.0] * (width - len(r_res['brackets']))
        values = [r_res['revenue']] + amounts + [r_res['total'], r_res['cumulative_income']]
        print(("%d" + ",%.2f" * len(values)) % ((year,) + tuple(values)))
