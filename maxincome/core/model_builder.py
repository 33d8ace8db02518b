import logging
from dataclasses import dataclass

import pulp
from maxincome.utils.pulp import add_fill_order_constraints
from maxincome.core.brackets import BracketTable, ConfigError
from maxincome.core.data_loader import (BRACKET_FILE, DEFAULT_FILL_TOLERANCE, DEFAULT_UNBOUNDED_WIDTH,
                                        load_bracket_file)

# Maximize: sum over years and brackets of (1 - rate) * income * discount
# Subject to: cumulative income through year i <= cumulative revenue through year i
# Subject to: cumulative income through the last year == total revenue
# Bounds: 0 <= income in bracket <= bracket width


@dataclass(frozen=True)
class YearRecord:
    year: int
    revenue: float
    offset: int  # years after the reference year; <= 0 is not discounted


def discount_factor(offset, interest_rate):
    return (1.0 + interest_rate) ** -offset if offset > 0 else 1.0


def cumulative_revenues(revenues):
    total = 0.0
    running = []
    for r in revenues:
        total += r
        running.append(total)
    return running


def add_bracket_variable(record, j, bracket, interest_rate, unbounded_width):
    """Bracket income variable for one (year, bracket) and its after-tax, present-value objective term."""
    income = pulp.LpVariable(f"Bracket_Income_{record.year}_{j}", lowBound=0,
                             upBound=bracket.width(unbounded_width))
    term = (1.0 - bracket.rate) * discount_factor(record.offset, interest_rate) * income
    return income, term


def add_year_constraint(prob, year, cumulative_income, cumulative_revenue, is_final_year):
    # Earlier years may leave revenue unallocated to be picked up later; the last year can't
    if is_final_year:
        prob += cumulative_income == cumulative_revenue, f"Cumulative_Revenue_{year}"
    else:
        prob += cumulative_income <= cumulative_revenue, f"Cumulative_Revenue_{year}"


def validate_inputs(years, revenues, interest_rate):
    if not years:
        raise ConfigError("At least one year is required")
    if len(years) != len(revenues):
        raise ConfigError(f"Got {len(years)} years but {len(revenues)} revenues")
    if any(b <= a for a, b in zip(years, years[1:])):
        raise ConfigError(f"Years must be strictly increasing: {list(years)}")
    if any(r < 0 for r in revenues):
        raise ConfigError(f"Revenues must not be negative: {list(revenues)}")
    if interest_rate < 0:
        raise ConfigError(f"Interest rate must not be negative, got {interest_rate}")


def build_model(years, revenues, interest_rate, reference_year, bracket_table=None,
                rates_can_decrease=False, fill_tolerance=DEFAULT_FILL_TOLERANCE,
                unbounded_width=DEFAULT_UNBOUNDED_WIDTH):
    """
    Builds the income allocation problem.

    Args:
        years: Strictly increasing calendar years.
        revenues: Revenue earned in each year.
        interest_rate: Yearly rate used to discount years after reference_year (0.055 for 5.5%).
        reference_year: Year the present value is taken in.
        bracket_table: BracketTable; defaults to the reference schedule.
        rates_can_decrease: Add fill indicators so brackets fill lowest first
            even when a higher bracket has a lower rate.
        fill_tolerance: Relative slack on "previous bracket is full".
        unbounded_width: Capacity given to the unbounded top bracket.

    Returns:
        (prob, allocations) where allocations maps (year, j) to the bracket income variable.
    """
    validate_inputs(years, revenues, interest_rate)
    if bracket_table is None:
        bracket_table = BracketTable.from_schedule(load_bracket_file(BRACKET_FILE))

    prob = pulp.LpProblem("MaxIncome", pulp.LpMaximize)
    records = [YearRecord(y, r, y - reference_year) for y, r in zip(years, revenues)]
    running_revenue = cumulative_revenues(revenues)

    allocations = {}
    objective_terms = []
    cumulative_income = pulp.LpAffineExpression()
    final_index = len(records) - 1

    for i, record in enumerate(records):
        brackets = bracket_table.brackets_for(record.year)
        if not rates_can_decrease and not bracket_table.rates_non_decreasing(record.year):
            logging.warning(f"Marginal rates for {record.year} decrease but fill order is not enforced; "
                            "brackets may be allocated out of order")

        year_income = []
        for j, bracket in enumerate(brackets):
            income, term = add_bracket_variable(record, j, bracket, interest_rate, unbounded_width)
            allocations[record.year, j] = income
            objective_terms.append(term)
            year_income.append(income)

            # Without this the solver may prefer a cheaper higher bracket over an unfilled lower one
            if rates_can_decrease and j > 0:
                add_fill_order_constraints(prob, income, bracket.width(unbounded_width),
                                           allocations[record.year, j - 1],
                                           brackets[j - 1].width(unbounded_width),
                                           fill_tolerance, f"{record.year}_{j}")

        cumulative_income = cumulative_income + pulp.lpSum(year_income)
        add_year_constraint(prob, record.year, cumulative_income, running_revenue[i], i == final_index)
        logging.debug(f"Year {record.year}: offset {record.offset}, {len(brackets)} brackets, "
                      f"cumulative revenue {running_revenue[i]}")

    prob += pulp.lpSum(objective_terms), "After_Tax_Income"
    return prob, allocations


def prepare_pulp(S):
    """Builds the problem from a loaded Data object."""
    return build_model(S.years, S.revenues, S.interest_rate, S.reference_year,
                       bracket_table=S.bracket_table,
                       rates_can_decrease=S.rates_can_decrease,
                       fill_tolerance=S.fill_tolerance,
                       unbounded_width=S.unbounded_width)
