"""Marginal tax bracket tables.

A bracket table maps the year a set of rates became effective to the
ordered list of brackets in force from that year on. Tables are written the
same way in config and in reference/tax_brackets.toml:

    [[0, 0], [18200, 19], [37000, 32.5], [80000, 37], [180000, 45]]

i.e. the threshold at which each bracket starts and its rate in percent.
The last bracket is unbounded.
"""
from bisect import bisect_right
from dataclasses import dataclass
from typing import Dict, List


class ConfigError(ValueError):
    """Invalid plan or bracket configuration, detected before any model is built."""


@dataclass(frozen=True)
class TaxBracket:
    lower: float
    upper: float  # float('inf') for the top bracket
    rate: float   # e.g. 0.325 for 32.5%

    @property
    def unbounded(self):
        return self.upper == float('inf')

    def width(self, unbounded_width):
        """Bracket capacity; the top bracket gets the model's stand-in for infinity."""
        if self.unbounded:
            return unbounded_width
        return self.upper - self.lower


def brackets_from_rates(rates) -> List[TaxBracket]:
    """Turn [[threshold, percent], ...] into contiguous TaxBrackets covering [0, inf)."""
    if not rates:
        raise ConfigError("Bracket table must have at least one bracket")
    taxrates = [[float(x), y / 100.0] for (x, y) in rates]
    if taxrates[0][0] != 0:
        raise ConfigError(f"First bracket must start at 0, not {taxrates[0][0]}")
    cutoffs = [x[0] for x in taxrates][1:] + [float('inf')]
    brackets = []
    for (low, rate), high in zip(taxrates, cutoffs):
        if not low < high:
            raise ConfigError(f"Bracket thresholds must increase: {low} then {high}")
        if not 0 <= rate < 1:
            raise ConfigError(f"Marginal rate must be in [0, 100) percent, got {rate * 100}")
        brackets.append(TaxBracket(low, high, rate))
    return brackets


class BracketTable:
    def __init__(self, tables: Dict[int, List[TaxBracket]]):
        if not tables:
            raise ConfigError("Bracket schedule is empty")
        self.effective_years = sorted(tables)
        self.tables = {y: list(tables[y]) for y in self.effective_years}

    @classmethod
    def from_schedule(cls, schedule):
        """Build from {effective_year: [[threshold, percent], ...]}."""
        return cls({int(year): brackets_from_rates(rates) for year, rates in schedule.items()})

    def brackets_for(self, year) -> List[TaxBracket]:
        # Years before the first effective year fall back to the earliest table
        i = bisect_right(self.effective_years, year) - 1
        return self.tables[self.effective_years[max(i, 0)]]

    def rates_non_decreasing(self, year):
        rates = [b.rate for b in self.brackets_for(year)]
        return all(a <= b for a, b in zip(rates, rates[1:]))

    def as_lists(self):
        """Serializable view: {effective_year: [[rate, low, high], ...]}."""
        return {y: [[b.rate, b.lower, b.upper if not b.unbounded else None] for b in t]
                for y, t in self.tables.items()}
