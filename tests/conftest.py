import copy

import pytest

from maxincome.core.data_loader import Data
from maxincome.maxincome import MaxIncome

SAMPLE = {
    'interest': 5.5,
    'reference_year': 2013,
    'years': [2012, 2013, 2014],
    'revenues': [30000, 100000, 40000],
}

# Middle bracket is taxed less than the one below it
NON_MONOTONIC = {
    'interest': 0,
    'years': [2020],
    'revenues': [15000],
    'taxes': {'schedule': [{'effective_year': 2000, 'brackets': [[0, 30], [10000, 10], [20000, 40]]}]},
}


def _load(config):
    data = Data()
    data.load_config(config)
    return data


def _solve(config):
    maxincome = MaxIncome(_load(config))
    status = maxincome.solve()
    return maxincome, status


@pytest.fixture
def load_data():
    return _load


@pytest.fixture
def solve_plan():
    return _solve


@pytest.fixture
def sample_config():
    return copy.deepcopy(SAMPLE)


@pytest.fixture
def non_monotonic_config():
    return copy.deepcopy(NON_MONOTONIC)
