import pytest

from maxincome.core.brackets import ConfigError
from maxincome.core.data_loader import SAMPLE_FILE, Data


def test_sample_file():
    data = Data()
    data.load_config(SAMPLE_FILE)
    assert data.years == [2012, 2013, 2014]
    assert data.revenues == [30000, 100000, 40000]
    assert data.interest_rate == pytest.approx(0.055)
    assert data.reference_year == 2013
    assert data.rates_can_decrease is False
    assert data.numyr == 3


def test_dict_defaults(load_data):
    data = load_data({'years': [2015, 2016], 'revenues': [1000, 2000]})
    assert data.interest_rate == 0
    assert data.reference_year == 2015
    assert data.fill_tolerance == 1e-12
    assert data.unbounded_width == 1e8
    assert data.bracket_table.brackets_for(2016)[1].lower == 18200


def test_revenue_table_keyed_by_year(load_data):
    data = load_data({'revenue': {'2014': 40000, '2012': 30000, '2013': 100000}})
    assert data.years == [2012, 2013, 2014]
    assert data.revenues == [30000, 100000, 40000]


def test_inline_schedule(load_data, non_monotonic_config):
    non_monotonic_config['taxes']['rates_can_decrease'] = True
    data = load_data(non_monotonic_config)
    assert data.rates_can_decrease
    assert [b.rate for b in data.bracket_table.brackets_for(2020)] == pytest.approx([0.3, 0.1, 0.4])


def test_bracket_file(load_data, tmp_path):
    path = tmp_path / "brackets.toml"
    path.write_text("[Flat]\neffective_year = 1900\nbrackets = [[0, 20]]\n")
    data = load_data({'years': [2020], 'revenues': [10], 'taxes': {'bracket_file': str(path)}})
    brackets = data.bracket_table.brackets_for(2020)
    assert len(brackets) == 1
    assert brackets[0].rate == pytest.approx(0.2)


def test_toml_file(tmp_path):
    path = tmp_path / "plan.toml"
    path.write_text("interest = 3\nyears = [2020]\nrevenues = [50000]\n[taxes]\nfill_tolerance = 1e-4\n")
    data = Data()
    data.load_config(str(path))
    assert data.interest_rate == pytest.approx(0.03)
    assert data.fill_tolerance == pytest.approx(1e-4)


@pytest.mark.parametrize("config", [
    {'years': [2012, 2013], 'revenues': [1000]},
    {'years': [], 'revenues': []},
    {},
    {'years': [2012], 'revenues': [1000], 'interest': -1},
    {'years': [2012], 'revenues': [1000], 'taxes': {'unbounded_width': 0}},
    {'years': [2012], 'revenues': [1000], 'taxes': {'schedule': []}},
    {'years': [2012], 'revenues': ['abc']},
    {'years': [2012], 'revenues': [1000], 'interest': 'x'},
    {'years': ['twenty'], 'revenues': [1000]},
    {'years': [2012], 'revenues': [1000], 'taxes': {'fill_tolerance': 'small'}},
    {'years': [2012], 'revenues': [1000], 'taxes': {'schedule': [{'brackets': [[0, 10]]}]}},
    {'revenue': [1000]},
])
def test_bad_config(load_data, config):
    with pytest.raises(ConfigError):
        load_data(config)


def test_bad_source_type():
    with pytest.raises(TypeError):
        Data().load_config(42)


def test_unparseable_toml(tmp_path):
    path = tmp_path / "plan.toml"
    path.write_text("years = [2012\n")
    with pytest.raises(ConfigError):
        Data().load_config(str(path))
