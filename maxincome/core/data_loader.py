import os
import logging
try:
    import tomllib
except ModuleNotFoundError:
    import tomli as tomllib

from maxincome.core.brackets import BracketTable, ConfigError

REFERENCE_DIR = os.path.join(os.path.dirname(os.path.dirname(os.path.abspath(__file__))), 'reference')
BRACKET_FILE = os.path.join(REFERENCE_DIR, 'tax_brackets.toml')
SAMPLE_FILE = os.path.join(REFERENCE_DIR, 'sample.toml')

DEFAULT_FILL_TOLERANCE = 1e-12 # Relative to bracket width; must stay below the solver's feasibility tolerance
DEFAULT_UNBOUNDED_WIDTH = 100_000_000 # Stand-in capacity for the unbounded top bracket


def load_bracket_file(path):
    """
    Reads a bracket schedule file.

    Every top-level table with an 'effective_year' and 'brackets' is one
    entry of the schedule; other tables are ignored.
    """
    logging.info(f"Loading tax brackets from: {path}")
    with open(path, 'rb') as f:
        d = tomllib.load(f)
    schedule = {}
    for name, section in d.items():
        if isinstance(section, dict) and 'effective_year' in section:
            schedule[int(section['effective_year'])] = section['brackets']
    if not schedule:
        raise ConfigError(f"No bracket tables found in {path}")
    return schedule


class Data:
    def load_config(self, config_source):
        """
        Loads the plan either from a file path or a dictionary.

        Args:
            config_source: Either a string representing the file path
                           or a dictionary containing the configuration.
        """
        if isinstance(config_source, str):
            logging.info(f"Loading configuration from file: {config_source}")
            with open(config_source, 'rb') as conffile: # Use 'rb' for tomllib
                try:
                    d = tomllib.load(conffile)
                except tomllib.TOMLDecodeError as e:
                    raise ConfigError(f"Cannot parse {config_source}: {e}") from e
        elif isinstance(config_source, dict):
            logging.info("Loading configuration from dictionary.")
            d = config_source
        else:
            raise TypeError("config_source must be a file path (str) or a dictionary (dict)")

        # Malformed values (strings for numbers, missing keys) are configuration errors too
        try:
            self.parse_config(d)
        except ConfigError:
            raise
        except (TypeError, ValueError, KeyError) as e:
            raise ConfigError(f"Malformed configuration: {e}") from e

    def parse_config(self, d):
        self.interest_rate = d.get('interest', 0) / 100       # interest rate: 5.5 -> 0.055
        if self.interest_rate < 0:
            raise ConfigError(f"Interest rate must not be negative, got {d.get('interest')}")

        self.parse_revenue(d)
        self.reference_year = int(d.get('reference_year', self.years[0]))

        taxes = d.get('taxes', {})
        if not isinstance(taxes, dict):
            raise TypeError("[taxes] must be a table")
        self.rates_can_decrease = bool(taxes.get('rates_can_decrease', False))
        self.fill_tolerance = float(taxes.get('fill_tolerance', DEFAULT_FILL_TOLERANCE))
        self.unbounded_width = float(taxes.get('unbounded_width', DEFAULT_UNBOUNDED_WIDTH))
        if self.fill_tolerance < 0:
            raise ConfigError("fill_tolerance must not be negative")
        if self.unbounded_width <= 0:
            raise ConfigError("unbounded_width must be positive")

        if 'schedule' in taxes:
            schedule = {int(t['effective_year']): t['brackets'] for t in taxes['schedule']}
        else:
            schedule = load_bracket_file(taxes.get('bracket_file', BRACKET_FILE))
        self.bracket_table = BracketTable.from_schedule(schedule)
        logging.debug(self.bracket_table.as_lists())

        self.numyr = len(self.years)

    def parse_revenue(self, d):
        """ Revenue per year, either as parallel arrays or a [revenue] table keyed by year """
        if 'revenue' in d:
            table = d['revenue']
            if not isinstance(table, dict):
                raise TypeError("[revenue] must be a table of year = amount")
            pairs = sorted((int(k), v) for k, v in table.items())
            self.years = [y for y, _ in pairs]
            self.revenues = [float(v) for _, v in pairs]
        else:
            self.years = [int(y) for y in d.get('years', [])]
            self.revenues = [float(r) for r in d.get('revenues', [])]

        if not self.years:
            raise ConfigError("At least one year of revenue is required")
        if len(self.years) != len(self.revenues):
            raise ConfigError(f"Got {len(self.years)} years but {len(self.revenues)} revenues")
