"""AikiNote: training journal for aikido practice."""

__version__ = "0.1.0"
