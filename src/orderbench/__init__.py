"""Order placement service for relational-engine benchmarking."""

__version__ = "0.1.0"
