"""tshistogram - histograms of timestamped lines in the terminal."""

__version__ = "0.3.0"
