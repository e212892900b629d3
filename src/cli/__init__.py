"""Command-line interface for the Kuba English core."""
