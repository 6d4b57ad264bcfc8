"""Command-line interface for bitbridge."""
