"""CLI commands for tallybook."""
