"""Canopy CLI subcommands."""
