"""Shared pytest fixture plugins."""
