"""Shared helpers.

- datasets: Dataset selection from a file or directory
"""
