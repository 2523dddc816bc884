"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Page size, dataset file suffixes, metadata keys
- exceptions: Custom exception hierarchy
- ingress: Blob container client construction
"""
