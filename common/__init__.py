"""
Shared building blocks: logging, environment helpers, HTTP client, metrics and models.
"""
