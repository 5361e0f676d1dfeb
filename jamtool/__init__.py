"""Buildpack helpers: semantic versions, dependency selection and caching, file bundling and metadata formatting."""

__version__ = "0.1.0"