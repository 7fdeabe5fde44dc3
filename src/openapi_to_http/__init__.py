"""Convert OpenAPI documents into .http request files."""

__version__ = "0.1.0"
