"""swagcheck: normalized, line-attributed diagnostics for Swagger/OpenAPI YAML documents."""

__version__ = "0.1.0"
