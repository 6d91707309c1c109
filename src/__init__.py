"""
QueryLens Source Package

Result-set analytics for a natural-language-to-SQL chat assistant.

Subpackages:
- api: FastAPI REST endpoints
- core: Configuration, logging, exceptions
- services: Analytics engine (statistics, correlation, trends, visualization)
- utils: Column classification, geographic normalization, formatting
"""
