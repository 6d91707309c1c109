"""
API Package

FastAPI REST API for QueryLens.

Subpackages:
- routers: API route handlers

Main module:
- main: FastAPI application setup
"""
