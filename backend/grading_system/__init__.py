"""Application package for the grading system subject backend.

This package exposes the model, mapper, repository, service and API
modules used by the FastAPI application. It is intentionally
lightweight; individual modules contain the concrete implementations
and documentation.
"""
