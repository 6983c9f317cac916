# comp_outlook/api/__init__.py
"""HTTP surface for the analytics and projection pipelines."""

from .app import create_app
from .repository import InMemoryJobRepository, JobRepository

__all__ = ["InMemoryJobRepository", "JobRepository", "create_app"]
