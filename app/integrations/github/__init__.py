"""
GitHub Integration Module

GitHub repository used as the object store for archived summaries.
"""

from app.integrations.github.client import GitHubObjectStore

__all__ = ["GitHubObjectStore"]
