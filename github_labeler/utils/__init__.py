"""Utility modules for shared functionality."""

from .github import split_repository_name
from .retry import retry_on_rate_limit
