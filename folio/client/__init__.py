"""
Client package for Folio.

- api_client: httpx client for the JSON API
- stores: Observable stores for projects, posts, skills and login state
"""

from .api_client import ApiClient, ApiClientError
from .stores import (
    AuthStore,
    BlogsStore,
    ProjectsStore,
    ResourceStore,
    SkillsStore,
    StoreState,
)

__all__ = [
    "ApiClient",
    "ApiClientError",
    "AuthStore",
    "BlogsStore",
    "ProjectsStore",
    "ResourceStore",
    "SkillsStore",
    "StoreState",
]
