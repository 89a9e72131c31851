"""External collaborators -- the GitHub provider and session authentication."""

from .auth import AuthResult, SessionAuthenticator
from .github import GitHubAPIError, GitHubClient, ProviderClient

__all__ = [
    "AuthResult",
    "GitHubAPIError",
    "GitHubClient",
    "ProviderClient",
    "SessionAuthenticator",
]
