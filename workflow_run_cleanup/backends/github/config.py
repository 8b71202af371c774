"""Configuration for the GitHub backend."""

from pydantic import BaseModel, Field, SecretStr


class GitHubConfig(BaseModel):
    """Configuration for the GitHub backend."""

    token: SecretStr
    owner: str
    repo: str
    api_base_url: str = "https://api.github.com"
    per_page: int = Field(default=100, ge=1, le=100)
    # Primary rate limits are retried once when the wait is shorter than this
    max_retry_after: float = 5.0
