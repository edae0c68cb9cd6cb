"""
Pagination configuration settings.

Defaults and upper bound for the paginated session detail read.

Dependencies: pydantic_settings
System role: Event listing page-size configuration
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PaginationSettings(BaseSettings):
    """Page-size settings for event listing."""

    model_config = SettingsConfigDict(
        env_prefix="PAGINATION_",
        case_sensitive=False,
        extra="ignore",
    )

    default_limit: int = Field(default=20, ge=1, description="Events per page when limit is omitted")
    max_limit: int = Field(default=100, ge=1, description="Largest accepted page size")
