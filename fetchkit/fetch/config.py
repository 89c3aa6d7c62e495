"""Configuration models for the fetch layer."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from fetchkit.fetch.constants import DEFAULT_MIN_ERROR


class FetcherConfig(BaseModel):
    """Configuration for a Fetcher instance.

    Fixed at construction: the endpoint every relative path is resolved
    against, the default headers, and the status threshold above which
    responses are logged as errors.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    endpoint: str = Field(
        default="", description="Base endpoint; empty means paths must be absolute"
    )
    headers: dict[str, str] = Field(
        default_factory=dict, description="Default headers for every request"
    )
    min_error: Annotated[int, Field(ge=100, le=600)] = DEFAULT_MIN_ERROR
    timeout_seconds: float | None = Field(
        default=None,
        gt=0.0,
        le=300.0,
        description="Client-wide timeout; None uses the httpx default",
    )
    follow_redirects: bool = False

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Ensure a non-empty endpoint is an absolute http(s) URL."""
        if v and not v.lower().startswith(("http://", "https://")):
            msg = f"Endpoint must start with http:// or https://, got '{v}'"
            raise ValueError(msg)
        return v
