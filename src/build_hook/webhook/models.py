"""GitHub webhook event models.

Only the fields the builder acts on are declared; everything else in the
payload is ignored. Missing or null fields fall back to empty defaults, while
values of the wrong type fail validation.
"""

from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, field_validator

# A release name may be absent, a string, or another JSON scalar
ReleaseName = str | int | float | bool | None


class GitHubEvent(str, Enum):
    """Event labels carried in the X-GitHub-Event header."""

    PING = "ping"
    PUSH = "push"
    RELEASE = "release"
    UNKNOWN = "unknown"

    @classmethod
    def from_header(cls, value: str | None) -> "GitHubEvent":
        """Resolve a header value, mapping anything unrecognised to UNKNOWN."""
        if not value:
            return cls.UNKNOWN
        try:
            return cls(value)
        except ValueError:
            return cls.UNKNOWN


def _null_as_empty(value: Any) -> Any:
    return "" if value is None else value


# JSON null decodes to the empty string, as if the field were absent
EmptyIfNull = Annotated[str, BeforeValidator(_null_as_empty)]


class PushEvent(BaseModel):
    """Payload of a push event."""

    model_config = ConfigDict(frozen=True)

    ref: EmptyIfNull = Field(
        default="",
        description="Full git ref that was pushed, e.g. refs/heads/main",
    )


class ReleaseInfo(BaseModel):
    """The release object nested in a release event."""

    model_config = ConfigDict(frozen=True)

    tag_name: EmptyIfNull = Field(default="", description="Tag the release points at")
    name: ReleaseName = Field(default=None, description="Release title, if any")


class ReleaseEvent(BaseModel):
    """Payload of a release event."""

    model_config = ConfigDict(frozen=True)

    action: EmptyIfNull = Field(default="", description="published, created, edited, ...")
    release: ReleaseInfo = Field(default_factory=ReleaseInfo)

    @field_validator("release", mode="before")
    @classmethod
    def release_null_as_empty(cls, value: Any) -> Any:
        return ReleaseInfo() if value is None else value


WebhookPayload = PushEvent | ReleaseEvent
