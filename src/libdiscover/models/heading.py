"""Authority heading suggestion models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class HeadingResult(BaseModel):
    """A single authority record suggested to the user.

    Two results with the same ``heading`` text are the same suggestion.
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(description="Unique id of the authority record")
    heading: str = Field(description="Display heading (breadcrumb) of the record")


class AuthorityRecommendResponse(BaseModel):
    """Response for the authority recommendation endpoint."""

    lookfor: str | None = Field(default=None, description="Search term the suggestions were computed for")
    search_type: str = Field(default="basic", description="Type of the originating search")
    results: list[HeadingResult] = Field(default_factory=list, description="Suggested headings, index order")
