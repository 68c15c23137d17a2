"""
Pydantic models for the GitHub REST payloads this client consumes.

Wire fields are snake_case; aliases map the few that get renamed:
  stargazers_count → stars_count
Unknown fields are ignored, missing required fields fail validation.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _WireModel(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class User(_WireModel):
    id: int = Field(..., description="Stable numeric id, used as the paging cursor")
    login: str
    avatar_url: str


class UserDetail(_WireModel):
    login: str
    avatar_url: str
    name: str | None = None
    followers: int
    following: int


class Repository(_WireModel):
    id: int
    name: str
    language: str | None = None
    stars_count: int = Field(..., alias="stargazers_count")
    description: str | None = None
    html_url: str


class UserSearchResponse(_WireModel):
    total_count: int
    incomplete_results: bool
    items: list[User]
