"""Parameter schemas for gateway commands."""

from __future__ import annotations

from typing import Annotated

from pydantic import AfterValidator, BaseModel, Field


def _path_segment(value: str) -> str:
    if value in {".", ".."}:
        raise ValueError("must not be a relative path segment")
    return value


# Owner and repository names become URL path segments.
RepoSegment = Annotated[
    str,
    Field(min_length=1, pattern=r"^[A-Za-z0-9_.-]+$"),
    AfterValidator(_path_segment),
]


def _branch_name(value: str) -> str:
    if ".." in value or value.startswith("/") or value.endswith("/") or "//" in value:
        raise ValueError("is not a valid branch name")
    return value


BranchName = Annotated[str, Field(min_length=1), AfterValidator(_branch_name)]


class CreateRepositoryParams(BaseModel):
    name: str = Field(min_length=1, description="Repository name")
    description: str | None = Field(default=None, description="Short repository description")
    private: bool = Field(default=False, description="Create the repository as private")


class FileEntry(BaseModel):
    path: str = Field(min_length=1, description="Path of the file inside the repository")
    content: str = Field(description="UTF-8 file content")


class PushFilesParams(BaseModel):
    owner: RepoSegment
    repo: RepoSegment
    branch: BranchName = Field(description="Branch to commit on top of")
    files: list[FileEntry] = Field(min_length=1)
    message: str = Field(min_length=1, description="Commit message")


class CreateIssueParams(BaseModel):
    owner: RepoSegment
    repo: RepoSegment
    title: str = Field(min_length=1)
    body: str | None = None
    labels: list[str] | None = None


class CreatePullRequestParams(BaseModel):
    owner: RepoSegment
    repo: RepoSegment
    title: str = Field(min_length=1)
    body: str | None = None
    head: str = Field(min_length=1, description="Branch containing the changes")
    base: str = Field(min_length=1, description="Branch the changes are merged into")
