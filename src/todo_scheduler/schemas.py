"""Task input models with Pydantic validation.

The engine does not validate durations or titles; these models are the
place where bad input gets rejected before a task joins the collection.
"""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class TaskCreateRequest(BaseModel):
    """Request model for creating a task in a ``TaskList``."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    title: str
    duration: int = Field(default=1, ge=1)
    dependency_ids: list[int] = Field(default_factory=list, alias="dependencyIds")
    due_date: date | None = Field(default=None, alias="dueDate")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is not empty or whitespace."""
        if not v or not v.strip():
            raise ValueError("title must not be empty or whitespace")
        return v.strip()


class TaskRecord(BaseModel):
    """One task in a JSON snapshot file.

    ``dependency_ids`` is kept in whatever encoding the file uses (a list
    or a JSON array string); decoding is left to the graph accessor, which
    treats anything undecodable as "no dependencies".
    """

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    id: int
    title: str
    duration: int = Field(default=1, ge=1)
    dependency_ids: list[int] | str | None = Field(default=None, alias="dependencyIds")
    due_date: date | None = Field(default=None, alias="dueDate")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Validate title is not empty or whitespace."""
        if not v or not v.strip():
            raise ValueError("title must not be empty or whitespace")
        return v

    @model_validator(mode="after")
    def validate_no_self_reference(self) -> TaskRecord:
        """Reject a task that lists itself as a dependency."""
        if isinstance(self.dependency_ids, list) and self.id in self.dependency_ids:
            raise ValueError(f"task {self.id} must not depend on itself")
        return self
