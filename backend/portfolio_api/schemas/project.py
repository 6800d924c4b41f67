"""
Portfolio Backend: Project Schemas
====================================

What:  API contract for GET /api/projects.

The frontend reads the derived label as `actionLabel`, so the field is
declared with that alias; FastAPI serializes response models by alias.
"""

from pydantic import BaseModel, Field


class ProjectOut(BaseModel):
    """A project card with its derived action label."""

    id: int
    title: str
    description: str
    url: str
    action_label: str = Field(
        alias="actionLabel",
        description='"Show Code" for source-hosting URLs, otherwise "Show Website"',
    )

    model_config = {"populate_by_name": True}
