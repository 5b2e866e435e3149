"""Request/response schemas for module management."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class ModuleCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    parent_id: int | None = Field(default=None, description="Parent module id; null for a root module")
    active: bool = True


class ModuleUpdate(BaseModel):
    """
    Partial update. Only fields present in the request are applied;
    an explicit "parent_id": null moves the module to the root.
    """

    name: str | None = Field(default=None, min_length=1, max_length=100)
    description: str | None = Field(default=None, max_length=2000)
    parent_id: int | None = None
    active: bool | None = None


class ModuleOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str | None
    parent_id: int | None
    active: bool
    created_at: datetime
    updated_at: datetime


class ModuleTreeNode(ModuleOut):
    """Module with its children attached recursively."""

    children: list["ModuleTreeNode"] = Field(default_factory=list)
