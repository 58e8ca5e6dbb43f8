"""Pydantic schemas for workspaces.

Learn: Separate "Write" schema (input) from "Read" schema (output).
Names are stripped and re-checked in the service, so a name of only
spaces is rejected there rather than here.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class WorkspaceWrite(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None


class WorkspaceRead(BaseModel):
    id: int
    name: str
    description: Optional[str] = None
    created_by: int
    created_at: datetime

    model_config = {"from_attributes": True}
