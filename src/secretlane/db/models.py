"""Plain records returned by the stores.

Learn: These are not ORM classes. The stores speak raw SQL so that each
dialect's behaviour stays visible; rows are copied into these
dataclasses before leaving the persistence layer.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class User:
    id: int
    username: str
    # Stored and compared as plain text. See DESIGN.md before changing.
    password: str


@dataclass
class Workspace:
    id: int
    name: str
    description: Optional[str]
    created_by: int
    created_at: datetime
