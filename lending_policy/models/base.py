"""Event envelope recorded by the policy registry."""

from dataclasses import dataclass, field
from datetime import datetime


@dataclass
class Event:
    """One registry mutation, ready for export to a sink.

    ``metadata`` carries the acting principal and logical height.
    """

    event_id: str
    event_type: str  # e.g. policy.created, authorization.configured
    event_time: datetime  # UTC wall clock
    source: str
    subject: str  # policy id or oracle principal
    data: dict
    metadata: dict = field(default_factory=dict)
