"""
Data models for the DigitalOcean snapshot lifecycle.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional


class ActionType(str, Enum):
    """Droplet actions used by the snapshot cycle."""
    SHUTDOWN = 'shutdown'
    POWER_OFF = 'power_off'
    POWER_ON = 'power_on'
    SNAPSHOT = 'snapshot'


class ActionStatus(str, Enum):
    """Status values reported by the actions endpoint."""
    IN_PROGRESS = 'in-progress'
    COMPLETED = 'completed'
    ERRORED = 'errored'

    @classmethod
    def parse(cls, value: Optional[str]) -> 'ActionStatus':
        """Map a raw API status onto the enum; unknown values count as in progress."""
        try:
            return cls(value)
        except ValueError:
            return cls.IN_PROGRESS


@dataclass
class Droplet:
    """A DigitalOcean droplet targeted by the cycle."""
    id: int
    name: str
    status: Optional[str] = None   # 'new', 'active', 'off', 'archive'

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Droplet':
        return cls(id=data['id'], name=data['name'], status=data.get('status'))


@dataclass
class Action:
    """An asynchronous operation created by submitting a droplet action."""
    id: int
    type: Optional[str] = None
    status: ActionStatus = ActionStatus.IN_PROGRESS

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Action':
        return cls(
            id=data['id'],
            type=data.get('type'),
            status=ActionStatus.parse(data.get('status'))
        )


@dataclass
class Snapshot:
    """A disk snapshot as returned by the snapshots listing."""
    id: str
    name: str
    resource_id: str               # Always compared as a string
    created_at: datetime           # Timezone-aware, UTC

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> 'Snapshot':
        created_at = datetime.fromisoformat(data['created_at'].replace('Z', '+00:00'))
        if created_at.tzinfo is None:
            created_at = created_at.replace(tzinfo=timezone.utc)
        return cls(
            id=str(data['id']),
            name=data.get('name', ''),
            resource_id=str(data.get('resource_id')),
            created_at=created_at
        )

    def belongs_to(self, droplet_id: Any) -> bool:
        return self.resource_id == str(droplet_id)


@dataclass
class ActionResult:
    """Outcome of one invoked droplet action."""
    action_type: ActionType
    success: bool
    started_at: datetime
    duration: int                  # Whole seconds, submission to resolution
    action_id: Optional[int] = None


@dataclass
class CycleReport:
    """Summary of a snapshot cycle run."""
    droplet: Droplet
    results: List[ActionResult] = field(default_factory=list)
    deleted_snapshots: List[Snapshot] = field(default_factory=list)
    halted: bool = False

    @property
    def failed_actions(self) -> List[ActionResult]:
        return [r for r in self.results if not r.success]

    @property
    def succeeded(self) -> bool:
        return not self.halted and not self.failed_actions
