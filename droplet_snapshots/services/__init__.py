"""DigitalOcean droplet snapshot services package."""

from .models import Action, ActionResult, ActionStatus, ActionType, CycleReport, Droplet, Snapshot
from .client import DigitalOceanClient
from .poller import ActionPoller
from .actions import ActionInvoker
from .retention import RetentionPruner, select_expired
from .orchestrator import LifecycleOrchestrator

__all__ = [
    'Action',
    'ActionResult',
    'ActionStatus',
    'ActionType',
    'CycleReport',
    'Droplet',
    'Snapshot',
    'DigitalOceanClient',
    'ActionPoller',
    'ActionInvoker',
    'RetentionPruner',
    'select_expired',
    'LifecycleOrchestrator',
]
