"""
Shared builders for Droplet Snapshots tests.
"""

import json
from datetime import datetime, timezone

import requests

from droplet_snapshots.services.models import Action, ActionStatus, Snapshot


NOW = datetime(2024, 1, 15, 12, 0, 0, tzinfo=timezone.utc)


def make_response(status_code=200, body=None, url="https://api.digitalocean.com/v2/test"):
    """Build a real requests.Response carrying a JSON body."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    response.reason = "OK" if status_code < 400 else "Error"
    response._content = json.dumps(body).encode() if body is not None else b""
    return response


def make_snapshot(snapshot_id, resource_id, age, name=None):
    """Snapshot created `age` before NOW."""
    return Snapshot(
        id=snapshot_id,
        name=name or f"snapshot-{snapshot_id}",
        resource_id=str(resource_id),
        created_at=NOW - age,
    )


def action_with(status, action_id=1):
    return Action(id=action_id, type='shutdown', status=ActionStatus.parse(status))
