"""
Droplet Snapshots - Scheduled snapshot rotation for DigitalOcean droplets.

A small CLI meant to be run from cron: it powers a droplet down, captures a
dated disk snapshot, powers it back up and prunes snapshots past their
retention window.
"""

__version__ = "1.0.0"

from droplet_snapshots.core.exceptions import DropletSnapshotError

__all__ = ["DropletSnapshotError"]
