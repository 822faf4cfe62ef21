"""
Pytest configuration and shared fixtures for Droplet Snapshots tests.
"""

from datetime import timedelta
from unittest.mock import Mock

import pytest
import requests

from droplet_snapshots.core.config import Config
from droplet_snapshots.services.models import Droplet

from helpers import make_snapshot


@pytest.fixture
def sample_config():
    """Sample configuration for testing."""
    return Config(
        api_token="dop_v1_0123456789abcdef",
        droplet_name="web",
    )


@pytest.fixture
def mock_session():
    """Mock requests session."""
    return Mock(spec=requests.Session)


@pytest.fixture
def mock_client():
    """Mock DigitalOcean client with one droplet named 'web'."""
    client = Mock()
    client.list_droplets.return_value = [Droplet(id=1, name="web", status="active")]
    client.list_snapshots.return_value = []
    return client


@pytest.fixture
def sample_snapshots():
    """Snapshots from the retention scenario: only s1 is expired and owned."""
    return [
        make_snapshot("s1", 1, timedelta(days=8)),
        make_snapshot("s2", 1, timedelta(days=1)),
        make_snapshot("s3", 2, timedelta(days=8)),
    ]
