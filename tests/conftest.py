"""
Pytest configuration and shared fixtures.
"""

import os
import sys

import pytest

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "src"))


@pytest.fixture
def temp_config_dir(tmp_path):
    """Create a temporary config directory with default.yaml."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()

    default_yaml = config_dir / "default.yaml"
    default_yaml.write_text("""
counting:
  line_ratio: 0.6
  proximity_tolerance: 0.2
  direction_threshold: 0.7
  category: "car"

tracking:
  match_strategy: "nearest"
  max_idle_seconds: 2.0

storage:
  local_database_path: "data/test.sqlite"
  retention_days: 7

log_path: "logs/test.log"
log_level: "INFO"
""")

    return config_dir


@pytest.fixture
def valid_config():
    """Return a valid configuration dictionary."""
    return {
        "counting": {
            "line_ratio": 0.6,
            "proximity_tolerance": 0.2,
            "direction_threshold": 0.7,
            "category": "car",
        },
        "tracking": {
            "match_strategy": "nearest",
            "max_idle_seconds": 2.0,
            "require_similar_size": False,
        },
        "storage": {
            "local_database_path": "data/test.sqlite",
            "retention_days": 30,
        },
        "log_path": "logs/test.log",
        "log_level": "INFO",
    }
