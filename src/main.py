"""
Main application for the line counter.

Replays recorded detector output through the tracking and counting engine,
stores every counted vehicle in SQLite, and optionally serves a status API.

Usage:
    python src/main.py --config config/config.yaml --detections runs/session.yaml --web

Arguments:
    --config: Path to configuration file
    --detections: Path to a recorded detection log (YAML)
    --web: Serve the status API while processing
    --port: Status API port (overrides web.port)
    --realtime: Replay at the recorded frame rate
"""

import os
import sys
import argparse
import logging
import threading
from typing import Dict, Any, Tuple, Optional

import uvicorn
import yaml

from analytics.counter import create_counter_from_config
from models.config import Config
from observation.replay import DetectionLogSource, DetectionLogSourceConfig
from ops.logging import setup_logging
from pipeline.engine import create_engine_from_config
from storage.database import Database
from tracking.tracker import MATCH_STRATEGIES
from web.app import create_app
from web.state import state as web_state


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge override into base and return base."""
    for k, v in (override or {}).items():
        if isinstance(v, dict) and isinstance(base.get(k), dict):
            _deep_merge(base[k], v)
        else:
            base[k] = v
    return base


def load_config(config_path: str) -> Dict[str, Any]:
    """
    Load configuration with layering:
    - `config/default.yaml` (checked in)
    - `config/config.yaml` (local overrides)
    - plus any explicitly provided `--config` path (treated as overrides)
    """
    try:
        base_path = os.path.join(os.path.dirname(config_path), "default.yaml")
        base_cfg: Dict[str, Any] = {}
        if os.path.exists(base_path):
            with open(base_path, "r") as f:
                base_cfg = yaml.safe_load(f) or {}

        local_overrides_path = os.path.join(os.path.dirname(config_path), "config.yaml")
        local_cfg: Dict[str, Any] = {}
        if os.path.exists(local_overrides_path):
            with open(local_overrides_path, "r") as f:
                local_cfg = yaml.safe_load(f) or {}

        merged = _deep_merge(base_cfg, local_cfg)

        # Finally apply explicit config_path if it's not the local override file itself
        if os.path.exists(config_path) and os.path.abspath(config_path) != os.path.abspath(local_overrides_path):
            with open(config_path, "r") as f:
                explicit_cfg = yaml.safe_load(f) or {}
            merged = _deep_merge(merged, explicit_cfg)

        return merged
    except Exception as e:
        logging.error(f"Failed to load configuration: {e}")
        sys.exit(1)


def _is_ratio(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and 0 < value < 1


def validate_config(config: Dict[str, Any]) -> Tuple[bool, Optional[str]]:
    """
    Validate configuration file structure and values.

    Args:
        config: Configuration dictionary

    Returns:
        Tuple of (is_valid, error_message)
    """
    required_sections = ['counting', 'tracking', 'storage', 'log_path', 'log_level']
    for section in required_sections:
        if section not in config:
            return False, f"Missing required configuration section: {section}"

    # Counting constants
    counting = config.get('counting') or {}
    if 'line_ratio' in counting and not _is_ratio(counting['line_ratio']):
        return False, "counting.line_ratio must be between 0 and 1"
    if 'direction_threshold' in counting and not _is_ratio(counting['direction_threshold']):
        return False, "counting.direction_threshold must be between 0 and 1"
    if 'proximity_tolerance' in counting and not _is_ratio(counting['proximity_tolerance']):
        return False, "counting.proximity_tolerance must be between 0 and 1"
    if 'category' in counting and (not isinstance(counting['category'], str) or not counting['category']):
        return False, "counting.category must be a non-empty string"

    # Tracking settings
    tracking = config.get('tracking') or {}
    strategy = tracking.get('match_strategy', 'nearest')
    if strategy not in MATCH_STRATEGIES:
        return False, f"tracking.match_strategy must be one of: {', '.join(MATCH_STRATEGIES)}"
    if 'max_idle_seconds' in tracking and tracking['max_idle_seconds'] is not None:
        idle = tracking['max_idle_seconds']
        if not isinstance(idle, (int, float)) or isinstance(idle, bool) or idle <= 0:
            return False, "tracking.max_idle_seconds must be a positive number or null"
    if 'require_similar_size' in tracking and not isinstance(tracking['require_similar_size'], bool):
        return False, "tracking.require_similar_size must be a boolean"

    # Storage settings
    storage = config.get('storage') or {}
    if 'local_database_path' not in storage:
        return False, "Missing storage.local_database_path"
    if not isinstance(storage['local_database_path'], str):
        return False, "storage.local_database_path must be a string"
    if 'retention_days' in storage:
        if not isinstance(storage['retention_days'], int) or storage['retention_days'] <= 0:
            return False, "storage.retention_days must be a positive integer"

    # Web settings (optional)
    web = config.get('web') or {}
    if 'port' in web and (not isinstance(web['port'], int) or not (0 < web['port'] < 65536)):
        return False, "web.port must be an integer between 1 and 65535"

    valid_log_levels = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
    if config['log_level'] not in valid_log_levels:
        return False, f"log_level must be one of: {', '.join(valid_log_levels)}"

    return True, None


def main():
    """Main application function."""
    parser = argparse.ArgumentParser(description='Vehicle line crossing counter')
    parser.add_argument('--config', type=str, default='config/config.yaml',
                        help='Path to configuration file')
    parser.add_argument('--detections', type=str, required=True,
                        help='Path to a recorded detection log (YAML)')
    parser.add_argument('--web', action='store_true',
                        help='Serve the status API while processing')
    parser.add_argument('--port', type=int, default=None,
                        help='Status API port (overrides web.port)')
    parser.add_argument('--realtime', action='store_true',
                        help='Replay at the recorded frame rate')
    args = parser.parse_args()

    raw_config = load_config(args.config)

    is_valid, error_msg = validate_config(raw_config)
    if not is_valid:
        logging.error(f"Configuration validation failed: {error_msg}")
        sys.exit(1)

    config = Config.from_dict(raw_config)
    setup_logging(config.log_path, config.log_level)
    logging.info("Starting line counter")

    db = Database(config.storage.local_database_path)
    db.initialize()

    try:
        counter = create_counter_from_config(config, sinks=[db.add_count_event])

        if args.web or config.web.enabled:
            port = args.port or config.web.port

            def run_web_app():
                uvicorn.run(
                    create_app(web_state, db=db),
                    host=config.web.host,
                    port=port,
                    log_level="info",
                )

            web_thread = threading.Thread(target=run_web_app, daemon=True)
            web_thread.start()
            logging.info(f"Status API started on port {port}")

        source = DetectionLogSource(
            DetectionLogSourceConfig(
                source_id="replay",
                path=args.detections,
                realtime=args.realtime,
            )
        )
        engine = create_engine_from_config(config, source, counter, state=web_state, db=db)
        engine.run()

        logging.info(f"Session finished: {counter.count} vehicles counted")
        print(f"Vehicles counted: {counter.count}")
    finally:
        db.close()


if __name__ == "__main__":
    main()
