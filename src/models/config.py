"""
Typed configuration models matching the YAML config structure.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class CountingConfig:
    """
    Counting line and classification constants.

    Attributes:
        line_ratio: Counting line position as a fraction of frame height.
        proximity_tolerance: Relative window (+/-) for matching centroids.
        direction_threshold: Fraction of frame width below which a new
                             track is classified as DOWNWARD.
        category: Label attached to count events.
    """
    line_ratio: float = 0.6
    proximity_tolerance: float = 0.2
    direction_threshold: float = 0.7
    category: str = "car"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "CountingConfig":
        """Adapter: Create from config dictionary."""
        return cls(
            line_ratio=float(d.get("line_ratio", 0.6)),
            proximity_tolerance=float(d.get("proximity_tolerance", 0.2)),
            direction_threshold=float(d.get("direction_threshold", 0.7)),
            category=d.get("category", "car"),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "line_ratio": self.line_ratio,
            "proximity_tolerance": self.proximity_tolerance,
            "direction_threshold": self.direction_threshold,
            "category": self.category,
        }


@dataclass
class TrackingConfig:
    """
    Track association configuration.

    Attributes:
        match_strategy: "nearest" (closest centroid) or "first" (oldest track).
        max_idle_seconds: Evict tracks not seen for this long. None disables eviction.
        require_similar_size: Also require the area to be within the proximity window.
    """
    match_strategy: str = "nearest"
    max_idle_seconds: Optional[float] = 2.0
    require_similar_size: bool = False

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TrackingConfig":
        max_idle = d.get("max_idle_seconds", 2.0)
        return cls(
            match_strategy=d.get("match_strategy", "nearest"),
            max_idle_seconds=float(max_idle) if max_idle is not None else None,
            require_similar_size=bool(d.get("require_similar_size", False)),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "match_strategy": self.match_strategy,
            "max_idle_seconds": self.max_idle_seconds,
            "require_similar_size": self.require_similar_size,
        }


@dataclass
class StorageConfig:
    """Storage configuration."""
    local_database_path: str = "data/database.sqlite"
    retention_days: int = 30

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "StorageConfig":
        return cls(
            local_database_path=d.get("local_database_path", "data/database.sqlite"),
            retention_days=d.get("retention_days", 30),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "local_database_path": self.local_database_path,
            "retention_days": self.retention_days,
        }


@dataclass
class WebConfig:
    """Status API configuration."""
    enabled: bool = False
    host: str = "0.0.0.0"
    port: int = 5000

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "WebConfig":
        return cls(
            enabled=d.get("enabled", False),
            host=d.get("host", "0.0.0.0"),
            port=d.get("port", 5000),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled, "host": self.host, "port": self.port}


@dataclass
class Config:
    """
    Complete application configuration.

    This is a typed representation of the YAML config structure.
    """
    counting: CountingConfig = field(default_factory=CountingConfig)
    tracking: TrackingConfig = field(default_factory=TrackingConfig)
    storage: StorageConfig = field(default_factory=StorageConfig)
    web: WebConfig = field(default_factory=WebConfig)
    log_path: str = "logs/line_counter.log"
    log_level: str = "INFO"

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "Config":
        """Adapter: Create Config from raw dictionary (e.g., from load_config)."""
        return cls(
            counting=CountingConfig.from_dict(d.get("counting") or {}),
            tracking=TrackingConfig.from_dict(d.get("tracking") or {}),
            storage=StorageConfig.from_dict(d.get("storage") or {}),
            web=WebConfig.from_dict(d.get("web") or {}),
            log_path=d.get("log_path", "logs/line_counter.log"),
            log_level=d.get("log_level", "INFO"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert back to dictionary (for saving or passing to existing code)."""
        return {
            "counting": self.counting.to_dict(),
            "tracking": self.tracking.to_dict(),
            "storage": self.storage.to_dict(),
            "web": self.web.to_dict(),
            "log_path": self.log_path,
            "log_level": self.log_level,
        }
