"""
Centralized configuration management for kg-dashboard.

All environment variables and settings are managed here so the layout engine,
analytics and the snapshot source read the same values.
"""

from functools import lru_cache
from typing import Optional, Dict, Any
from pydantic import Field, field_validator, model_validator
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings

from ..exceptions import ConfigurationError


class Settings(BaseSettings):
    """
    Centralized settings for kg-dashboard.

    All configuration is loaded from environment variables with sensible defaults.
    Uses Pydantic for validation and type safety.
    """

    # === Application Settings ===
    app_name: str = Field(default="kg-dashboard", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    log_file: Optional[str] = Field(default=None, description="Optional log file path")

    # === Canvas Settings ===
    canvas_width: int = Field(default=800, description="Logical canvas width")
    canvas_height: int = Field(default=500, description="Logical canvas height")

    # === Layout Physics ===
    center_strength: float = Field(default=0.008, description="Pull towards the canvas center")
    link_distance: float = Field(default=120.0, description="Spring rest length")
    link_strength: float = Field(default=0.1, description="Spring stiffness")
    repel_strength: float = Field(default=400.0, description="Pairwise repulsion constant")
    min_separation: float = Field(default=60.0, description="Distance under which repulsion doubles")
    separation_margin: float = Field(default=15.0, description="Extra gap added to the radii sum")
    max_repulsion_distance: float = Field(default=200.0, description="Pairs farther apart are skipped")
    damping: float = Field(default=0.9, description="Velocity decay per tick")
    alpha: float = Field(default=0.3, description="Integration sub-step")
    boundary_margin: float = Field(default=10.0, description="Gap kept between nodes and the canvas edge")
    settle_threshold: float = Field(default=0.03, description="Summed |velocity| under which the layout is settled")
    max_iterations: int = Field(default=100, description="Tick budget per run")
    target_fps: float = Field(default=30.0, description="Frame rate cap for the run loop")

    # === Initial Placement ===
    placement_padding: float = Field(default=80.0, description="Padding of the initial placement area")
    placement_jitter: float = Field(default=40.0, description="Random jitter span applied to initial positions")
    initial_speed: float = Field(default=5.0, description="Span of the random initial velocity")
    add_node_spread: float = Field(default=100.0, description="Span of the random offset of added nodes")

    # === Analytics Settings ===
    analytics_delay_seconds: float = Field(default=0.8, description="Artificial delay before analytics return")
    insight_delay_seconds: float = Field(default=1.5, description="Artificial delay before node insights return")
    analytics_top_k: int = Field(default=5, description="Length of the top-by-degree ranking")
    community_strategy: str = Field(default="positional", description="Community partition strategy")

    # === Database Settings ===
    neo4j_uri: str = Field(default="bolt://localhost:7687", description="Neo4j database URI", validation_alias="NEO4J_URI")
    neo4j_user: str = Field(default="neo4j", description="Neo4j username", validation_alias="NEO4J_USER")
    neo4j_password: Optional[str] = Field(default=None, description="Neo4j password", validation_alias="NEO4J_PASSWORD")
    neo4j_max_connections: int = Field(default=10, description="Max Neo4j connections")
    neo4j_connection_timeout: int = Field(default=60, description="Neo4j connection timeout")

    # === Cache Settings ===
    snapshot_cache_ttl: int = Field(default=300, description="Snapshot cache TTL in seconds")
    snapshot_cache_size: int = Field(default=32, description="Max cached snapshots")

    # === Logging Configuration ===
    @property
    def logging_config(self) -> Dict[str, Any]:
        """Get logging configuration."""
        return {
            'level': self.log_level,
            'file': self.log_file,
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        }

    # === Layout Configuration ===
    @property
    def layout_config(self) -> Dict[str, Any]:
        """Get layout engine parameters."""
        return {
            'width': self.canvas_width,
            'height': self.canvas_height,
            'center_strength': self.center_strength,
            'link_distance': self.link_distance,
            'link_strength': self.link_strength,
            'repel_strength': self.repel_strength,
            'min_separation': self.min_separation,
            'separation_margin': self.separation_margin,
            'max_repulsion_distance': self.max_repulsion_distance,
            'damping': self.damping,
            'alpha': self.alpha,
            'boundary_margin': self.boundary_margin,
            'settle_threshold': self.settle_threshold,
            'max_iterations': self.max_iterations,
            'target_fps': self.target_fps,
            'padding': self.placement_padding,
            'jitter': self.placement_jitter,
            'initial_speed': self.initial_speed,
            'add_node_spread': self.add_node_spread,
        }

    # === Analytics Configuration ===
    @property
    def analytics_config(self) -> Dict[str, Any]:
        """Get analytics configuration."""
        return {
            'delay_seconds': self.analytics_delay_seconds,
            'insight_delay_seconds': self.insight_delay_seconds,
            'top_k': self.analytics_top_k,
            'strategy': self.community_strategy,
        }

    # === Cache Configuration ===
    @property
    def cache_config(self) -> Dict[str, Any]:
        """Get cache configuration."""
        return {
            'ttl': self.snapshot_cache_ttl,
            'memory_size': self.snapshot_cache_size,
        }

    @property
    def database_config(self) -> Dict[str, Any]:
        """Get database configuration as dictionary."""
        return {
            'uri': self.neo4j_uri,
            'user': self.neo4j_user,
            'password': self.neo4j_password,
            'max_connections': self.neo4j_max_connections,
            'connection_timeout': self.neo4j_connection_timeout,
        }

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v):
        valid_levels = {'DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'}
        if v.upper() not in valid_levels:
            raise ValueError(f"Log level must be one of {valid_levels}")
        return v.upper()

    @field_validator('community_strategy')
    @classmethod
    def validate_community_strategy(cls, v):
        valid = {'positional', 'label_propagation'}
        if v not in valid:
            raise ValueError(f"Community strategy must be one of {valid}")
        return v

    @field_validator('target_fps', 'max_iterations')
    @classmethod
    def validate_positive(cls, v):
        if v <= 0:
            raise ValueError("Value must be positive")
        return v

    @field_validator('analytics_top_k')
    @classmethod
    def validate_top_k(cls, v):
        if v < 0:
            raise ValueError("Top-k must not be negative")
        return v

    @model_validator(mode='after')
    def validate_canvas(self):
        if self.canvas_width <= 2 * self.placement_padding or self.canvas_height <= 2 * self.placement_padding:
            raise ValueError("Canvas must be larger than twice the placement padding")
        return self

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
    }


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to ensure settings are only loaded once per application lifecycle.

    Raises:
        ConfigurationError: If an environment value fails validation
    """
    try:
        return Settings()
    except PydanticValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")
