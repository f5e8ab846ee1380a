"""
Configuration Module
====================

Application settings and configuration management using Pydantic.
"""

from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field, field_validator
from functools import lru_cache
from pathlib import Path
from typing import List


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Uses Pydantic for validation and type safety.
    """

    # ========== Application ==========
    app_name: str = Field(default="design-fulfillment", description="Application name")
    app_version: str = Field(default="1.0.0", description="Application version")
    environment: str = Field(default="development", description="Environment name")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root logging level")

    # ========== Server ==========
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port", ge=1, le=65535)

    # ========== Database ==========
    database_url: str = Field(
        default="postgresql+asyncpg://localhost:5432/design_orders",
        description="PostgreSQL connection URL (async)"
    )
    db_pool_size: int = Field(default=5, description="Database connection pool size", ge=1)
    db_max_overflow: int = Field(default=10, description="Max overflow connections", ge=0)

    # ========== SLA Configuration ==========
    sla_config_path: Path = Field(
        default=Path("sla_config.yaml"),
        description="Path to SLA policy YAML file"
    )
    watch_sla_config: bool = Field(
        default=True,
        description="Reload SLA policy when the YAML file changes"
    )

    # ========== CORS ==========
    cors_origins: List[str] = Field(
        default=["http://localhost:3000", "http://localhost:8080"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Ensure environment is one of allowed values."""
        allowed = {"development", "staging", "production"}
        if v not in allowed:
            raise ValueError(f"environment must be one of {allowed}")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        allowed = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in allowed:
            raise ValueError(f"log_level must be one of {allowed}")
        return v.upper()


@lru_cache()
def get_settings() -> Settings:
    """Returns cached Settings instance."""
    return Settings()


# Global settings instance
settings = get_settings()


# ========== Constants ==========

class OrderStatus(str):
    """Stored design order lifecycle statuses."""
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    REVISION_REQUESTED = "revision_requested"
    APPROVED = "approved"
    CANCELLED = "cancelled"


class DisplayStatus(str):
    """Derived display-only statuses (never persisted)."""
    COMPLETED = "completed"


class UrgencyTier(str):
    """Urgency tiers for open orders."""
    OVERDUE = "overdue"
    URGENT = "urgent"
    NORMAL = "normal"


class PaymentStatus(str):
    """Payment statuses as stored by the checkout collaborator."""
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


class QueueTab(str):
    """Operator queue filter tabs."""
    ALL = "all"
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    DELIVERED = "delivered"
    REVISION = "revision"
    COMPLETED = "completed"
    APPROVED = "approved"
    CANCELLED = "cancelled"


# ========== Lists for validation ==========

VALID_STATUSES = [
    OrderStatus.PENDING, OrderStatus.IN_PROGRESS,
    OrderStatus.DELIVERED, OrderStatus.REVISION_REQUESTED,
    OrderStatus.APPROVED, OrderStatus.CANCELLED
]
TERMINAL_STATUSES = [OrderStatus.APPROVED, OrderStatus.CANCELLED]
VALID_URGENCY_TIERS = [UrgencyTier.OVERDUE, UrgencyTier.URGENT, UrgencyTier.NORMAL]
VALID_QUEUE_TABS = [
    QueueTab.ALL, QueueTab.PENDING, QueueTab.IN_PROGRESS, QueueTab.DELIVERED,
    QueueTab.REVISION, QueueTab.COMPLETED, QueueTab.APPROVED, QueueTab.CANCELLED
]

# Product defaults
DEFAULT_MAX_REVISIONS = 2
DEFAULT_ESTIMATED_DAYS = 5
