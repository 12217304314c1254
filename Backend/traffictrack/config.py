"""
Configuration management using Pydantic Settings
"""
from datetime import timedelta
from pydantic import BaseModel, ConfigDict
from pydantic_settings import BaseSettings
from typing import Optional


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # Core
    mongodb_uri: str = "mongodb://localhost:27017"  # Override via MONGODB_URI env var in production
    mongodb_db_name: str = "traffictrack"
    environment: str = "development"  # development | production
    use_synthetic_data: bool = True  # Set to False to query the traffic provider

    # CORS Configuration
    cors_origins: str = "http://localhost:8080,http://localhost:3000,http://localhost:5173,http://127.0.0.1:8080,http://127.0.0.1:3000"  # Comma-separated list, override via CORS_ORIGINS env var

    # Traffic provider - Azure Maps
    azure_maps_subscription_key: Optional[str] = None
    azure_maps_base_url: str = "https://atlas.microsoft.com/traffic"
    azure_maps_language: str = "it-IT"
    provider_timeout_seconds: float = 10.0
    query_timeout_seconds: Optional[float] = 30.0  # Whole-query budget, refresh included; None disables

    # Cache behaviour
    freshness_window_minutes: int = 30
    flow_query_limit: int = 1000
    incident_query_limit: int = 500
    recent_events_limit: int = 100

    # Synthetic generation
    synthetic_flow_count: int = 15
    synthetic_incident_count: int = 8
    synthetic_seed: Optional[int] = None  # Fixed seed for reproducible demo data

    # Application
    debug: bool = False
    log_level: str = "INFO"

    class Config:
        env_file = ".env"
        case_sensitive = False

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse comma-separated CORS origins into a list"""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def provider_configured(self) -> bool:
        """True when a usable Azure Maps key is present"""
        key = self.azure_maps_subscription_key
        return bool(key) and key != "your_azure_maps_key_here"


class CacheConfig(BaseModel):
    """
    Read-only cache configuration handed to the orchestrator at construction.

    Built once at startup; the core never looks at the global settings.
    """
    model_config = ConfigDict(frozen=True)

    freshness_window: timedelta = timedelta(minutes=30)
    use_synthetic_data: bool = True
    flow_query_limit: int = 1000
    incident_query_limit: int = 500
    recent_events_limit: int = 100
    synthetic_flow_count: int = 15
    synthetic_incident_count: int = 8
    query_timeout: Optional[float] = None

    @classmethod
    def from_settings(cls, source: Settings) -> "CacheConfig":
        return cls(
            freshness_window=timedelta(minutes=source.freshness_window_minutes),
            use_synthetic_data=source.use_synthetic_data,
            flow_query_limit=source.flow_query_limit,
            incident_query_limit=source.incident_query_limit,
            recent_events_limit=source.recent_events_limit,
            synthetic_flow_count=source.synthetic_flow_count,
            synthetic_incident_count=source.synthetic_incident_count,
            query_timeout=source.query_timeout_seconds,
        )


# Global settings instance
settings = Settings()
