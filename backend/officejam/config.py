"""Application configuration"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""
    
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )
    
    # Database
    database_url: str = "sqlite:///./officejam.db"
    
    # API Configuration
    cors_origins: str = "http://localhost:5173,http://localhost:3004"
    
    # Server Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 3004
    log_level: str = "INFO"
    
    # Metadata lookups (YouTube Data API v3; empty key falls back to oEmbed)
    youtube_api_key: str = ""
    metadata_timeout_seconds: float = 5.0
    playlist_max_items: int = 200
    
    # Playback
    auto_advance_seconds: float = 0  # 0 disables the "assume finished" timer
    history_limit: int = 500
    
    @property
    def cors_origins_list(self) -> List[str]:
        """Parse CORS origins string into list"""
        return [origin.strip() for origin in self.cors_origins.split(",")]


# Global settings instance
settings = Settings()
