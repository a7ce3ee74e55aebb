"""Configuration management for the brand bible generator."""

import os
from pathlib import Path
from typing import Optional
import yaml
from pydantic import BaseModel, ConfigDict, Field
from dotenv import load_dotenv

from ..models.enums import ChatMode
from .errors import ConfigurationError
from .logger import get_logger

logger = get_logger(__name__)

# Load environment variables
load_dotenv()

DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "models.yaml"


class ModelsConfig(BaseModel):
    """Which Gemini / Imagen model serves each call."""
    brand_bible: str = "gemini-2.5-pro"
    text: str = "gemini-2.5-flash"
    social_posts: str = "gemini-2.5-pro"
    seo: str = "gemini-2.5-flash"
    image: str = "imagen-4.0-generate-001"
    chat: str = "gemini-2.5-pro"


class PipelineConfig(BaseModel):
    """Optional pipeline members and chat behaviour."""
    include_favicon: bool = True
    include_social_posts: bool = True
    include_seo: bool = False
    chat_mode: ChatMode = ChatMode.STREAMING


class Config(BaseModel):
    """Main application configuration."""
    
    model_config = ConfigDict(populate_by_name=True)
    
    # API Keys
    gemini_api_key: str = Field(..., alias="GEMINI_API_KEY")
    
    # Application Settings
    app_env: str = Field(default="development", alias="APP_ENV")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    public_base_url: Optional[str] = Field(default=None, alias="PUBLIC_BASE_URL")
    
    # Chat Sessions
    chat_max_sessions: int = Field(default=500, alias="CHAT_MAX_SESSIONS")
    chat_session_ttl_seconds: float = Field(default=3600.0, alias="CHAT_SESSION_TTL_SECONDS")
    
    # Provider Settings
    gemini_base_url: str = Field(
        default="https://generativelanguage.googleapis.com/v1beta",
        alias="GEMINI_BASE_URL",
    )
    timeout_gemini_seconds: float = Field(default=180.0, alias="TIMEOUT_GEMINI_SECONDS")
    
    models: ModelsConfig = Field(default_factory=ModelsConfig)
    pipeline: PipelineConfig = Field(default_factory=PipelineConfig)


# Global config instance
_config: Optional[Config] = None


def load_config(path: Optional[Path] = None) -> Config:
    """
    Load configuration from environment and the YAML model file.
    
    Args:
        path: YAML file to read; defaults to BRANDBIBLE_CONFIG or the packaged models.yaml
        
    Returns:
        Config instance
        
    Raises:
        ConfigurationError: If configuration is invalid
    """
    global _config
    
    if path is None:
        path = Path(os.getenv("BRANDBIBLE_CONFIG", DEFAULT_CONFIG_PATH))
    
    if not path.exists():
        raise ConfigurationError(f"models.yaml not found at {path}")
    
    try:
        with open(path, "r", encoding="utf-8") as f:
            models_config = yaml.safe_load(f) or {}
        
        config_data = {
            **os.environ,
            **models_config,
        }
        
        _config = Config(**config_data)
    except Exception as e:
        raise ConfigurationError(f"Failed to load configuration: {e}") from e
    
    logger.info(
        "Configuration loaded successfully",
        extra={
            "environment": _config.app_env,
            "chat_mode": _config.pipeline.chat_mode.value,
            "brand_bible_model": _config.models.brand_bible,
        }
    )
    
    return _config


def get_config() -> Config:
    """
    Get the current configuration instance.
    
    Raises:
        ConfigurationError: If config not loaded
    """
    if _config is None:
        raise ConfigurationError("Configuration not loaded. Call load_config() first.")
    return _config
