# SPDX-License-Identifier: GPL-3.0-or-later
#
# Toolcall: Text-based function calling for any LLM.
# Copyright (C) 2025 FunnyCups (https://github.com/funnycups)

import os
import logging
import yaml
from typing import Optional
from pydantic import BaseModel, Field, field_validator

logger = logging.getLogger(__name__)

VALID_LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL", "DISABLED"]


class FeaturesConfig(BaseModel):
    """Feature configuration"""
    log_level: str = Field(default="INFO", description="Logging level: DEBUG, INFO, WARNING, ERROR, CRITICAL, or DISABLED")

    @field_validator('log_level')
    def validate_log_level(cls, v):
        if v.upper() not in VALID_LOG_LEVELS:
            raise ValueError(f"log_level must be one of: {', '.join(VALID_LOG_LEVELS)}")
        return v.upper()


class PromptConfig(BaseModel):
    """Prompt encoding configuration"""
    template: Optional[str] = Field(default=None, description="Custom instruction template for function calling")
    optimize: bool = Field(default=False, description="Compact tool list to reduce token usage")
    max_result_tokens: Optional[int] = Field(default=None, ge=1, description="Truncate each function result in followup prompts to this many tokens")
    token_model: str = Field(default="gpt-4o", description="Model name used to pick the tokenizer")

    @field_validator('template')
    def validate_template(cls, v):
        if v and "{tools_list}" not in v:
            raise ValueError("Custom prompt template must contain the {tools_list} placeholder")
        return v


class DispatchConfig(BaseModel):
    """Function call dispatch configuration"""
    max_concurrency: int = Field(default=1, ge=1, description="Calls executed at once; 1 runs them sequentially")
    call_timeout: Optional[float] = Field(default=None, gt=0, description="Per-call timeout (seconds)")
    max_recursion_depth: int = Field(default=25, ge=1, description="Maximum model/function rounds per request")


class RemoteToolConfig(BaseModel):
    """Remote tool host configuration"""
    base_url: Optional[str] = Field(default=None, description="Tool host base URL")
    api_key: Optional[str] = Field(default=None, description="Bearer token for the tool host")
    timeout: float = Field(default=30, gt=0, description="Request timeout (seconds)")

    @field_validator('base_url')
    def validate_base_url(cls, v):
        if v is None:
            return v
        if not v.startswith(('http://', 'https://')):
            raise ValueError('Base URL must start with http:// or https://')
        return v.rstrip('/')


class AppConfig(BaseModel):
    """Application full configuration"""
    features: FeaturesConfig = Field(default_factory=FeaturesConfig)
    prompt: PromptConfig = Field(default_factory=PromptConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    remote_tool: RemoteToolConfig = Field(default_factory=RemoteToolConfig)


class ConfigLoader:
    """Configuration loader"""

    def __init__(self, config_path: str = "config.yaml"):
        self.config_path = config_path
        self._config: AppConfig = None

    def load_config(self) -> AppConfig:
        """Load configuration file"""
        if not os.path.exists(self.config_path):
            raise FileNotFoundError(
                f"Configuration file '{self.config_path}' not found. "
                f"Please copy 'config.example.yaml' to '{self.config_path}' and modify the configuration as needed."
            )

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ValueError(f"Configuration file format error: {e}")
        except Exception as e:
            raise ValueError(f"Failed to read configuration file: {e}")

        if not config_data:
            raise ValueError("Configuration file is empty")

        try:
            self._config = AppConfig(**config_data)
        except Exception as e:
            raise ValueError(f"Configuration validation failed: {e}")

        logger.info(f"✅ Configuration loaded successfully: {self.config_path}")
        return self._config

    @property
    def config(self) -> AppConfig:
        """Get configuration object"""
        if self._config is None:
            self.load_config()
        return self._config

    def reload_config(self) -> AppConfig:
        """Force reload configuration from disk"""
        self._config = None
        return self.load_config()


def setup_logging(log_level_str: str = "INFO") -> None:
    """Configure root logging; calling it again only updates the level."""
    if log_level_str == "DISABLED":
        log_level = logging.CRITICAL + 1
    else:
        log_level = getattr(logging, log_level_str, logging.INFO)

    # Avoid adding duplicate handlers on reload
    root_logger = logging.getLogger()
    if not root_logger.handlers:
        logging.basicConfig(
            level=log_level,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
    else:
        root_logger.setLevel(log_level)
