"""
Configuration for the Solidity risk scanner.
"""
from typing import Literal, Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from risk_scanner.models.function_record import Visibility


class Settings(BaseSettings):
    """Application settings."""

    # Analysis settings
    risk_thresholds: Literal['standard', 'strict'] = Field(
        'standard', description='Named score-to-level table (standard or strict)')
    default_visibility: Visibility = Field('public', description='Visibility assumed when a function omits one')
    call_check_window: int = Field(5, ge=0, description='Lines after a low-level call searched for a success check')
    safe_arithmetic_version: str = Field('0.8.0', description='First compiler version with checked arithmetic')

    # OpenAI API settings (copilot only)
    openai_api_key: Optional[str] = Field(None)
    openai_model: str = Field('gpt-4')
    api_base_url: Optional[str] = Field(None)

    # Logging settings
    log_level: str = Field('INFO')
    log_file: Optional[str] = Field(None)

    # Report settings
    default_report_format: str = Field('text')

    model_config = SettingsConfigDict(
        env_file='.env',
        env_file_encoding='utf-8',
        extra='ignore',
    )
