from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore")

    app_name: str = "Emojilens API"
    # If ALLOWED_ORIGINS env is provided, it should be a JSON array.
    # Example: ["http://localhost:8501", "http://127.0.0.1:8501"]
    allowed_origins: List[str] = Field(default_factory=lambda: ["*"])
    log_level: str = "INFO"

    # GitHub OAuth app and REST API
    github_client_id: Optional[str] = None
    github_client_secret: Optional[str] = None
    github_api_url: str = "https://api.github.com"
    github_oauth_url: str = "https://github.com/login/oauth"
    github_callback_url: str = "http://localhost:8080/api/v1/auth/github/callback"
    github_scope: str = "repo user:email"
    user_agent: str = "Emojilens-Test-Generator"

    # Where the OAuth callback sends the browser afterwards
    frontend_url: str = "http://localhost:8501"

    # Gemini
    gemini_api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("gemini_api_key", "google_ai_api_key"),
    )
    gemini_summary_model: str = "gemini-2.5-pro"
    gemini_code_model: str = "gemini-2.5-flash"


settings = Settings()
