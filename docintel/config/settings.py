from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    max_upload_bytes: int = 10 * 1024 * 1024
    validation_confidence_threshold: float = 0.6

    pdf_engine: str = "pdfplumber"
    pdf_max_pages: int = 200

    gcp_project_id: str = ""
    gcp_location: str = "us-central1"
    google_service_account_key: str = ""
    google_service_account_key_file: str = ""
    token_scope: str = "https://www.googleapis.com/auth/cloud-platform"
    token_refresh_margin_seconds: int = 300
    token_timeout_seconds: int = 10

    document_ai_location: str = "us"
    document_ai_processor_id: str = ""
    structuring_timeout_seconds: int = 60

    completion_provider: str = "vertex"
    completion_model_name: str = "google/gemini-1.5-pro"
    completion_api_key: str = ""
    completion_base_url: str = ""
    completion_timeout_seconds: int = 30
    analysis_temperature: float = 0.2
    chat_temperature: float = 0.3
    analysis_retry_backoff_seconds: float = 1.0

    chat_max_sections: int = 6
    chat_max_context_chars: int = 6000

    translation_base_url: str = "https://translation.googleapis.com/language/translate/v2"
    translation_timeout_seconds: int = 20
    translation_max_concurrency: int = 8

    speech_base_url: str = "https://speech.googleapis.com/v1"
    speech_timeout_seconds: int = 30
    speech_max_audio_bytes: int = 10 * 1024 * 1024
