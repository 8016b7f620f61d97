from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    render_engine: str = "pymupdf"
    render_scale: float = 4.0
    encode_timeout_seconds: float = 30

    global_timeout_seconds: float = 300
    upload_timeout_seconds: float = 60
    kv_get_timeout_seconds: float = 30
    kv_set_timeout_seconds: float = 60
    inference_timeout_seconds: float = 120

    record_key_prefix: str = "resume"

    identity_user_id: str = "local"
    identity_user_name: str = "Local User"

    storage_provider: str = "local"
    storage_root: str = "./storage"

    kv_provider: str = "memory"

    db_host: str = "localhost"
    db_port: int = 5432
    db_database: str = "resume_analyzer"
    db_username: str = "resume_analyzer"
    db_password: str = "secret"
    db_kv_table: str = "kv_entries"

    ai_provider: str = "example"

    ai_openai_api_key: str = ""
    ai_openai_model_name: str = "gpt-4o-mini"
    ai_openai_timeout_seconds: int = 120

    ai_openai_compatible_base_url: str = ""
    ai_openai_compatible_api_key: str = ""
    ai_openai_compatible_model_name: str = ""
    ai_openai_compatible_timeout_seconds: int = 120
