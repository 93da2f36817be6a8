from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    
    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """
    
    # Environment
    environment: str = "development"  # Options: "development", "test", "production"
    debug: bool = False  # True serves tracebacks instead of JSON 500s
    
    # Application
    app_name: str = "Links"
    app_version: str = "1.0.0"
    
    # Server
    host: str = "0.0.0.0"
    port: int = 3333
    web_url: Optional[str] = None  # Public web origin allowed by CORS
    
    # Database
    database_url: str = "sqlite:///./links.db"
    
    # Logging
    log_level: str = "INFO"
    log_file: Optional[str] = None
    
    # Report storage
    storage_backend: str = "local"  # Options: "s3", "local", "memory"
    storage_bucket: str = "links-reports"
    storage_public_url: str = "http://127.0.0.1:3333/reports/"
    storage_endpoint_url: Optional[str] = None  # e.g. https://<account>.r2.cloudflarestorage.com
    storage_access_key_id: Optional[str] = None
    storage_secret_access_key: Optional[str] = None
    storage_region: str = "auto"
    storage_local_path: str = "./storage"
    storage_multipart_chunksize: int = 8 * 1024 * 1024  # S3 parts must be >= 5 MiB
    storage_max_concurrency: int = 4
    
    # Export pipeline
    export_batch_size: int = 2  # Rows per cursor fetch
    export_buffer_size: int = 64 * 1024  # Bytes held between encoder and upload
    
    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )


# Create settings instance
settings = Settings()
