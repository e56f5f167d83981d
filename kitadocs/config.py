"""
Application configuration settings loaded from environment variables.
Uses pydantic_settings for validation and type conversion.
"""
from pydantic_settings import BaseSettings
from typing import List, Optional

class Settings(BaseSettings):
    """
    Application settings class with environment variable validation.

    Attributes:
        port: Port the API server listens on
        database_url: SQLAlchemy connection string
        secret_key: Secret key for JWT token encoding
        algorithm: Algorithm used for JWT encoding (typically HS256)
        access_token_expire_days: Session token lifetime in days
        password_reset_token_expire_minutes: Password reset token lifetime in minutes

        # Email settings
        mail_username: SMTP server username
        mail_password: SMTP server password
        mail_from: Sender email address
        mail_from_name: Display name used for outgoing mail
        mail_port: SMTP server port
        mail_server: SMTP server hostname
        mail_starttls: Whether to use STARTTLS
        mail_ssl_tls: Whether to use SSL/TLS
        use_credentials: Whether to use credentials for SMTP
        validate_certs: Whether to validate certificates
        mail_suppress_send: Render messages without handing them to SMTP
        mail_max_attempts: Delivery attempts per notification job
        mail_retry_delay_seconds: Pause between delivery attempts

        # Frontend settings
        frontend_url: URL of the frontend application (used in reset links)

        # Object storage settings
        cloudinary_cloud_name / cloudinary_api_key / cloudinary_api_secret
        storage_folder: Cloudinary folder all uploads are placed in
        upload_max_file_size: Largest accepted upload in bytes
        upload_max_files: Largest number of files accepted per request

        # LLM settings
        groq_api_key: API key for the chat completion endpoint
        llm_api_url: OpenAI-compatible chat completions URL
        llm_model / llm_temperature / llm_max_tokens: Completion parameters
        llm_timeout_seconds: HTTP timeout for a completion request

        # Bootstrap admin settings (optional)
        bootstrap_admin_email: Optional admin email for first admin creation
        bootstrap_admin_password: Optional admin password for first admin creation
        bootstrap_admin_name: Display name for the first admin
    """
    # Server settings
    port: int = 8000
    cors_origins: List[str] = ["*"]

    # Database settings
    database_url: str

    # JWT settings
    secret_key: str
    algorithm: str = "HS256"
    access_token_expire_days: int = 30
    password_reset_token_expire_minutes: int = 60

    # Email settings
    mail_username: str = ""
    mail_password: str = ""
    mail_from: str = "noreply@kitadocs.com"
    mail_from_name: str = "KitaDocs"
    mail_port: int = 587
    mail_server: str = "localhost"
    mail_starttls: bool = True
    mail_ssl_tls: bool = False
    use_credentials: bool = True
    validate_certs: bool = True
    mail_suppress_send: bool = False
    mail_max_attempts: int = 3
    mail_retry_delay_seconds: float = 2.0

    # Frontend settings
    frontend_url: str = "http://localhost:3000"

    # Cloudinary settings
    cloudinary_cloud_name: str = ""
    cloudinary_api_key: str = ""
    cloudinary_api_secret: str = ""
    storage_folder: str = "kitadocs"
    upload_max_file_size: int = 10 * 1024 * 1024  # 10 MB
    upload_max_files: int = 5

    # LLM settings
    groq_api_key: str = ""
    llm_api_url: str = "https://api.groq.com/openai/v1/chat/completions"
    llm_model: str = "llama3-8b-8192"
    llm_temperature: float = 0.7
    llm_max_tokens: int = 4000
    llm_timeout_seconds: float = 60.0

    # Bootstrap admin settings (optional - only used for first admin creation)
    bootstrap_admin_email: Optional[str] = None
    bootstrap_admin_password: Optional[str] = None
    bootstrap_admin_name: str = "System Administrator"

    class Config:
        """Configuration for environment variables loading"""
        env_file = ".env"
        case_sensitive = False

# Create settings instance
settings = Settings()
