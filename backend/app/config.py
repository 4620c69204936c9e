from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_name: str = "Real Estate Listings"
    env: str = "development"
    debug: bool = False
    log_level: str = "INFO"
    api_prefix: str = "/api"

    database_url: str = "sqlite:///./realestate.db"

    # Token signing. Startup fails when the secret is empty.
    jwt_secret: str = ""
    jwt_algorithm: str = "HS256"
    jwt_expires_days: int = 7

    # Public origin prepended to /uploads/... paths when listings are read,
    # e.g. https://api.example.com. Empty keeps paths relative.
    site_base: str = ""

    # Per-client request budget applied to every route (login included).
    rate_limit_enabled: bool = True
    rate_window_seconds: int = 60
    rate_max: int = 120

    # Exposes GET /debug/uploads listing stored files. Keep off in production.
    debug_uploads: bool = False

    upload_dir: str = "./uploads"
    max_file_size_mb: int = 10
    allowed_extensions: str = ".jpg,.jpeg,.png,.webp,.gif"

    model_config = {"env_file": ".env"}

    @property
    def allowed_extension_set(self) -> set[str]:
        return {
            ext.strip().lower()
            for ext in self.allowed_extensions.split(",")
            if ext.strip()
        }
