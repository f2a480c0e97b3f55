import logging
import secrets

from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_INSECURE_DEFAULT_KEY = "change-me-in-production"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_prefix="TERRAIN_", extra="ignore")

    db_url: str = "mysql+pymysql://terrain:terrain@db:3306/terrain"

    log_level: str = "INFO"
    log_json: bool = False

    email_backend: str = "log"
    email_from: str = "Terrain <noreply@terrain.ambrosiaventures.co>"
    resend_api_key: str = ""

    app_url: str = "https://terrain.ambrosiaventures.co"

    secret_key: str = _INSECURE_DEFAULT_KEY

    def get_secret_key(self) -> str:
        if self.secret_key == _INSECURE_DEFAULT_KEY:
            logger.warning(
                "TERRAIN_SECRET_KEY is unset; signing sessions with a throwaway key. "
                "Logins are lost on restart. "
                "Configure it via the environment or .env."
            )
            self.secret_key = secrets.token_urlsafe(32)
        return self.secret_key


settings = Settings()
