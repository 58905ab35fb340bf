from pydantic_settings import BaseSettings
from pydantic import Field
from typing import List, Optional
from pathlib import Path

class Settings(BaseSettings):
    app_name: str = Field(default="Notification Service", alias="APP_NAME")
    env: str = Field(default="dev", alias="ENV")
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    db_connect_timeout_seconds: int = Field(default=5, alias="DB_CONNECT_TIMEOUT_SECONDS")
    # Identity service (bearer token -> user). Empty URL means tokens are never resolved.
    auth_service_url: Optional[str] = Field(default=None, alias="AUTH_SERVICE_URL")
    auth_timeout_seconds: float = Field(default=5.0, alias="AUTH_TIMEOUT_SECONDS")
    # Demo mode: substitute default_user_id when a token is missing or cannot be resolved.
    # Disable in any production deployment.
    demo_identity_fallback: bool = Field(default=True, alias="DEMO_IDENTITY_FALLBACK")
    # Placeholder owner for send-email/send-sms and the permissive identity policy.
    default_user_id: int = Field(default=1, alias="DEFAULT_USER_ID")
    api_prefix: str = Field(default="", alias="API_PREFIX")
    # Raw env value (string), parsed to a list via property to avoid JSON decoding errors
    cors_origins_raw: Optional[str] = Field(default=None, alias="CORS_ORIGINS", description="Comma or space separated list of allowed CORS origins")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_json: bool = Field(default=False, alias="LOG_JSON")
    auto_create_tables: bool = Field(default=True, alias="AUTO_CREATE_TABLES")
    seed_demo_notifications: bool = Field(default=True, alias="SEED_DEMO_NOTIFICATIONS")

    class Config:
        # Load env from the project root .env regardless of CWD
        env_file = str(Path(__file__).resolve().parents[2] / ".env")
        case_sensitive = False
        populate_by_name = True
        extra = "ignore"

    def _parse_list(self, v: Optional[str]) -> List[str]:
        if v is None:
            return []
        s = v.strip()
        if not s:
            return []
        if s.startswith("[") and s.endswith("]"):
            try:
                import json
                loaded = json.loads(s)
                if isinstance(loaded, list):
                    return [str(e).strip() for e in loaded if str(e).strip()]
            except ValueError:
                pass
        return [e.strip() for e in s.replace(" ", ",").split(",") if e.strip()]

    @property
    def cors_origins(self) -> List[str]:
        items = self._parse_list(self.cors_origins_raw)
        # Fallback dev defaults if none provided
        if not items:
            return ["http://localhost:5173", "http://127.0.0.1:5173"]
        # Dev convenience: ensure both localhost and 127.0.0.1 variants for same ports
        augmented = set(items)
        for origin in list(items):
            if origin.startswith("http://localhost:"):
                port = origin.rsplit(":", 1)[1]
                augmented.add(f"http://127.0.0.1:{port}")
            if origin.startswith("http://127.0.0.1:"):
                port = origin.rsplit(":", 1)[1]
                augmented.add(f"http://localhost:{port}")
        return sorted(augmented)

    @property
    def is_dev(self) -> bool:
        return self.env.lower() in {"dev", "development"}

settings = Settings()  # type: ignore
