from pydantic_settings import BaseSettings, SettingsConfigDict


class FirebaseConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="FIREBASE_")

    credentials_path: str | None = None
    project_id: str | None = None
    notifications_collection: str = "notifications"
    users_collection: str = "users"


class RedisConfig(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="REDIS_")

    host: str = "localhost"
    port: int = 6379
    db: int = 0
