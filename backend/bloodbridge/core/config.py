from typing import List, Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    app_name: str = "BloodBridge API"
    log_level: str = "INFO"

    mongo_uri: str = "mongodb://localhost:27017"
    mongo_db: str = "bloodBridge"
    # "memory" keeps everything in-process (tests, demos)
    store_backend: Literal["mongo", "memory"] = "mongo"

    auth_provider: Literal["firebase", "jwt"] = "firebase"
    firebase_credentials: str = "firebaseServiceAccountKey.json"
    jwt_secret: str = "dev"
    jwt_alg: str = "HS256"

    stripe_secret_key: str = ""
    payment_currency: str = "usd"

    default_avatar: str = "https://i.ibb.co/4pDNDk1/avatar.png"
    cors_origins: List[str] = ["*"]

    # gate id-based mutations behind token/admin checks
    strict_auth: bool = False

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

settings = Settings()
