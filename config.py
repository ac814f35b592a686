# Configuration de l application
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    SECRET_KEY: str = "change-me"
    BASE_URL: str = "http://localhost:5000"  # URL publique utilisee dans les liens invites

    # stockage des pdf (original/ et signed/)
    STORAGE_DIR: str = "storage"
    MAX_PDF_SIZE_MB: int = 10
    # URI de la base de donnees: sqlite en local
    SQLALCHEMY_DATABASE_URI: str = "sqlite:///guestsign.db"
    SQLALCHEMY_TRACK_MODIFICATIONS: bool = False

    # smtp pour l envoi des liens de signature
    SMTP_HOST: str = ""
    SMTP_PORT: int = 587
    SMTP_USER: str = ""
    SMTP_PASS: str = ""
    SMTP_SECURE: bool = False
    MAIL_FROM: str = ""

    # endpoint de calibration (debug uniquement)
    CALIBRATION_ENABLED: bool = False
    # True: une erreur d ecriture est journalisee sans faire echouer la requete
    BEST_EFFORT_PERSISTENCE: bool = False

    LOG_LEVEL: str = "INFO"
    LOG_FILE: str = ""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()
