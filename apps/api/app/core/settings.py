from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # DB bootstrap (dev only)
    AUTO_DB_BOOTSTRAP: bool = False

    # Audit report
    EXPORT_SHEET_NAME: str = "Maintenance Logs"
    EXPORT_FILENAME: str = "maintenance_logs.xlsx"

    class Config:
        env_file = ".env"
        extra = "ignore"


settings = Settings()
