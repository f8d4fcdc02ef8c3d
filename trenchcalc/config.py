from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./excavation.db"
    APP_NAME: str = "Trench Excavation Calculator"
    LOG_LEVEL: str = "INFO"

    # Saved calculations: most recent N kept, oldest evicted first
    MAX_SAVED_CALCULATIONS: int = 20

    # Working clearance below the bedding when depth is auto-calculated (inches)
    WORKING_CLEARANCE_IN: float = 4.0

    class Config:
        env_file = ".env"


settings = Settings()
