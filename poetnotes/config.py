from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="POETNOTES_")

    # Persistence settings
    project_path: str = "data/project.json"
    autosave_interval_seconds: float = 30.0

    # Connector geometry is re-polled because rectangles change on reflow
    connector_repoll_seconds: float = 0.1

    log_level: str = "INFO"  # Can be DEBUG, INFO, WARNING, ERROR, CRITICAL


settings = Settings()
