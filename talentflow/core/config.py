from pydantic_settings import BaseSettings
from typing import List, Union
from pydantic import field_validator
import json


class Settings(BaseSettings):
    """Application settings loaded from environment variables"""

    # API Settings
    API_PREFIX: str = "/api"
    PROJECT_NAME: str = "TalentFlow API"

    # Database Settings
    POSTGRES_USER: str = "user"
    POSTGRES_PASSWORD: str = "password"
    POSTGRES_SERVER: str = "localhost"
    POSTGRES_PORT: str = "5432"
    POSTGRES_DB: str = "talentflow"

    @property
    def DATABASE_URL(self) -> str:
        return f"postgresql://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}@{self.POSTGRES_SERVER}:{self.POSTGRES_PORT}/{self.POSTGRES_DB}"

    # Logging Settings
    LOG_LEVEL: str = "INFO"
    JSON_LOGS: bool = False

    # Pagination Settings
    DEFAULT_JOBS_PAGE_SIZE: int = 10
    DEFAULT_CANDIDATES_PAGE_SIZE: int = 50
    MAX_PAGE_SIZE: int = 1000

    # Fault injection for exercising optimistic UI rollback (0.0 disables)
    SIMULATED_ERROR_RATE: float = 0.0
    SIMULATED_REORDER_ERROR_RATE: float = 0.0

    # Client Settings
    API_BASE_URL: str = "http://localhost:8000/api"
    API_TIMEOUT_SECONDS: float = 10.0

    # CORS Settings - can be set as JSON string in .env
    BACKEND_CORS_ORIGINS: Union[List[str], str] = ["http://localhost:3000", "http://localhost:8000"]

    @field_validator("BACKEND_CORS_ORIGINS", mode="before")
    @classmethod
    def parse_cors_origins(cls, v: Union[List[str], str]) -> List[str]:
        """Parse CORS origins from JSON string or list"""
        if isinstance(v, str):
            try:
                return json.loads(v)
            except json.JSONDecodeError:
                # If not valid JSON, split by comma
                return [origin.strip() for origin in v.split(",")]
        return v

    @field_validator("SIMULATED_ERROR_RATE", "SIMULATED_REORDER_ERROR_RATE")
    @classmethod
    def check_rate(cls, v: float) -> float:
        """Error rates are probabilities"""
        if not 0.0 <= v <= 1.0:
            raise ValueError("error rate must be between 0 and 1")
        return v

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
