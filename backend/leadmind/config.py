import os
from pathlib import Path
from typing import Optional, List
from pydantic_settings import BaseSettings

PACKAGE_DIR = Path(__file__).resolve().parent


class Settings(BaseSettings):
    """Application configuration with environment variable support"""

    # Server settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    DEBUG: bool = False
    RELOAD: bool = False
    LOG_LEVEL: str = "INFO"

    # Assessment settings
    MAX_SELECTED_CONCERNS: int = 3  # Wizard lets users pick up to 3 keywords
    ASSESSMENT_TTL_HOURS: int = 24

    # Staff endpoints are disabled unless a key is configured
    ADMIN_API_KEY: Optional[str] = None

    # Data paths
    DATA_DIR: str = str(PACKAGE_DIR / "data")
    QUESTIONS_FILE: str = "questions.json"
    CONCERNS_FILE: str = "concerns.json"
    LEADERSHIP_FILE: str = "leadership_types.json"
    SOLUTIONS_FILE: str = "solutions.json"
    FOLLOWERSHIP_FILE: str = "followership_types.json"
    COMPATIBILITY_FILE: str = "compatibility.json"

    # CORS settings
    ALLOWED_ORIGINS: List[str] = [
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = True
        extra = "ignore"

    def data_file(self, name: str) -> str:
        """Resolve a catalog file name against DATA_DIR"""
        return os.path.join(self.DATA_DIR, name)

    @property
    def catalog_files(self) -> List[str]:
        return [
            self.data_file(self.QUESTIONS_FILE),
            self.data_file(self.CONCERNS_FILE),
            self.data_file(self.LEADERSHIP_FILE),
            self.data_file(self.SOLUTIONS_FILE),
            self.data_file(self.FOLLOWERSHIP_FILE),
            self.data_file(self.COMPATIBILITY_FILE),
        ]


settings = Settings()
