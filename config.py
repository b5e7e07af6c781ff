import os
from dataclasses import dataclass
from dotenv import load_dotenv

load_dotenv()

@dataclass
class Settings:
    # Catalog source
    catalog_file: str = os.getenv("LIBRARY_CATALOG_FILE", "output.csv")

    # Application
    app_name: str = os.getenv("APP_NAME", "Library Management System")
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")

    # Logging
    log_level: str = os.getenv("LOG_LEVEL", "INFO").upper()


settings = Settings()
