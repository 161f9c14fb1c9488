"""Infrastructure and technical constants."""

from typing import Final

DEFAULT_DATABASE_URL: Final = "sqlite:///./boatload.db"
LOG_FILE_NAME: Final = "boatload.log"
