import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

load_dotenv()


@dataclass
class Settings:
    # Data file settings
    data_dir: str = os.getenv("LIBRARY_DATA_DIR", "data")
    data_file_name: str = os.getenv("LIBRARY_DATA_FILE", "books.tsv")

    # Logging
    log_level: str = os.getenv("LIBRARY_LOG_LEVEL", "WARNING").upper()

    # CLI output: plain | json | rich
    output_mode: str = os.getenv("LIB_CLI_OUTPUT", "plain").lower()

    @property
    def data_path(self) -> Path:
        return Path(self.data_dir) / self.data_file_name


settings = Settings()
