# solver_harness/config.py

from typing import Optional
import logging
import sys

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from dotenv import load_dotenv
from pythonjsonlogger.json import JsonFormatter

load_dotenv()

# Custom JSON formatter that excludes null/None fields
class CustomJsonFormatter(JsonFormatter):
    """Custom JSON formatter that only includes fields with non-None values."""

    def add_fields(self, log_record, record, message_dict):
        """Override to filter out None values before adding to JSON output."""
        super().add_fields(log_record, record, message_dict)

        # Remove keys with None values
        log_record_copy = dict(log_record)
        for key, value in log_record_copy.items():
            if value is None:
                del log_record[key]

def setup_json_logging(log_level: int = logging.INFO) -> None:
    """Initialize JSON logging configuration for the harness.

    Logs go to stderr so stdout only carries the human-readable solve report.
    """
    handler = logging.StreamHandler(sys.stderr)

    # JSON formatter with common fields used across the harness
    formatter = CustomJsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s "
        "%(problem)s %(backend)s %(status)s %(variable_count)s "
        "%(constraint_count)s %(objective_value)s %(error)s"
    )

    handler.setFormatter(formatter)

    root_logger = logging.getLogger("solver_harness")
    root_logger.setLevel(log_level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers = []

    root_logger.addHandler(handler)

    # Prevent propagation to avoid duplicate logs
    root_logger.propagate = False


def setup_text_logging(log_level: int = logging.INFO) -> None:
    logging.basicConfig(
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s :: %(message)s",
        stream=sys.stderr,
    )
    logging.getLogger("solver_harness").setLevel(log_level)


def parse_log_level(level: Optional[str]) -> int:
    return getattr(logging, str(level or "").upper(), logging.INFO)


class Settings(BaseSettings):
    # App
    ENV: str = "dev"
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = True

    # Solver
    SOLVER_BACKEND: str = "gscip"
    SOLVER_TIME_LIMIT_SECONDS: Optional[float] = None
    SOLVER_ENABLE_OUTPUT: bool = False
    SOLVER_THREADS: Optional[int] = None

    # Absolute tolerance (scaled by bound magnitude) for post-solve checks
    SOLUTION_TOLERANCE: float = 1e-6

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("SOLVER_BACKEND")
    @classmethod
    def normalize_backend(cls, v: str) -> str:
        v = (v or "").strip().lower()
        if not v:
            raise ValueError("SOLVER_BACKEND must not be empty")
        return v

    @field_validator("SOLVER_TIME_LIMIT_SECONDS")
    @classmethod
    def validate_time_limit(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v <= 0:
            raise ValueError(f"SOLVER_TIME_LIMIT_SECONDS must be > 0, got {v}")
        return v

    @field_validator("SOLVER_THREADS")
    @classmethod
    def validate_threads(cls, v: Optional[int]) -> Optional[int]:
        if v is not None and v < 1:
            raise ValueError(f"SOLVER_THREADS must be >= 1, got {v}")
        return v

    @field_validator("SOLUTION_TOLERANCE")
    @classmethod
    def validate_tolerance(cls, v: float) -> float:
        if v <= 0:
            raise ValueError(f"SOLUTION_TOLERANCE must be > 0, got {v}")
        return v


settings = Settings()
