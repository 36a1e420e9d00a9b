from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sanic.log import logger


class Config(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", frozen=True)

    WEBHOOK_SECRET: str
    PRIVATE_KEY: str
    APP_ID: int

    OVERRIDE_LOGGING: Literal[
        "CRITICAL",
        "FATAL",
        "ERROR",
        "WARNING",
        "WARN",
        "INFO",
        "DEBUG",
        "NOTSET",
    ] = "INFO"

    STERILE: bool = False

    # seconds, applied to every outbound GitHub call
    API_TIMEOUT: float = 10.0

    HOST: str = "0.0.0.0"
    PORT: int = 3000

    CHECK_RUN_NAME: str = "Significant Change"
    LEARN_MORE_URL: str = (
        "https://wiki.corp.rapid7.com/display/PD/Fedramp+Significant+Change+Management"
    )
    SIA_FORM_URL: str = "https://docs.google.com/spreadsheets/d/18qCKxDyzqi6gvYV-HQBl8GChx2BUUiCZqnLxIW1dm-M"
    REVIEW_CHECKLIST: list[str] = []

    @field_validator("PRIVATE_KEY")
    @classmethod
    def unescape_newlines(cls, value: str) -> str:
        # keys passed through a single-line env var carry literal "\n"
        return value.replace("\\n", "\n")

    def print_config(self):
        """Print configuration values with sensitive attributes masked"""
        sensitive_attrs = {
            "WEBHOOK_SECRET",
            "PRIVATE_KEY",
        }

        logger.info("=== Significant Change Check Configuration ===")
        for field_name, field_value in self.model_dump().items():
            if field_name in sensitive_attrs:
                logger.info(f"{field_name}: ***")
            else:
                logger.info(f"{field_name}: {field_value}")
        logger.info("==============================================")
