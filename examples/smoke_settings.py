from __future__ import annotations

import logging
from pathlib import Path
from typing import ClassVar

from pydantic import BaseModel, ConfigDict, Field

from layered_settings import ConfigProfile, parse_configuration
from layered_settings.logging import LoggingSettings, init_logging


class ApplicationSettings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    address: str
    port: int
    debug: bool = False


class Settings(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")
    config_profile: ClassVar[ConfigProfile] = ConfigProfile(environment_file_required=False)

    stage: str
    application: ApplicationSettings
    logging: LoggingSettings = Field(default_factory=LoggingSettings)


def main() -> None:
    # Try: APP_ENVIRONMENT=production APP__APPLICATION__PORT=9000 python examples/smoke_settings.py
    settings = parse_configuration(Settings, base_dir=Path(__file__).parent)
    init_logging(settings.logging)

    logger = logging.getLogger("smoke")
    logger.info("Settings loaded stage=%s", settings.stage)
    logger.info("Listening on %s:%s debug=%s", settings.application.address, settings.application.port, settings.application.debug)


if __name__ == "__main__":
    main()
