from __future__ import annotations

import os
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv
from pydantic import BaseModel


class Settings(BaseModel):
    APP_ENV: str = 'dev'
    LOG_LEVEL: str = 'INFO'
    DEBUG_STEPS: bool = False

    # IANA zone used for "now" and for reading naive datetimes; empty means system local time.
    TIMEZONE: str = ''
    REPORTER_BAIL: bool = False


def _env_bool(name: str, default: bool) -> bool:
    v = os.getenv(name)
    if v is None:
        return default
    return str(v).strip().lower() in {'1', 'true', 'yes', 'on'}


@lru_cache
def get_settings() -> Settings:
    load_dotenv(dotenv_path='.env')
    data = {
        'APP_ENV': os.getenv('APP_ENV', 'dev'),
        'LOG_LEVEL': os.getenv('LOG_LEVEL', 'INFO'),
        'DEBUG_STEPS': _env_bool('DEBUG_STEPS', False),
        'TIMEZONE': os.getenv('TIMEZONE', '').strip(),
        'REPORTER_BAIL': _env_bool('REPORTER_BAIL', False),
    }
    settings = Settings(**data)
    if settings.TIMEZONE:
        try:
            ZoneInfo(settings.TIMEZONE)
        except (ZoneInfoNotFoundError, ValueError):
            raise RuntimeError(f'TIMEZONE "{settings.TIMEZONE}" is not a known IANA zone')
    return settings
