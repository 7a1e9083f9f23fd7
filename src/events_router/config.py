"""Environment-driven settings.

All settings can be overridden via ``EVENTS_ROUTER_*`` environment variables
or a ``.env`` file::

    export EVENTS_ROUTER_LOG_LEVEL=DEBUG
    export EVENTS_ROUTER_PUBLISH_FAILURE_POLICY=dead_letter
    export EVENTS_ROUTER_MAX_CONCURRENT_PUBLISHES=16
"""

from __future__ import annotations

from typing import Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class RouterSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="EVENTS_ROUTER_",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    log_level: str = "INFO"

    # "raise" fails the invocation when a publish call fails outright;
    # "dead_letter" dead-letters every event of that call instead.
    publish_failure_policy: Literal["raise", "dead_letter"] = "raise"

    # None means unbounded fan-out.
    max_concurrent_publishes: Optional[int] = Field(default=None, ge=1)
