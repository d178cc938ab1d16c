"""Process configuration, read once from the environment at import."""

import logging
import os
from dataclasses import dataclass

SERVER_NAME = "FuncStudy-Math"
SERVER_INSTRUCTIONS = (
    "You are a precise analyst of real functions of one variable x. "
    "You have access to 2 deterministic tools. Use calculus_tool to find a "
    "function's domain and limits, and math_tool for arithmetic. Limits are "
    "numeric estimates; report 'undetermined' results as they are. Be concise."
)


@dataclass(frozen=True)
class Settings:
    log_level: int = logging.INFO
    ui_host: str = "0.0.0.0"
    ui_port: int = 7861
    share: bool = False


def _flag(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "y", "t")


def load_settings(env=None) -> Settings:
    env = os.environ if env is None else env
    level = getattr(logging, env.get("FUNCSTUDY_LOG_LEVEL", "INFO").upper(), None)
    return Settings(
        log_level=level if isinstance(level, int) else logging.INFO,
        ui_host=env.get("FUNCSTUDY_UI_HOST", Settings.ui_host),
        ui_port=int(env.get("FUNCSTUDY_UI_PORT", Settings.ui_port)),
        share=_flag(env.get("FUNCSTUDY_SHARE", "")),
    )


SETTINGS = load_settings()
