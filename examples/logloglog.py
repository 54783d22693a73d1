"""Example of logging with sabot.

Run:
    $ python examples/logloglog.py 2>&1 | jq --slurp

Output:
    [
      {
        "config": "{\"version\":\"dev\",\"logger\":{\"max_len\":99,\"enable_debug\":false,\"enable_trace\":false}}",
        "run_id": "123123123",
        "msg": "logloglog starting",
        "level": "info",
        "ts": "2024-01-03T10:30:45.758434441Z"
      },
      {
        "run_id": "123123123",
        "error": "Traceback (most recent call last):\n  File \"examples/logl--truncated--",
        "msg": "failed to, you know ..",
        "level": "error",
        "ts": "2024-01-03T10:30:45.758722223Z"
      }
    ]
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from sabot import Context
from sabot.config import SabotSettings


class Config(BaseModel):
    version: str = "dev"
    logger: SabotSettings = Field(default_factory=lambda: SabotSettings(max_len=99))


def divide(a: int, b: int) -> float:
    return a / b


def main() -> None:
    # usually loaded from the environment, but literal for demo
    cfg = Config()

    lgr = cfg.logger.new()

    # usually a random run id, but literal for demo
    ctx = lgr.with_fields(Context.background(), "run_id", "123123123")

    lgr.info(ctx, "logloglog starting", "config", cfg)
    try:
        divide(1, 0)
    except ZeroDivisionError as exc:
        lgr.error(ctx, "failed to, you know ..", exc)


if __name__ == "__main__":
    main()
