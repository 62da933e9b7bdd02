"""Entry point: ``python -m gremlinbot``"""

import asyncio
import logging
from pathlib import Path

# .env must be loaded before the config module reads the environment
from dotenv import load_dotenv

load_dotenv(dotenv_path=Path.cwd() / ".env", encoding="utf-8")

from gremlinbot.bot import main  # noqa: E402


def run() -> None:
    try:
        asyncio.run(main())
    except (KeyboardInterrupt, asyncio.CancelledError):
        logging.getLogger("gremlinbot").info("Bot stopped manually")


if __name__ == "__main__":
    run()
