"""HTTP keep-alive server for process supervisors"""

import asyncio
import logging
import time
from typing import TYPE_CHECKING, Any

from aiohttp import web

from .config import BOT_NAME, BotConfig

if TYPE_CHECKING:
    from discord.ext.commands import Bot

logger = logging.getLogger("gremlinbot.health_server")

ALIVE_TEXT = f"{BOT_NAME} is Alive!"


class HealthCheckServer:
    """Liveness responder; ``GET /`` always answers 200 with a fixed body"""

    def __init__(
        self,
        bot: "Bot | None" = None,
        host: str = "0.0.0.0",
        port: int | None = None,
        heartbeat_interval: float = 300.0,
    ) -> None:
        self.bot: Any = bot
        self.host = host
        self.port = port or BotConfig.PORT
        self.heartbeat_interval = heartbeat_interval
        self.app = web.Application()
        self.runner: web.AppRunner | None = None
        self._start_time: float = time.time()
        self._heartbeat_task: asyncio.Task | None = None
        self._setup_routes()

    def _setup_routes(self) -> None:
        self.app.router.add_get("/", self.handle_root)
        self.app.router.add_get("/health", self.handle_health)
        self.app.router.add_get("/ping", self.handle_ping)

    def _is_ready(self) -> bool:
        return self.bot is not None and self.bot.is_ready()

    async def handle_root(self, request: web.Request) -> web.Response:
        return web.Response(text=ALIVE_TEXT)

    async def handle_health(self, request: web.Request) -> web.Response:
        """Always 200 (liveness); readiness is reported in the body"""
        ready = self._is_ready()
        return web.json_response(
            {
                "status": "healthy" if ready else "starting",
                "ready": ready,
                "uptime_seconds": int(time.time() - self._start_time),
            }
        )

    async def handle_ping(self, request: web.Request) -> web.Response:
        return web.Response(text="pong")

    async def _heartbeat(self) -> None:
        while True:
            await asyncio.sleep(self.heartbeat_interval)
            uptime = int(time.time() - self._start_time)
            ready = self._is_ready()
            guilds = len(self.bot.guilds) if ready else 0
            logger.info(f"Heartbeat: uptime={uptime}s, ready={ready}, guilds={guilds}")

    async def start(self) -> None:
        try:
            self.runner = web.AppRunner(self.app)
            await self.runner.setup()
            site = web.TCPSite(self.runner, self.host, self.port)
            await site.start()

            self._heartbeat_task = asyncio.create_task(self._heartbeat())
            logger.info(f"Keep-alive server listening on {self.host}:{self.port}")
        except Exception as e:
            logger.exception(f"Failed to start health server: {e}")
            raise

    async def stop(self) -> None:
        if self._heartbeat_task:
            self._heartbeat_task.cancel()
        if self.runner:
            try:
                await self.runner.cleanup()
                logger.info("Health server stopped")
            except Exception as e:
                logger.exception(f"Error stopping health server: {e}")
