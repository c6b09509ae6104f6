"""Точка входа бота."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import sys
from typing import List, Optional

from aiogram import Bot, Dispatcher
from aiogram.webhook.aiohttp_server import SimpleRequestHandler, setup_application
from aiohttp import web
from dotenv import load_dotenv

from guardbot.app.container import Container
from guardbot.presentation import setup_dispatcher
from guardbot.utils.monitoring import capture_error, start_metrics_server

logger = logging.getLogger(__name__)


def setup_logging() -> None:
    logging.basicConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        handlers=[logging.FileHandler("guardbot.log"), logging.StreamHandler()],
    )


async def health(request: web.Request) -> web.Response:
    return web.Response(text="OK")


async def run_webhook(container: Container, bot: Bot, dp: Dispatcher) -> None:
    """Запуск в режиме вебхука на aiohttp."""
    app = web.Application()
    app.router.add_get("/", health)
    SimpleRequestHandler(dispatcher=dp, bot=bot).register(app, path=container.webhook_path)
    setup_application(app, dp, bot=bot)

    await bot.set_webhook(f"{container.webhook_url.rstrip('/')}{container.webhook_path}")
    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, container.webhook_host, container.webhook_port)
    await site.start()
    logger.info(
        f"Вебхук слушает {container.webhook_host}:{container.webhook_port}{container.webhook_path}"
    )
    try:
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()


async def run(dry_run: bool = False) -> None:
    container = Container()
    if not container.token:
        logger.error("BOT_TOKEN не задан")
        sys.exit(1)

    bot = Bot(container.token)
    dp = Dispatcher()
    setup_dispatcher(dp, container.build_services(bot))

    try:
        logger.info("Инициализация хранилища...")
        await container.setup()
        if dry_run:
            logger.info("Проверка конфигурации прошла успешно")
            return

        if container.use_metrics:
            start_metrics_server(container.metrics_port)

        if container.webhook_url:
            await run_webhook(container, bot, dp)
        else:
            await bot.delete_webhook(drop_pending_updates=False)
            logger.info("Запуск long polling")
            await dp.start_polling(bot)
    except Exception as e:
        capture_error(e, {"stage": "runtime"})
        raise
    finally:
        await container.close()
        await bot.session.close()


def main(argv: Optional[List[str]] = None) -> None:
    parser = argparse.ArgumentParser(description="Бот модерации групповых чатов")
    parser.add_argument("--dry-run", action="store_true", help="Проверить конфигурацию и выйти")
    args = parser.parse_args(argv)

    load_dotenv()
    setup_logging()
    asyncio.run(run(dry_run=args.dry_run))


if __name__ == "__main__":
    main()
