import asyncio
import logging
import sys
from pathlib import Path
from aiogram import Bot, Dispatcher
from aiogram.fsm.storage.redis import RedisStorage

# Добавляем корень проекта в PYTHONPATH
sys.path.append(str(Path(__file__).resolve().parent.parent))

from storefront.core.config import BOT_TOKEN, REDIS_DSN
from storefront.core.database import create_tables
from storefront.handlers.start_handler import router as start_router
from storefront.handlers.register_handler import router as register_router
from storefront.handlers.dashboard_handler import router as dashboard_router
from storefront.handlers.admin_handler import router as admin_router
from storefront.handlers.storefront_handler import router as storefront_router


async def on_startup():
    # Создаем таблицы в БД
    await create_tables()


async def main():
    # Redis хранит FSM-состояния (коды продавца и магазина) между перезапусками
    storage = RedisStorage.from_url(REDIS_DSN)

    bot = Bot(token=BOT_TOKEN)
    # Удаляем все вебхуки перед началом polling
    await bot.delete_webhook(drop_pending_updates=True)

    dp = Dispatcher(storage=storage)

    # Витрина последней: её состояние browsing принимает произвольный текст
    dp.include_router(start_router)
    dp.include_router(register_router)
    dp.include_router(dashboard_router)
    dp.include_router(admin_router)
    dp.include_router(storefront_router)

    # Глобальный обработчик ошибок aiogram v3
    async def global_error_handler(exception: Exception, update: object = None) -> bool:
        logging.getLogger("aiogram").error("Exception %s, update %s", exception, update)
        return True

    dp.errors.register(global_error_handler)

    await on_startup()
    await dp.start_polling(bot)


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    asyncio.run(main())
