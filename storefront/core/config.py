import os
from dotenv import load_dotenv

load_dotenv(override=True)

BOT_TOKEN = os.getenv("BOT_TOKEN")
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite+aiosqlite:///./storefront.db")


admin_ids_str = os.getenv("ADMIN_CHAT_IDS", os.getenv("ADMIN_CHAT_ID", ""))
ADMIN_CHAT_IDS = [
    int(chat_id.strip()) for chat_id in admin_ids_str.split(",") if chat_id.strip()
]


REDIS_DSN = os.getenv("REDIS_DSN", "redis://localhost:6379/0")


DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "MAD")
