import asyncio
import logging
from aiogram import Bot, Dispatcher
from .config import load_settings
from .handlers import register_handlers

async def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    settings = load_settings()
    if not settings.gemini_api_key:
        logging.getLogger(__name__).warning("no GOOGLE_API_KEY set, questions come from the offline bank only")
    bot = Bot(settings.bot_token)
    try:
        dp = Dispatcher()
        register_handlers(dp, settings=settings)
        await dp.start_polling(bot)
    except Exception:
        logging.getLogger(__name__).exception("bot_run_failed")
        raise
    finally:
        await bot.session.close()

def cli() -> None:
    asyncio.run(main())

if __name__ == "__main__":
    cli()
