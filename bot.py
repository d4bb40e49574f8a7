"""
Telegram Bot — the chat interface to the weather widget.

Every chat gets its own lookup state. Plain text or /weather <city> runs a
search; the inline button under a result switches °C/°F without refetching.
Also serves the web widget.

Usage:
  python bot.py
"""

import logging
import threading

from telegram import InlineKeyboardButton, InlineKeyboardMarkup, Update
from telegram.ext import (
    ApplicationBuilder,
    CallbackQueryHandler,
    CommandHandler,
    MessageHandler,
    filters,
    ContextTypes,
)

from abilities.messages import unit_symbol
from config import LOG_LEVEL, TELEGRAM_BOT_TOKEN
from lookup import LookupManager

logging.basicConfig(
    format="%(asctime)s [%(name)s] %(levelname)s %(message)s",
    level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
)
logging.getLogger("httpx").setLevel(logging.WARNING)
log = logging.getLogger("bot")

lookups = LookupManager()

TOGGLE_UNIT = "toggle_unit"
STALE_RESULT = "This result is out of date. Send the city again to refresh it."

HELP_TEXT = (
    "Weather Widget\n"
    "Search for the current weather condition in your city.\n\n"
    "/weather <city>  — current weather for a city\n"
    "/units  — switch between °C and °F\n"
    "/help  — show this message\n\n"
    "Or just send a city name."
)


def _keyboard(lookup):
    """
    Unit toggle button, only when there is a result to re-render.

    The callback data carries the generation of the search that produced the
    result, so a button under an older message can be recognised as stale.
    """
    state = lookup.state
    if state.observation is None:
        return None
    return InlineKeyboardMarkup(
        [[InlineKeyboardButton(state.toggle_label, callback_data=f"{TOGGLE_UNIT}:{state.generation}")]]
    )


async def search(update: Update, text: str):
    lookup = lookups.get(update.effective_chat.id)
    if not text.strip():
        await lookup.submit(text)
        await update.message.reply_text(lookup.summary_text())
        return

    pending = await update.message.reply_text("Loading...")
    if await lookup.submit(text) is None:
        # A newer search in this chat took over; its own reply shows the result
        await pending.delete()
        return
    await pending.edit_text(lookup.summary_text(), reply_markup=_keyboard(lookup))


# ── Command handlers ────────────────────────────────────────────

async def cmd_start(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await update.message.reply_text(HELP_TEXT)


async def cmd_help(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await cmd_start(update, context)


async def cmd_weather(update: Update, context: ContextTypes.DEFAULT_TYPE):
    await search(update, " ".join(context.args or []))


async def cmd_units(update: Update, context: ContextTypes.DEFAULT_TYPE):
    lookup = lookups.get(update.effective_chat.id)
    use_celsius = lookup.toggle_unit()
    if lookup.state.observation is None:
        await update.message.reply_text(f"Units set to {unit_symbol(use_celsius)}.")
        return
    await update.message.reply_text(lookup.summary_text(), reply_markup=_keyboard(lookup))


async def on_toggle(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Inline button: flip the unit and re-render the result in place."""
    query = update.callback_query
    lookup = lookups.get(update.effective_chat.id)
    generation = int(query.data.rsplit(":", 1)[1])
    if lookup.state.observation is None or not lookup.is_current(generation):
        await query.answer(STALE_RESULT)
        return
    await query.answer()
    lookup.toggle_unit()
    await query.edit_message_text(lookup.summary_text(), reply_markup=_keyboard(lookup))


async def handle_message(update: Update, context: ContextTypes.DEFAULT_TYPE):
    """Treat any plain text as a city name."""
    text = update.message.text
    if text is None:
        return
    await search(update, text)


# ── Main ────────────────────────────────────────────────────────

def start_web():
    """Run the Flask web widget (blocking)."""
    try:
        from web import create_app
        app = create_app(lookups)
        # Suppress Flask request logs in the main console
        logging.getLogger("werkzeug").setLevel(logging.WARNING)
        from config import WEB_HOST, WEB_PORT
        log.info(f"Web widget: http://{WEB_HOST}:{WEB_PORT}")
        app.run(host=WEB_HOST, port=WEB_PORT, use_reloader=False)
    except Exception as e:
        log.error(f"Web widget failed to start: {e}")


def main():
    if not TELEGRAM_BOT_TOKEN:
        log.info("TELEGRAM_BOT_TOKEN not set, running the web widget only")
        start_web()
        return

    # Start web widget in background thread
    web_thread = threading.Thread(target=start_web, daemon=True)
    web_thread.start()

    app = ApplicationBuilder().token(TELEGRAM_BOT_TOKEN).build()

    app.add_handler(CommandHandler("start", cmd_start))
    app.add_handler(CommandHandler("help", cmd_help))
    app.add_handler(CommandHandler("weather", cmd_weather))
    app.add_handler(CommandHandler("units", cmd_units))
    app.add_handler(CallbackQueryHandler(on_toggle, pattern=rf"^{TOGGLE_UNIT}:\d+$"))
    app.add_handler(MessageHandler(filters.TEXT & ~filters.COMMAND, handle_message))

    log.info("Bot starting (Telegram polling)...")
    app.run_polling()


if __name__ == "__main__":
    main()
