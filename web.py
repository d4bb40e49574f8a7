"""
Web widget — Flask UI for the weather lookup.

Provides:
  - The widget page: search form, error line, summary with icon, unit toggle
  - Form actions for search and unit toggle
  - REST API for programmatic access

Each browser gets its own lookup state, keyed by an id kept in the signed
session cookie. Runs in a background thread alongside the Telegram bot, or
on its own when no bot token is configured.
"""

import asyncio
import uuid

from flask import Flask, render_template, request, jsonify, redirect, url_for, session

from abilities.messages import condition_message, location_message, temperature_message
from config import WEB_SECRET
from lookup import LookupManager


_lookups = None  # set via create_app()


def _messages(state) -> dict:
    obs = state.observation
    if obs is None:
        return {}
    return {
        "condition": condition_message(obs.description),
        "temperature": temperature_message(obs.temperature_c, obs.temperature_f, state.use_celsius),
        "location": location_message(obs.location, obs.is_day),
    }


def _run(coro):
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


def create_app(lookups: LookupManager):
    global _lookups
    _lookups = lookups

    app = Flask(__name__)
    app.secret_key = WEB_SECRET

    def current_lookup():
        if "sid" not in session:
            session["sid"] = uuid.uuid4().hex
        return _lookups.get(session["sid"])

    # ── Pages ───────────────────────────────────────────────

    @app.route("/")
    def index():
        state = current_lookup().state
        return render_template("widget.html", state=state, messages=_messages(state))

    # ── Form actions ────────────────────────────────────────

    @app.route("/search", methods=["POST"])
    def action_search():
        lookup = current_lookup()
        _run(lookup.submit(request.form.get("location", "")))
        return redirect(url_for("index"))

    @app.route("/toggle", methods=["POST"])
    def action_toggle():
        current_lookup().toggle_unit()
        return redirect(url_for("index"))

    # ── API endpoints ───────────────────────────────────────

    @app.route("/api/weather", methods=["GET"])
    def api_weather():
        lookup = current_lookup()
        state = _run(lookup.submit(request.args.get("q", "")))
        if state is None:
            return jsonify({"error": "Superseded by a newer search."}), 409
        if state.observation is None:
            status = 404 if state.phase == "failure" else 400
            return jsonify({"error": state.error}), status
        return jsonify({
            "observation": state.observation.to_dict(),
            "use_celsius": state.use_celsius,
            "messages": _messages(state),
        })

    @app.route("/api/toggle", methods=["POST"])
    def api_toggle():
        lookup = current_lookup()
        lookup.toggle_unit()
        return jsonify({
            "use_celsius": lookup.state.use_celsius,
            "messages": _messages(lookup.state),
        })

    @app.route("/api/state", methods=["GET"])
    def api_state():
        state = current_lookup().state
        return jsonify({**state.to_dict(), "messages": _messages(state)})

    return app
