from __future__ import annotations

import io
import uuid
from threading import Thread
from typing import Optional

from flask import (
    Blueprint,
    current_app,
    flash,
    jsonify,
    make_response,
    redirect,
    render_template,
    request,
    send_file,
    session,
    url_for,
)

from lead_miner.aggregator import FAILURE_MESSAGE, AggregationOutcome, LeadAggregator
from lead_miner.config import ConfigError
from lead_miner.exporter import export_filename, export_to_csv, export_to_excel
from lead_miner.models import Location, RunState
from lead_miner.utils import logger

bp = Blueprint('main', __name__)

THEME_COOKIE = "theme"
THEME_MAX_AGE = 365 * 24 * 3600
THEMES = ("light", "dark")


def _session_key() -> str:
    if "sid" not in session:
        session["sid"] = uuid.uuid4().hex
    return session["sid"]


def _wants_json() -> bool:
    return request.is_json or request.accept_mimetypes.best == "application/json"


def _current_theme() -> Optional[str]:
    theme = request.cookies.get(THEME_COOKIE)
    return theme if theme in THEMES else None


def _search_client():
    client = current_app.extensions.get("lead_miner_client")
    if client is None:
        client = current_app.config["CLIENT_FACTORY"]()
        current_app.extensions["lead_miner_client"] = client
    return client


def run_search_async(app, key: str, query: str, location: Optional[Location]) -> None:
    registry = app.extensions["lead_miner_jobs"]
    try:
        aggregator = LeadAggregator(app.extensions["lead_miner_client"], page_delay=app.config["PAGE_DELAY"])
        outcome = aggregator.run_search(query, location=location, listener=lambda ev: registry.update(key, ev))
    except Exception as e:
        logger.exception(f"Flask search error: {e}")
        outcome = AggregationOutcome(state=RunState.FAILURE, message=FAILURE_MESSAGE, error=e)
    registry.finish(key, outcome)


@bp.route("/", methods=["GET"])
def index():
    job = current_app.extensions["lead_miner_jobs"].snapshot(_session_key())
    return render_template("index.html", job=job, theme=_current_theme())


@bp.route("/search", methods=["POST"])
def start_search():
    data = request.get_json(silent=True) if request.is_json else request.form
    data = data or {}
    query = (data.get("query") or "").strip()
    location = Location.from_values(data.get("lat"), data.get("lng"))

    if not query:
        if _wants_json():
            return jsonify({"error": "Query must not be empty."}), 400
        flash("Type something to search for.", "warning")
        return redirect(url_for("main.index"))

    try:
        _search_client()
    except ConfigError as e:
        logger.error(str(e))
        if _wants_json():
            return jsonify({"error": str(e)}), 503
        flash("The search service is not configured.", "error")
        return redirect(url_for("main.index"))

    key = _session_key()
    registry = current_app.extensions["lead_miner_jobs"]
    if registry.try_start(key, query) is None:
        logger.info(f"Ignoring new search {query!r}: a search is already running for this session")
        if _wants_json():
            return jsonify({"error": "A search is already running."}), 409
        flash("A search is already running. Please wait for it to finish.", "info")
        return redirect(url_for("main.index"))

    app = current_app._get_current_object()
    t = Thread(target=run_search_async, args=(app, key, query, location))
    t.daemon = True
    t.start()

    if _wants_json():
        return jsonify(registry.snapshot(key)), 202
    return redirect(url_for("main.index"))


@bp.route("/status", methods=["GET"])
def status():
    return jsonify(current_app.extensions["lead_miner_jobs"].snapshot(_session_key()))


def _finished_contacts():
    job = current_app.extensions["lead_miner_jobs"].get(_session_key())
    if job.result is None or not job.result.contacts:
        return job.query, []
    return job.query, list(job.result.contacts)


@bp.route("/export/excel")
def export_excel_route():
    query, contacts = _finished_contacts()
    if not contacts:
        flash("No data to export", "warning")
        return redirect(url_for("main.index"))
    bio = io.BytesIO()
    export_to_excel(contacts, bio)
    bio.seek(0)
    return send_file(
        bio,
        as_attachment=True,
        download_name=export_filename(query, "xlsx"),
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )


@bp.route("/export/csv")
def export_csv_route():
    query, contacts = _finished_contacts()
    if not contacts:
        flash("No data to export", "warning")
        return redirect(url_for("main.index"))
    bio = io.BytesIO()
    export_to_csv(contacts, bio)
    bio.seek(0)
    return send_file(bio, as_attachment=True, download_name=export_filename(query, "csv"), mimetype="text/csv")


@bp.route("/theme", methods=["POST"])
def toggle_theme():
    requested = request.form.get("theme") or (request.get_json(silent=True) or {}).get("theme")
    if requested not in THEMES:
        requested = "light" if _current_theme() == "dark" else "dark"
    if _wants_json():
        resp = make_response(jsonify({"theme": requested}))
    else:
        resp = make_response(redirect(url_for("main.index")))
    resp.set_cookie(THEME_COOKIE, requested, max_age=THEME_MAX_AGE, samesite="Lax")
    return resp
