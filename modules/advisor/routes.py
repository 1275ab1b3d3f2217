"""HTTP routes for the maintenance advisor."""

from flask import current_app, jsonify, request

from modules.parts.health import health_by_id
from modules.parts.store import current_store

from .client import GeminiAdvisor

from . import bp


def current_advisor() -> GeminiAdvisor:
    advisor = current_app.extensions.get("advisor")
    if advisor is None:
        advisor = GeminiAdvisor.from_config(current_app.config)
        current_app.extensions["advisor"] = advisor
    return advisor


@bp.route("/ask", methods=["POST"])
def ask():
    data = request.get_json(silent=True) or request.form.to_dict()
    if not isinstance(data, dict):
        return jsonify(ok=False, error="body must be a JSON object"), 400
    query = str(data.get("query") or "").strip()
    if not query:
        return jsonify(ok=False, error="query is required"), 400

    store = current_store()
    parts = store.list()
    health = health_by_id(parts, store.clock())
    advice = current_advisor().advise(parts, health, query)
    return jsonify(advice.to_dict())
