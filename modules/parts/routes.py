"""HTTP routes for the parts lifetime domain."""

import csv
import io

from flask import jsonify, make_response, request, send_file
from openpyxl import Workbook

from .drafts import clone_draft, edit_draft, new_draft
from .errors import NotFoundError, ValidationError
from .filters import ALL, apply_filter, facets, follow_machine
from .health import display_percentage, health_by_id, summarize
from .models import CATEGORY_SUGGESTIONS, Part, utcnow
from .store import current_store

from . import bp

EXPORT_HEADER = [
    "MACHINE", "PART", "CATEGORY", "INSTALLED", "LIFESPAN (DAYS)",
    "DAYS ELAPSED", "DAYS REMAINING", "% USED", "STATUS", "NOTES",
]


# ---------- Утилиты ----------
def _payload() -> dict:
    """JSON body, or form fields for plain HTML forms."""
    if request.is_json:
        data = request.get_json(silent=True)
        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ValidationError({"body": "must be a JSON object"})
        return data
    return request.form.to_dict()


def _part_row(part: Part, health) -> dict:
    row = part.to_record()
    row["health"] = health.to_dict()
    row["health"]["display_percentage"] = display_percentage(health)
    return row


def _mutation_response(part: Part, status: int = 200):
    store = current_store()
    health = health_by_id([part], store.clock())[part.id]
    body = {"ok": True, "part": _part_row(part, health), "persisted": not store.dirty}
    if status == 201:
        # the client should follow a new part onto its machine
        body["filters"] = {
            "machine": follow_machine(request.args.get("machine") or ALL, part.machine_id),
            "name": request.args.get("name") or ALL,
        }
    if store.dirty:
        body["warning"] = "Changes are kept in memory but could not be saved."
    return jsonify(body), status


@bp.errorhandler(ValidationError)
def _validation_failed(exc: ValidationError):
    return jsonify(ok=False, error="validation failed", errors=exc.errors), 400


@bp.errorhandler(NotFoundError)
def _not_found(exc: NotFoundError):
    return jsonify(ok=False, error="not found", id=exc.part_id), 404


# ---------- Список с фильтрами ----------
@bp.route("/")
def list_parts():
    store = current_store()
    machine = request.args.get("machine") or ALL
    name = request.args.get("name") or ALL

    parts = store.list()
    health = health_by_id(parts, store.clock())
    visible = apply_filter(parts, machine, name)

    return jsonify(
        ok=True,
        parts=[_part_row(p, health[p.id]) for p in visible],
        filters={"machine": machine, "name": name},
        facets=facets(parts),
        summary=summarize(health).to_dict(),
        persisted=not store.dirty,
    )


@bp.route("/categories")
def categories():
    return jsonify(ok=True, categories=CATEGORY_SUGGESTIONS)


@bp.route("/new")
def new_part_form():
    store = current_store()
    return jsonify(ok=True, draft=new_draft(request.args.get("machine"), store.clock()))


@bp.route("/<string:part_id>")
def view_part(part_id: str):
    store = current_store()
    part = store.get(part_id)
    health = health_by_id([part], store.clock())[part.id]
    return jsonify(ok=True, part=_part_row(part, health), draft=edit_draft(part))


# ---------- Создание / редактирование ----------
@bp.route("/", methods=["POST"])
def add_part():
    part = current_store().add(_payload())
    return _mutation_response(part, 201)


@bp.route("/<string:part_id>", methods=["PUT", "POST"])
def edit_part(part_id: str):
    part = current_store().edit(part_id, _payload())
    return _mutation_response(part)


@bp.route("/<string:part_id>/clone", methods=["GET"])
def clone_part_form(part_id: str):
    store = current_store()
    source = store.get(part_id)
    return jsonify(ok=True, source_id=source.id, draft=clone_draft(source, store.clock()))


@bp.route("/<string:part_id>/clone", methods=["POST"])
def clone_part(part_id: str):
    part = current_store().clone(part_id, _payload())
    return _mutation_response(part, 201)


@bp.route("/<string:part_id>/replace", methods=["POST"])
def replace_part(part_id: str):
    part = current_store().replace(part_id)
    return _mutation_response(part)


# ---------- Экспорт ----------
def _export_rows():
    store = current_store()
    parts = apply_filter(
        store.list(),
        request.args.get("machine") or ALL,
        request.args.get("name") or ALL,
    )
    health = health_by_id(parts, store.clock())
    for p in parts:
        h = health[p.id]
        yield [
            p.machine_id,
            p.name,
            p.category,
            p.install_date.date().isoformat(),
            p.lifespan_days,
            h.days_elapsed,
            h.days_remaining,
            round(h.percentage_used, 1),
            h.status.value,
            p.notes or "",
        ]


@bp.route("/export/csv")
def export_csv():
    out = io.StringIO()
    writer = csv.writer(out, lineterminator="\n")
    writer.writerow(EXPORT_HEADER)
    for row in _export_rows():
        writer.writerow(row)
    data = ("\ufeff" + out.getvalue()).encode("utf-8")
    resp = make_response(data)
    resp.headers["Content-Type"] = "text/csv; charset=utf-8"
    resp.headers["Content-Disposition"] = f"attachment; filename=parts_export_{utcnow():%Y%m%d_%H%M%S}.csv"
    return resp


@bp.route("/export/xlsx")
def export_xlsx():
    wb = Workbook()
    ws = wb.active
    ws.title = "Parts"
    ws.append(EXPORT_HEADER)
    for row in _export_rows():
        ws.append(row)

    buf = io.BytesIO()
    wb.save(buf)
    buf.seek(0)
    return send_file(
        buf,
        mimetype="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        as_attachment=True,
        download_name=f"parts_export_{utcnow():%Y%m%d_%H%M%S}.xlsx",
    )
