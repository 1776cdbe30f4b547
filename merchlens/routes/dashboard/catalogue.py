"""Filtered catalogue endpoint."""

from __future__ import annotations

from flask import current_app, jsonify, request

from . import bp, get_datastore
from .helpers import build_criteria, sort_records


@bp.route("/catalogue", methods=["GET"])
def catalogue():
    datastore = get_datastore()
    records = datastore.records()
    criteria = build_criteria(request.args, datastore.facets())
    filtered = criteria.apply(records)

    sort_col = request.args.get("sort")
    if sort_col in current_app.config["SORTABLE_FIELDS"]:
        descending = (request.args.get("order") or "asc").lower() == "desc"
        filtered = sort_records(filtered, sort_col, descending=descending)

    return jsonify(
        {
            "rows": len(filtered),
            "total": len(records),
            "summary": datastore.compute_summary(filtered),
            "records": filtered,
        }
    )
