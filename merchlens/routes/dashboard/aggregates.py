"""Aggregate report endpoints."""

from __future__ import annotations

from flask import current_app, jsonify, request

from . import bp, get_datastore, get_metrics
from .helpers import build_criteria, build_report_request, stack_options
from merchlens.services.aggregation import aggregate
from merchlens.utils.fields import render_value


@bp.route("/report/options", methods=["GET"])
def report_options():
    cfg = current_app.config
    metrics = get_metrics()
    group_by = cfg["DEFAULT_GROUP_BY"]
    return jsonify(
        {
            "group_by": [{"value": k, "label": v} for k, v in cfg["GROUP_FIELDS"].items()],
            "stack_by": [
                {"value": k, "label": cfg["GROUP_FIELDS"][k]} for k in stack_options(group_by)
            ],
            "measures": [{"value": k, "label": v} for k, v in metrics.available()],
            "reductions": [{"value": k, "label": v} for k, v in cfg["REDUCTIONS"].items()],
            "defaults": {
                "group_by": group_by,
                "stack_by": cfg["DEFAULT_STACK_BY"],
                "measure": cfg["DEFAULT_MEASURE"],
                "reduction": cfg["DEFAULT_REDUCTION"],
            },
        }
    )


@bp.route("/report-data", methods=["GET"])
def report_data():
    """Grouped, stacked bar data over the filtered catalogue."""
    datastore = get_datastore()
    metrics = get_metrics()

    criteria = build_criteria(request.args, datastore.facets())
    filtered = criteria.apply(datastore.records())
    report = build_report_request(request.args, metrics)
    result = aggregate(filtered, report)

    return jsonify(
        {
            "data": result.to_chart_rows(report.group_by),
            "keys": [render_value(k) for k in result.stack_keys],
            "index_by": report.group_by,
            "stack_by": report.stack_by,
            "measure": report.measure,
            "measure_label": metrics.label(report.measure),
            "reduction": report.reduction,
            "rows": len(filtered),
        }
    )
