"""Filter endpoints for dashboard."""

from __future__ import annotations

from flask import current_app, jsonify, request

from . import bp, get_datastore
from .helpers import build_criteria
from merchlens.utils.filter_params import FilterCriteria


@bp.route("/filters/options", methods=["GET"])
def filter_options():
    """Facet options and bounds over the full catalogue, plus default criteria."""
    datastore = get_datastore()
    facets = datastore.facets()
    defaults = FilterCriteria.from_facets(facets)

    return jsonify(
        {
            **facets.to_dict(),
            "labels": {
                "multi_select": current_app.config["MULTI_SELECT_FIELDS"],
                "range": current_app.config["RANGE_FIELDS"],
            },
            "defaults": defaults.to_dict(),
            "rows": len(datastore.records()),
        }
    )


@bp.route("/filters/chips", methods=["GET"])
def filter_chips():
    """One chip per selected value and per narrowed range."""
    datastore = get_datastore()
    criteria = build_criteria(request.args, datastore.facets())
    labels = {
        **current_app.config["MULTI_SELECT_FIELDS"],
        **current_app.config["RANGE_FIELDS"],
    }
    chips = [
        {**chip, "label": labels.get(chip["field"], chip["field"])}
        for chip in criteria.chips()
    ]
    return jsonify({"chips": chips, "search": criteria.search, "empty": criteria.is_empty})
