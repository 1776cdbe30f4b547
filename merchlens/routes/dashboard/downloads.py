"""Download endpoints for dashboard."""

from __future__ import annotations

import io
from datetime import datetime, timezone

import pandas as pd
from flask import Response, request

from . import bp, get_datastore
from .helpers import build_criteria
from merchlens.utils.fields import is_set_valued, render_value


@bp.route("/download-csv", methods=["GET"])
def download_csv():
    """Download the filtered catalogue as CSV; set-valued cells are comma-joined."""
    datastore = get_datastore()
    base = datastore.get(copy=False)

    criteria = build_criteria(request.args, datastore.facets())
    filtered = criteria.apply(datastore.records())

    rows = [
        {k: (render_value(v) if is_set_valued(v) else v) for k, v in record.items()}
        for record in filtered
    ]
    frame = pd.DataFrame(rows, columns=list(base.columns))

    buf = io.StringIO()
    frame.to_csv(buf, index=False)
    buf.seek(0)

    ts = datetime.now(timezone.utc).strftime("%Y%m%d_%H%M%S")
    filename = f"catalogue_{ts}.csv"

    return Response(
        buf.getvalue(),
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
