"""Application factory for the MerchLens catalogue service."""

from __future__ import annotations

import logging

from typing import Any, Mapping, Optional, Union

from flask import Flask

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger("merchlens")

from .config import Config
from .routes.dashboard import bp as dashboard_bp
from .routes.upload import upload_bp
from .services.datastore import DataStore
from .services.metrics import Metrics


def create_app(
    config_object: Optional[Union[str, Mapping[str, Any], type]] = None,
) -> Flask:
    """Create and configure the Flask application.

    A mapping is layered over the defaults in :class:`Config`, so tests and
    embedders only need to pass the keys they change.
    """
    app = Flask(__name__)

    app.config.from_object(Config)
    if isinstance(config_object, Mapping):
        app.config.from_mapping(config_object)
    elif config_object is not None:
        app.config.from_object(config_object)

    metrics = Metrics(app.config["MEASURES"])
    datastore = DataStore(app.config)

    app.extensions["metrics"] = metrics
    app.extensions["datastore"] = datastore

    app.register_blueprint(dashboard_bp)
    app.register_blueprint(upload_bp)

    logger.info("MerchLens app created (catalogue: %s)", app.config.get("CATALOGUE_PATH"))
    return app


__all__ = ["create_app"]
