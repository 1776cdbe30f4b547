"""Application configuration objects."""

import os
import sys
from typing import Dict
from dotenv import load_dotenv
from pathlib import Path

if getattr(sys, "frozen", False):
    load_dotenv(os.path.join(sys._MEIPASS, ".env"))
else:
    load_dotenv()


class Config:
    """Base configuration for the MerchLens catalogue service."""

    # -------------------------
    # Data source
    # -------------------------
    # Local catalogue file (.json or .csv)
    CATALOGUE_PATH = Path(os.getenv("MERCHLENS_CATALOGUE_PATH", "data/catalogue.json"))

    # Optional remote catalogue (JSON), fetched when the local file is missing
    CATALOGUE_URL = os.getenv("MERCHLENS_CATALOGUE_URL")
    CATALOGUE_API_KEY = os.getenv("MERCHLENS_CATALOGUE_API_KEY")

    # CSV cells holding several values ("Red|Navy")
    SET_DELIMITER = os.getenv("MERCHLENS_SET_DELIMITER", "|")

    # -------------------------
    # Record schema
    # -------------------------
    SET_VALUED_FIELDS = ("color", "available_sizes")

    NUMERIC_FIELDS = ("price", "cost", "quantity_sold")

    # -------------------------
    # Filters
    # -------------------------
    MULTI_SELECT_FIELDS: Dict[str, str] = {
        "season": "Season",
        "line": "Line",
        "category": "Category",
        "color": "Color",
        "available_sizes": "Size",
        "fabric": "Fabric",
        "buyer": "Buyer",
        "status": "Status",
    }

    RANGE_FIELDS: Dict[str, str] = {
        "price": "Price",
        "cost": "Cost",
        "margin_percent": "Margin (%)",
    }

    SORTABLE_FIELDS = ("season", "price", "date_added", "cost", "quantity_sold")

    # -------------------------
    # Reports
    # -------------------------
    GROUP_FIELDS: Dict[str, str] = {
        "season": "Season",
        "line": "Line",
        "category": "Category",
        "color": "Color",
        "buyer": "Buyer",
        "fabric": "Fabric",
    }

    MEASURES: Dict[str, str] = {
        "quantity_sold": "Quantity Sold",
        "price": "Price",
        "cost": "Cost",
        "margin_amount": "Margin",
    }

    REDUCTIONS: Dict[str, str] = {
        "sum": "Sum",
        "average": "Average",
    }

    DEFAULT_GROUP_BY = "season"
    DEFAULT_STACK_BY = "category"
    DEFAULT_MEASURE = "quantity_sold"
    DEFAULT_REDUCTION = "sum"


__all__ = ["Config"]
