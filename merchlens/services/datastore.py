"""Catalogue loading, normalization and facet caching."""

from __future__ import annotations
import logging
from io import BytesIO
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Union
import pandas as pd
import requests

from merchlens.services.facets import FacetCatalog, build_facets
from merchlens.utils.fields import is_missing, is_set_valued, render_value

logger = logging.getLogger("merchlens")

Record = Dict[str, Any]


class DataStore:
    """Own catalogue loading, preprocessing, derived facets, and in-memory caching.

    Sources, in order: the local file at CATALOGUE_PATH (.json or .csv), then
    the remote JSON at CATALOGUE_URL. Records and facets are cached together
    and dropped together whenever the catalogue changes.
    """

    def __init__(self, config: Mapping[str, Any]):
        self.config = config
        self._df: Optional[pd.DataFrame] = None
        self._records: Optional[List[Record]] = None
        self._facets: Optional[FacetCatalog] = None

    # ---------- readers ----------

    def read_file(self, source: Union[str, Path, BytesIO], filename: str) -> pd.DataFrame:
        """Read a catalogue file; the extension of ``filename`` picks the parser."""
        suffix = Path(filename).suffix.lower()
        if suffix == ".json":
            return pd.read_json(source, orient="records", dtype=False, convert_dates=False)
        if suffix == ".csv":
            # Set-valued columns stay text so "8" is not read back as 8.0.
            set_valued = self.config.get("SET_VALUED_FIELDS", ())
            return pd.read_csv(source, dtype={col: str for col in set_valued})
        raise ValueError(f"Unsupported catalogue format: {filename}")

    def _fetch_remote(self) -> Optional[pd.DataFrame]:
        url = self.config.get("CATALOGUE_URL")
        if not url:
            return None
        headers = {"apikey": self.config.get("CATALOGUE_API_KEY")}
        try:
            resp = requests.get(url, headers=headers, timeout=60)
            resp.raise_for_status()
            payload = resp.json()
        except (requests.HTTPError, requests.ConnectionError, requests.Timeout) as e:
            logger.error("Failed to fetch remote catalogue from CATALOGUE_URL: %s", e)
            return None
        except ValueError as e:
            logger.error("Remote catalogue is not valid JSON: %s", e)
            return None
        if isinstance(payload, dict):
            payload = payload.get("records") or []
        if not isinstance(payload, list) or not all(isinstance(r, dict) for r in payload):
            logger.error("Remote catalogue is not a list of records: %r", type(payload).__name__)
            return None
        logger.info("Loaded remote catalogue from CATALOGUE_URL (%d records).", len(payload))
        return pd.DataFrame(payload)

    # ---------- preprocessing ----------

    def _split_set_value(self, value: Any) -> Any:
        if is_missing(value) or is_set_valued(value):
            return value
        delimiter = self.config.get("SET_DELIMITER", "|")
        parts = [p.strip() for p in render_value(value).split(delimiter)]
        return [p for p in parts if p]

    def _preprocess(self, df: pd.DataFrame) -> pd.DataFrame:
        df = df.reset_index(drop=True).copy()

        for col in self.config.get("SET_VALUED_FIELDS", ()):
            if col in df.columns:
                df[col] = df[col].map(self._split_set_value)

        for numcol in self.config.get("NUMERIC_FIELDS", ()):
            if numcol in df.columns:
                df[numcol] = pd.to_numeric(df[numcol], errors="coerce")

        return df

    @staticmethod
    def _to_records(df: pd.DataFrame) -> List[Record]:
        clean = df.astype(object).where(df.notna(), None)
        records = clean.to_dict(orient="records")
        for record in records:
            for key, value in record.items():
                if isinstance(value, list):
                    record[key] = tuple(value)
        return records

    # ---------- loading ----------

    def load(self) -> pd.DataFrame:
        if self._df is not None:
            return self._df

        path = Path(str(self.config.get("CATALOGUE_PATH", "")))
        if path.is_file():
            try:
                raw = self.read_file(path, path.name)
                self.set_df(raw)
                logger.info("Loaded catalogue from %s (%d records).", path, len(self._df))
                return self._df
            except (OSError, ValueError) as e:
                logger.warning("Catalogue file load failed: %s", e)

        remote = self._fetch_remote()
        if remote is not None:
            self.set_df(remote)
            return self._df

        logger.error("No catalogue source succeeded; serving an empty catalogue until reload.")
        self.set_df(pd.DataFrame())
        return self._df

    def set_df(self, df: pd.DataFrame) -> None:
        self._df = self._preprocess(df)
        self._records = self._to_records(self._df)
        self._facets = build_facets(
            self._records,
            self.config.get("MULTI_SELECT_FIELDS", {}).keys(),
            self.config.get("RANGE_FIELDS", {}).keys(),
        )
        logger.info("DataStore catalogue set (%d records); facets rebuilt.", len(self._records))

    def set_records(self, records: List[Mapping[str, Any]]) -> None:
        self.set_df(pd.DataFrame(list(records)))

    def get(self, copy: bool = True) -> pd.DataFrame:
        df = self.load()
        return df.copy(deep=False) if copy else df

    def records(self) -> List[Record]:
        self.load()
        return list(self._records or [])

    def facets(self) -> FacetCatalog:
        self.load()
        if self._facets is None:
            return build_facets(
                [],
                self.config.get("MULTI_SELECT_FIELDS", {}).keys(),
                self.config.get("RANGE_FIELDS", {}).keys(),
            )
        return self._facets

    def reload(self) -> None:
        self._df = None
        self._records = None
        self._facets = None
        logger.info("DataStore cache cleared")

    def compute_summary(self, records: List[Mapping[str, Any]]) -> Dict[str, Union[int, float, None]]:
        out: Dict[str, Union[int, float, None]] = {
            "rows": len(records),
            "styles": len({r.get("style_number") for r in records if r.get("style_number") is not None}),
            "units_sold": None,
        }
        if records:
            units = pd.to_numeric(pd.Series([r.get("quantity_sold") for r in records]), errors="coerce")
            out["units_sold"] = float(units.sum())
        return out


__all__ = ["DataStore"]
