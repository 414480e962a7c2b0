from __future__ import annotations

import io
import logging
import warnings
from pathlib import Path
from typing import Any, Dict, Iterable, List, Mapping

import pandas as pd

from casedash.records import CaseRecord, EXPECTED_FIELDS


DATA_DIR = Path(__file__).resolve().parents[1]

logger = logging.getLogger(__name__)


class CaseDataParseError(ValueError):
    """Raised when uploaded bytes cannot be read as a CSV with a header row."""


def parse_case_csv(content: bytes) -> Dict[str, Any]:
    """Parse uploaded CSV bytes into ``{"data": [...], "fields": [...]}``.

    Every cell is kept as a string; blank cells become ``""`` and short rows are
    padded with ``""``. Blank lines are skipped.
    """
    if not content or not content.strip():
        return {"data": [], "fields": []}
    try:
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always", pd.errors.ParserWarning)
            df = pd.read_csv(
                io.BytesIO(content),
                dtype=str,
                keep_default_na=False,
                index_col=False,
                encoding="utf-8-sig",
            )
    except pd.errors.EmptyDataError:
        return {"data": [], "fields": []}
    except (pd.errors.ParserError, UnicodeDecodeError) as exc:
        raise CaseDataParseError(f"Could not parse uploaded CSV: {exc}") from exc

    for w in caught:
        if issubclass(w.category, pd.errors.ParserWarning):
            logger.warning("Uploaded CSV rows were trimmed to the header width: %s", w.message)
        else:
            warnings.warn_explicit(w.message, w.category, w.filename, w.lineno)

    fields = [str(c) for c in df.columns]
    missing = [f for f in EXPECTED_FIELDS if f not in fields]
    if missing:
        logger.info("Uploaded CSV is missing columns %s; affected cards will show defaults", missing)
    records: List[CaseRecord] = df.to_dict(orient="records")
    return {"data": records, "fields": fields}


def upload_signature(uploaded: Any) -> str:
    """Identity of one upload; re-uploading an edited file of the same name and size gives a new one."""
    return str(uploaded.file_id)


def records_frame(records: Iterable[Mapping[str, Any]]) -> pd.DataFrame:
    return pd.DataFrame.from_records([dict(r) for r in records])


def export_csv(records: Iterable[Mapping[str, Any]]) -> bytes:
    df = records_frame(records)
    return df.to_csv(index=False).encode("utf-8")
