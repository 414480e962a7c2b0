"""Dashboard orchestrator.

One ``Dashboard`` owns the resident dataset and the region selection. Every
external event (startup, file upload, region change) is dispatched
synchronously through ``Dashboard.dispatch``; each accepted event ends in a
fresh render pass over the (optionally filtered) records.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Union

from casedash.data import CaseDataParseError, parse_case_csv
from casedash.filters import DashboardFilters, derive_regions, normalize_filters, prepare_context
from casedash.metrics_overview import compute_overview
from casedash.records import CaseRecord
from casedash.store import RecordStore


logger = logging.getLogger(__name__)

DrawFn = Callable[[str, Dict[str, Any]], None]
ParseFn = Callable[[bytes], Dict[str, Any]]


class DashboardState(enum.Enum):
    UNINITIALIZED = "uninitialized"
    IDLE = "idle"


@dataclass(frozen=True)
class Startup:
    pass


@dataclass(frozen=True)
class FileUploaded:
    content: bytes
    name: str = ""


@dataclass(frozen=True)
class RegionSelected:
    value: Optional[str] = None


DashboardEvent = Union[Startup, FileUploaded, RegionSelected]


class Dashboard:
    def __init__(self, store: RecordStore, *, parser: ParseFn = parse_case_csv, draw: Optional[DrawFn] = None):
        self.store = store
        self.parser = parser
        self.draw = draw
        self.state = DashboardState.UNINITIALIZED
        self.records: List[CaseRecord] = []
        self.regions: List[str] = []
        self.filters = DashboardFilters()
        self.view: Optional[Dict[str, Any]] = None

    @property
    def ready(self) -> bool:
        return self.state is DashboardState.IDLE

    def dispatch(self, event: DashboardEvent) -> Optional[Dict[str, Any]]:
        if isinstance(event, Startup):
            self._on_startup()
        elif isinstance(event, FileUploaded):
            self._on_file_uploaded(event)
        elif isinstance(event, RegionSelected):
            self._on_region_selected(event)
        else:
            raise TypeError(f"Unsupported dashboard event: {type(event).__name__}")
        return self.view

    def _on_startup(self) -> None:
        cached = self.store.load()
        if cached is None:
            return
        self._set_records(cached)
        self.render()

    def _on_file_uploaded(self, event: FileUploaded) -> None:
        try:
            parsed = self.parser(event.content)
        except CaseDataParseError as exc:
            logger.warning("Ignoring upload %r: %s", event.name or "<unnamed>", exc)
            return
        records = list(parsed.get("data") or [])
        self.store.replace(records)
        self._set_records(records)
        # The selector is repopulated, so any previous choice is dropped.
        self.filters = DashboardFilters()
        logger.info("Loaded %d case records from %s", len(records), event.name or "upload")
        self.render()

    def _on_region_selected(self, event: RegionSelected) -> None:
        self.filters = normalize_filters({"selected_region": event.value})
        if self.ready:
            self.render()

    def _set_records(self, records: List[CaseRecord]) -> None:
        self.records = records
        self.regions = derive_regions(records)
        self.state = DashboardState.IDLE

    def render(self) -> Dict[str, Any]:
        ctx = prepare_context(self.filters, {"records": self.records, "regions": self.regions})
        self.view = compute_overview(self.filters, ctx)
        if self.draw is not None:
            for mount, spec in self.view["charts"].items():
                self.draw(mount, spec)
        return self.view
