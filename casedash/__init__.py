"""Core (UI-agnostic) case dashboard logic.

This package contains:
- record field access with defaults
- CSV parsing (uploaded bytes -> list of record dicts)
- region filter normalization
- the overview compute function (JSON-serializable payload)
- chart helpers (Altair -> Vega-Lite spec dict)
- the client-side record cache and the dashboard orchestrator
"""
