from __future__ import annotations

from typing import Any, Dict, List

from pydantic import RootModel


class CachedRecordsModel(RootModel[List[Dict[str, Any]]]):
    """Shape of the dataset blob held in the record cache."""
