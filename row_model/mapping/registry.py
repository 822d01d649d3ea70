"""Record registry - per-type metadata cache.

Plans are built on first use (or installed by an explicit declaration)
and read-only afterwards. Table names and column sets derived from them
are cached alongside when ``RowModelSettings.cache_metadata`` is on.
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Hashable

from row_model.columns.columns import Columns
from row_model.core.logging import get_logger
from row_model.core.settings import get_settings
from row_model.mapping.builder import introspect
from row_model.mapping.plan import RecordPlan

logger = get_logger(__name__)


class RecordRegistry:
    """Caches RecordPlans, table names and column sets keyed by type."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._plans: dict[type, RecordPlan] = {}
        self._table_names: dict[type, str] = {}
        self._columns: dict[tuple[Hashable, ...], Columns] = {}

    def register(self, plan: RecordPlan) -> None:
        """Install an explicit plan, replacing any introspected one."""
        record_type = plan.record_type
        with self._lock:
            self._plans[record_type] = plan
            self._table_names.pop(record_type, None)
            for key in [k for k in self._columns if k[0] is record_type]:
                del self._columns[key]
        logger.debug("record_plan_registered", record_type=record_type.__qualname__)

    def plan_for(self, record_type: type) -> RecordPlan:
        """Return the plan for *record_type*, introspecting it on first use."""
        plan = self._plans.get(record_type)
        if plan is not None:
            return plan
        plan = introspect(record_type)
        with self._lock:
            plan = self._plans.setdefault(record_type, plan)
        logger.debug(
            "record_plan_built",
            record_type=record_type.__qualname__,
            fields=[f.attribute for f in plan.fields],
        )
        return plan

    def table_name(self, record_type: type, derive: Callable[[], str]) -> str:
        """Return the cached table name for *record_type*, deriving it once."""
        if not get_settings().cache_metadata:
            return derive()
        name = self._table_names.get(record_type)
        if name is None:
            name = derive()
            with self._lock:
                name = self._table_names.setdefault(record_type, name)
        return name

    def columns(self, key: tuple[type, str, str, Hashable], build: Callable[[], Columns]) -> Columns:
        """Return a copy of the cached column set for *key*, building it once."""
        if not get_settings().cache_metadata:
            return build()
        cols = self._columns.get(key)
        if cols is None:
            cols = build()
            with self._lock:
                cols = self._columns.setdefault(key, cols)
        return cols.copy()

    def has(self, record_type: type) -> bool:
        return record_type in self._plans

    def clear(self) -> None:
        """Drop every cached plan, table name and column set."""
        with self._lock:
            self._plans.clear()
            self._table_names.clear()
            self._columns.clear()

    def __len__(self) -> int:
        """Number of known record types."""
        return len(self._plans)


default_registry = RecordRegistry()
