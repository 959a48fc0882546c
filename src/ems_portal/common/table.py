"""Client-side listing helpers: search, filter, sort, paginate, column toggle.

Every listing page builds a ``TableQuery`` from the request args and runs its
already-fetched rows through it.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

from ..core.constants import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS
from .datetime_utils import parse_api_date


@dataclass(frozen=True)
class Column:
    key: str
    label: str
    exportable: bool = True


@dataclass(frozen=True)
class Page:
    rows: list
    number: int
    total_pages: int
    total_rows: int
    size: Any
    offset: int

    @property
    def has_previous(self) -> bool:
        return self.number > 1

    @property
    def has_next(self) -> bool:
        return self.number < self.total_pages


def _get(row, key: str):
    if isinstance(row, Mapping):
        return row.get(key)
    return getattr(row, key, None)


def parse_page_size(value, default=DEFAULT_PAGE_SIZE):
    if value == "All":
        return "All"
    try:
        size = int(value)
    except (TypeError, ValueError):
        return default
    return size if size in PAGE_SIZE_OPTIONS else default


@dataclass
class TableQuery:
    search: str = ""
    filters: dict[str, str] = field(default_factory=dict)
    month: Optional[int] = None
    page: int = 1
    page_size: Any = DEFAULT_PAGE_SIZE
    columns: Optional[list[str]] = None

    @classmethod
    def from_args(
        cls,
        args: Mapping,
        *,
        filter_keys: Sequence[str] = (),
        default_page_size=DEFAULT_PAGE_SIZE,
    ) -> "TableQuery":
        try:
            month = int(args.get("month") or 0) or None
        except ValueError:
            month = None
        if month is not None and not 1 <= month <= 12:
            month = None

        try:
            page = max(1, int(args.get("page") or 1))
        except ValueError:
            page = 1

        getlist = getattr(args, "getlist", None)
        columns = getlist("columns") if getlist else args.get("columns")

        return cls(
            search=(args.get("q") or "").strip(),
            filters={k: args.get(k) for k in filter_keys if args.get(k)},
            month=month,
            page=page,
            page_size=parse_page_size(args.get("size"), default_page_size),
            columns=list(columns) if columns else None,
        )

    def apply(
        self,
        rows: Iterable,
        *,
        search_fields: Sequence[str],
        month_field: Optional[str] = None,
        sort_key: Optional[Callable[[Any], Any]] = None,
        reverse: bool = False,
    ) -> list:
        term = self.search.lower()
        out = []
        for row in rows:
            if term:
                haystack = " ".join(str(_get(row, f) or "") for f in search_fields).lower()
                if term not in haystack:
                    continue
            if any(str(_get(row, k)) != v for k, v in self.filters.items()):
                continue
            if self.month and month_field:
                d = parse_api_date(_get(row, month_field))
                if not d or d.month != self.month:
                    continue
            out.append(row)
        if sort_key:
            out.sort(key=sort_key, reverse=reverse)
        return out

    def paginate(self, rows: list) -> Page:
        if self.page_size == "All":
            return Page(rows=rows, number=1, total_pages=1, total_rows=len(rows), size="All", offset=0)
        total_pages = max(1, math.ceil(len(rows) / self.page_size))
        number = min(self.page, total_pages)
        offset = (number - 1) * self.page_size
        return Page(
            rows=rows[offset:offset + self.page_size],
            number=number,
            total_pages=total_pages,
            total_rows=len(rows),
            size=self.page_size,
            offset=offset,
        )

    def visible_columns(self, all_columns: Sequence[Column], default: Optional[Sequence[str]] = None) -> list[Column]:
        """Selected columns in definition order; falls back when nothing valid is selected."""
        wanted = set(self.columns or default or [c.key for c in all_columns])
        visible = [c for c in all_columns if c.key in wanted]
        return visible or list(all_columns)


def unique_values(rows: Iterable, key: str) -> list[str]:
    return sorted({str(v) for v in (_get(r, key) for r in rows) if v})
