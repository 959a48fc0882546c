"""Flask glue for listing pages: query state from request args, render or export."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence

from flask import current_app, render_template, request, url_for

from ..core.constants import PAGE_SIZE_OPTIONS
from .export import build_workbook, safe_filename, send_workbook
from .table import Column, Page, TableQuery


@dataclass(frozen=True)
class Action:
    label: str
    url: str
    method: str = "get"
    variant: str = "outline-primary"
    confirm: Optional[str] = None


@dataclass(frozen=True)
class FilterSpec:
    key: str
    label: str
    options: Sequence[tuple[str, str]] = ()

    @classmethod
    def from_values(cls, key: str, label: str, values: Sequence[str]) -> "FilterSpec":
        return cls(key=key, label=label, options=[(v, v) for v in values])


MONTH_OPTIONS = [
    (str(i), name)
    for i, name in enumerate(
        ["January", "February", "March", "April", "May", "June", "July",
         "August", "September", "October", "November", "December"],
        start=1,
    )
]


@dataclass
class Listing:
    title: str
    columns: list[Column]
    visible: list[Column]
    page: Page
    query: TableQuery
    filters: Sequence[FilterSpec] = ()
    month_filter: bool = False
    export_name: str = "export"
    page_sizes: Sequence[Any] = PAGE_SIZE_OPTIONS


def _default_cell(key: str, row: dict, idx: int):
    if key == "sno":
        return idx + 1
    value = row.get(key)
    return "--" if value in (None, "") else value


def url_with(**overrides) -> str:
    """Current URL with some query args replaced (None drops the arg)."""
    args = request.args.to_dict(flat=False)
    for key, value in overrides.items():
        if value is None:
            args.pop(key, None)
        else:
            args[key] = value if isinstance(value, list) else [value]
    return url_for(request.endpoint, **(request.view_args or {}), **args)


def render_listing(
    template: str,
    *,
    title: str,
    rows: Sequence[dict],
    columns: Sequence[Column],
    search_fields: Sequence[str],
    filters: Sequence[FilterSpec] = (),
    month_field: Optional[str] = None,
    sort_key: Optional[Callable[[Any], Any]] = None,
    reverse: bool = False,
    default_columns: Optional[Sequence[str]] = None,
    sheet_name: str = "Sheet1",
    export_name: str = "export",
    cell: Callable[[str, dict, int], Any] = _default_cell,
    **context,
):
    """Filter, paginate and render already-fetched rows; ``?export=1`` returns an .xlsx instead."""
    query = TableQuery.from_args(
        request.args,
        filter_keys=[f.key for f in filters],
        default_page_size=current_app.config.get("DEFAULT_PAGE_SIZE", 10),
    )
    filtered = query.apply(
        rows,
        search_fields=search_fields,
        month_field=month_field,
        sort_key=sort_key,
        reverse=reverse,
    )
    visible = query.visible_columns(columns, default=default_columns)

    if request.args.get("export"):
        buffer = build_workbook(filtered, visible, sheet_name=sheet_name, cell=cell)
        return send_workbook(buffer, safe_filename(request.args.get("filename"), export_name))

    listing = Listing(
        title=title,
        columns=list(columns),
        visible=visible,
        page=query.paginate(filtered),
        query=query,
        filters=filters,
        month_filter=bool(month_field),
        export_name=export_name,
    )
    return render_template(template, listing=listing, **context)
