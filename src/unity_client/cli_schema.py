"""Schema describing important fields for CLI table rendering."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any

Row = Mapping[str, Any]
ValueFormatter = Callable[[Any], str]


@dataclass(frozen=True)
class Column:
    """Describe how to pull and format a column for Rich tables."""

    header: str
    keys: tuple[str, ...] = ()
    formatter: ValueFormatter | None = None
    justify: str = "left"

    def render(self, row: Row) -> str:
        value: Any | None = None
        for key in self.keys:
            if row.get(key) is not None:
                value = row.get(key)
                break
        if value is None:
            return ""
        if self.formatter:
            formatted = self.formatter(value)
            return "" if formatted is None else str(formatted)
        return str(value)


@dataclass(frozen=True)
class TableView:
    """Describe a Rich table for a CLI command."""

    title: str
    columns: tuple[Column, ...]


def _coerce_number(value: Any) -> float | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def _bytes_formatter(*, precision: int = 2) -> ValueFormatter:
    def _formatter(value: Any) -> str:
        number = _coerce_number(value)
        if number is None:
            return ""
        gib_value = number / (1024**3)
        return f"{gib_value:.{precision}f}"

    return _formatter


def _bool_formatter(value: Any) -> str:
    if value is None:
        return ""
    return "Yes" if bool(value) else "No"


def _list_formatter(*, max_chars: int = 24, sep: str = ", ") -> ValueFormatter:
    def _formatter(value: Any) -> str:
        if isinstance(value, (list, tuple)):
            s = sep.join(str(v) for v in value)
        else:
            s = str(value)
        return s if len(s) <= max_chars else s[: max_chars - 1] + "…"

    return _formatter


CLI_TABLE_VIEWS: dict[str, TableView] = {
    "luns.created": TableView(
        title="Created VMware LUNs",
        columns=(
            Column("Session", keys=("session",)),
            Column("Name", keys=("name",)),
            Column("Resource ID", keys=("id",)),
            Column(
                "Size (GiB)",
                keys=("sizeTotal",),
                formatter=_bytes_formatter(precision=2),
                justify="right",
            ),
            Column("Pools", keys=("pools",), formatter=_list_formatter()),
            Column("LUNs", keys=("luns",), formatter=_list_formatter()),
            Column("Snap Schedule", keys=("snapSchedule",)),
            Column(
                "Paused",
                keys=("isSnapSchedulePaused",),
                formatter=_bool_formatter,
                justify="center",
            ),
        ),
    ),
}
