import logging
import os
from dataclasses import dataclass
from enum import Enum
from typing import Optional

import pandas as pd

from cell_format import ColumnKind, coerce_pattern, column_kind, format_cell
from errors import (
    CollectError,
    FilterError,
    LoadError,
    SelectionError,
    SortError,
    TablrError,
)
from source_reader import SourceReader

logger = logging.getLogger(__name__)


class PredicateKind(Enum):
    EQUALS = "Equals"
    CONTAINS = "Contains"

    def __str__(self):
        return self.value


@dataclass(frozen=True)
class SortSpec:
    column_index: int
    descending: bool = False


@dataclass(frozen=True)
class FilterSpec:
    column_index: int
    kind: PredicateKind
    pattern: str


@dataclass(frozen=True)
class OperationResult:
    """Outcome of one TableState operation.

    ``message`` carries the error text when ``ok`` is False. A cancelled
    selection is ``ok`` with ``cancelled`` set and changes nothing.
    """

    ok: bool
    category: str
    message: Optional[str] = None
    cancelled: bool = False


_MESSAGE_PREFIXES = {
    "load": "Error processing Parquet files",
    "sort": "Sort error",
    "filter": "Filter error",
}


def _plain(series: pd.Series) -> pd.Series:
    """Categorical columns compare and order by their values."""
    if isinstance(series.dtype, pd.CategoricalDtype):
        return series.astype(object)
    return series


class TableView:
    """Read-only projection of the relation currently on display."""

    def __init__(
        self,
        frame: Optional[pd.DataFrame],
        kinds: tuple,
        sort_spec: Optional[SortSpec],
        filter_spec: Optional[FilterSpec],
        error: Optional[str],
        sources: tuple,
        revision: int = 0,
        filter_applied: bool = False,
    ):
        self._frame = frame
        self.column_kinds = kinds
        self.sort_spec = sort_spec
        self.filter_spec = filter_spec
        self.error = error
        self.sources = sources
        # bumped by every TableState operation; renderers key caches on it
        self.revision = revision
        # false while a kept filter spec failed to evaluate
        self.filter_applied = filter_applied

    @property
    def is_loaded(self) -> bool:
        return self._frame is not None

    @property
    def columns(self) -> tuple:
        if self._frame is None:
            return ()
        return tuple(str(c) for c in self._frame.columns)

    @property
    def row_count(self) -> int:
        return 0 if self._frame is None else len(self._frame)

    @property
    def shape(self) -> tuple:
        return (self.row_count, len(self.columns))

    def row_label(self, row: int) -> int:
        """Position of the row in the loaded data."""
        return int(self._frame.index[row])

    def cell_value(self, row: int, col: int):
        return self._frame.iat[row, col]

    def cell_text(self, row: int, col: int) -> str:
        return format_cell(self._frame.iat[row, col], self.column_kinds[col])

    def column_texts(self, col: int, start: int = 0, end: Optional[int] = None):
        kind = self.column_kinds[col]
        values = self._frame.iloc[start:end, col]
        return [format_cell(v, kind) for v in values]

    def to_frame(self) -> pd.DataFrame:
        if self._frame is None:
            return pd.DataFrame()
        return self._frame.copy()


class TableState:
    """Loaded relation plus the single-column sort and filter applied to it.

    The displayed relation is always ``sort(filter(snapshot))``, derived
    from the snapshot kept from the last successful load; nothing here is
    updated incrementally. Every operation returns an OperationResult and
    leaves at most one current error message behind.
    """

    def __init__(self, reader_cls=SourceReader):
        self._reader_cls = reader_cls

        self._snapshot: pd.DataFrame | None = None
        self._filtered: pd.DataFrame | None = None
        self._view: pd.DataFrame | None = None
        self._catalog: tuple[str, ...] = ()
        self._kinds: tuple[ColumnKind, ...] = ()
        self._sources: tuple[str, ...] = ()

        self._sort: SortSpec | None = None
        self._filter: FilterSpec | None = None
        self._filter_applied = False
        self._error: str | None = None
        self._revision = 0

    # ---------- queries ----------
    @property
    def is_loaded(self) -> bool:
        return self._snapshot is not None

    @property
    def column_names(self) -> tuple:
        return self._catalog

    @property
    def column_kinds(self) -> tuple:
        return self._kinds

    @property
    def sort_spec(self) -> Optional[SortSpec]:
        return self._sort

    @property
    def filter_spec(self) -> Optional[FilterSpec]:
        return self._filter

    @property
    def filter_applied(self) -> bool:
        return self._filter_applied

    @property
    def error(self) -> Optional[str]:
        return self._error

    @property
    def sources(self) -> tuple:
        return self._sources

    def get_view(self) -> TableView:
        return TableView(
            self._view,
            self._kinds,
            self._sort,
            self._filter,
            self._error,
            self._sources,
            self._revision,
            self._filter_applied,
        )

    # ---------- operations ----------
    def select_sources(self, paths) -> OperationResult:
        """Validate a file selection and load it.

        An empty selection is a cancel and leaves everything as it was.
        """
        paths = [os.fspath(p) for p in (paths or [])]
        if not paths:
            return OperationResult(ok=True, category="selection", cancelled=True)

        for path in paths:
            if not self._reader_cls.is_supported(path):
                return self._fail(SelectionError(f"Not a Parquet file: {path}"))
            if not os.path.isfile(path):
                return self._fail(SelectionError(f"No such file: {path}"))

        return self.load(paths)

    def load(self, sources) -> OperationResult:
        sources = tuple(os.fspath(s) for s in (sources or []))
        if not sources:
            return self._fail(
                SelectionError(
                    "No files selected. Please select at least one Parquet file."
                )
            )

        try:
            df = self._reader_cls(sources).read()
        except (LoadError, CollectError) as exc:
            self._reset()
            return self._fail(exc)

        self._snapshot = df
        self._filtered = df
        self._view = df
        self._catalog = tuple(str(c) for c in df.columns)
        self._kinds = tuple(column_kind(df.iloc[:, i]) for i in range(len(df.columns)))
        self._sources = sources
        self._sort = None
        self._filter = None
        self._filter_applied = False

        logger.info(
            "Loaded %d rows x %d columns from %s",
            len(df),
            len(self._catalog),
            ", ".join(sources),
        )
        return self._succeed("load")

    def sort_by(self, column_index: int) -> OperationResult:
        if not self.is_loaded:
            return self._fail(SortError("No table loaded"))

        try:
            self._check_index(column_index, SortError)
            if self._sort is not None and self._sort.column_index == column_index:
                spec = SortSpec(column_index, descending=not self._sort.descending)
            else:
                spec = SortSpec(column_index, descending=False)
            view = self._sorted(self._filtered, spec)
        except SortError as exc:
            return self._fail(exc)

        self._sort = spec
        self._view = view
        logger.info(
            "Sorted by '%s' %s",
            self._catalog[column_index],
            "descending" if spec.descending else "ascending",
        )
        return self._succeed("sort")

    def apply_filter(self, column_index: int, kind, pattern) -> OperationResult:
        if not self.is_loaded:
            return self._fail(FilterError("No table loaded"))

        try:
            kind = PredicateKind(kind)
        except ValueError:
            return self._fail(FilterError(f"Unknown predicate kind: {kind}"))
        pattern = "" if pattern is None else str(pattern)

        if pattern == "":
            self._filter = None
            self._filter_applied = False
            self._filtered = self._snapshot
        else:
            spec = FilterSpec(column_index, kind, pattern)
            self._filter = spec
            try:
                mask = self._filter_mask(spec)
            except FilterError as exc:
                # show everything rather than nothing
                self._filtered = self._snapshot
                self._filter_applied = False
                return self._fail(exc, refresh=True)
            self._filtered = self._snapshot[mask]
            self._filter_applied = True

        try:
            self._refresh_view()
        except SortError as exc:
            return self._fail(exc)

        if self._filter is not None:
            logger.info(
                "Filter %s '%s' on '%s' kept %d of %d rows",
                kind,
                pattern,
                self._catalog[column_index],
                len(self._filtered),
                len(self._snapshot),
            )
        return self._succeed("filter")

    def clear_filter(self) -> OperationResult:
        self._filter = None
        self._filter_applied = False
        if not self.is_loaded:
            return self._succeed("filter")

        self._filtered = self._snapshot
        try:
            self._refresh_view()
        except SortError as exc:
            return self._fail(exc)
        logger.info("Filter cleared")
        return self._succeed("filter")

    # ---------- internals ----------
    def _reset(self):
        self._snapshot = None
        self._filtered = None
        self._view = None
        self._catalog = ()
        self._kinds = ()
        self._sources = ()
        self._sort = None
        self._filter = None
        self._filter_applied = False

    def _succeed(self, category: str) -> OperationResult:
        self._revision += 1
        self._error = None
        return OperationResult(ok=True, category=category)

    def _fail(self, exc: TablrError, refresh: bool = False) -> OperationResult:
        prefix = _MESSAGE_PREFIXES.get(exc.category)
        message = f"{prefix}: {exc}" if prefix else str(exc)
        logger.warning(message)
        self._revision += 1
        self._error = message
        if refresh:
            try:
                self._refresh_view()
            except SortError as sort_exc:
                logger.warning("Sort dropped: %s", sort_exc)
        return OperationResult(ok=False, category=exc.category, message=message)

    def _refresh_view(self):
        try:
            self._view = self._sorted(self._filtered, self._sort)
        except SortError:
            # a sort that held for one subset may not hold for another
            self._sort = None
            self._view = self._filtered
            raise

    def _check_index(self, column_index, error_cls):
        if not isinstance(column_index, int) or not (
            0 <= column_index < len(self._catalog)
        ):
            raise error_cls(
                f"Column index {column_index} out of range "
                f"(table has {len(self._catalog)} columns)"
            )

    def _sorted(self, frame: pd.DataFrame, spec: Optional[SortSpec]) -> pd.DataFrame:
        if spec is None:
            return frame
        name = self._catalog[spec.column_index]
        series = _plain(frame.iloc[:, spec.column_index]).reset_index(drop=True)
        try:
            order = series.sort_values(
                ascending=not spec.descending, kind="stable", na_position="last"
            )
        except (TypeError, ValueError) as exc:
            raise SortError(f"column '{name}' cannot be ordered ({exc})") from exc
        return frame.take(order.index)

    def _filter_mask(self, spec: FilterSpec) -> pd.Series:
        self._check_index(spec.column_index, FilterError)
        name = self._catalog[spec.column_index]
        kind = self._kinds[spec.column_index]
        series = _plain(self._snapshot.iloc[:, spec.column_index])

        if spec.kind is PredicateKind.CONTAINS:
            if kind is not ColumnKind.TEXT:
                raise FilterError(
                    f"Contains needs a text column; '{name}' is {kind.value}"
                )
            try:
                mask = series.str.contains(spec.pattern, regex=False, na=False)
            except (AttributeError, TypeError, ValueError) as exc:
                raise FilterError(f"column '{name}': {exc}") from exc
            return mask.fillna(False).astype(bool)

        try:
            value = coerce_pattern(series, kind, spec.pattern)
        except (TypeError, ValueError) as exc:
            raise FilterError(
                f"'{spec.pattern}' is not a valid {kind.value} value for '{name}'"
            ) from exc

        try:
            if kind is ColumnKind.TEMPORAL and series.dtype == object:
                series = pd.to_datetime(series, errors="coerce")
            mask = series == value
        except (TypeError, ValueError) as exc:
            raise FilterError(f"column '{name}': {exc}") from exc
        return mask.fillna(False).astype(bool)
