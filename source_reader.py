import logging
import os

import pandas as pd

from errors import CollectError, LoadError

logger = logging.getLogger(__name__)


class SourceReader:
    """Reads one or more Parquet files as a single relation.

    Reading happens in two phases so callers can tell the failures apart:

    - load: every source's schema is read and checked against the first
      one (LoadError)
    - collect: the rows are materialised and concatenated (CollectError)
    """

    EXTENSIONS = {".parquet"}

    def __init__(self, paths):
        self.paths = [os.fspath(p) for p in paths]

    @classmethod
    def is_supported(cls, path) -> bool:
        _, ext = os.path.splitext(os.fspath(path))
        return ext.lower() in cls.EXTENSIONS

    def read(self) -> pd.DataFrame:
        if not self.paths:
            raise LoadError("No sources given")
        self._check_schemas()
        return self._collect()

    def _check_schemas(self):
        pq = self._parquet_module()
        first = None
        for path in self.paths:
            try:
                schema = pq.read_schema(path)
            except (OSError, ValueError) as exc:
                # pyarrow.ArrowInvalid subclasses ValueError
                raise LoadError(f"{path}: {exc}") from exc
            schema = schema.remove_metadata()
            if first is None:
                first = schema
                continue
            if not schema.equals(first):
                raise LoadError(
                    f"{path}: schema does not match {self.paths[0]} "
                    f"(expected {self._describe(first)}, got {self._describe(schema)})"
                )

    def _collect(self) -> pd.DataFrame:
        from pyarrow import ArrowException

        frames = []
        for path in self.paths:
            try:
                # nullable dtypes keep int64 columns with nulls as integers
                frames.append(
                    pd.read_parquet(
                        path, engine="pyarrow", dtype_backend="numpy_nullable"
                    )
                )
            except (
                OSError,
                ValueError,
                TypeError,
                NotImplementedError,
                ArrowException,
            ) as exc:
                raise CollectError(f"{path}: {exc}") from exc
        try:
            if len(frames) == 1:
                df = frames[0].reset_index(drop=True)
            else:
                df = pd.concat(frames, ignore_index=True)
        except (ValueError, TypeError) as exc:
            raise CollectError(str(exc)) from exc
        logger.info(
            "Collected %d rows x %d columns from %d source(s)",
            len(df),
            len(df.columns),
            len(self.paths),
        )
        return df

    @staticmethod
    def _describe(schema) -> str:
        return ", ".join(f"{field.name}: {field.type}" for field in schema)

    @staticmethod
    def _parquet_module():
        try:
            import pyarrow.parquet as pq
        except ImportError as exc:
            raise LoadError(
                "Parquet support requires pyarrow. Install via: pip install pyarrow"
            ) from exc
        return pq
