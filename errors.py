class TablrError(Exception):
    """Base exception for all tablr errors"""

    category = "error"


class SelectionError(TablrError):
    """Empty or invalid file selection"""

    category = "selection"


class LoadError(TablrError):
    """
    Source could not be opened as Parquet, or the sources do not share
    one schema
    """

    category = "load"


class CollectError(TablrError):
    """Schemas were readable but materialising the rows failed"""

    category = "load"


class SortError(TablrError):
    """Column values have no usable ordering"""

    category = "sort"


class FilterError(TablrError):
    """Predicate cannot be applied to the column, or evaluation failed"""

    category = "filter"
