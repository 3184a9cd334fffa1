"""src/birthcast/io/__init__.py"""
from .readers import births_series, clean_births_monthly, read_births_monthly, read_births_series, read_csv
from .writers import ensure_parent_dir, load_fit, save_fit, write_csv

__all__ = [
    "read_csv",
    "clean_births_monthly",
    "read_births_monthly",
    "births_series",
    "read_births_series",
    "ensure_parent_dir",
    "write_csv",
    "save_fit",
    "load_fit",
]
