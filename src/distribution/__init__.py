"""Distribution lists for report emails."""

from .exceptions import (
    DispatchError,
    LoadError,
    ReportDistributionError,
    ValidationError,
)
from .loader import load_distribution_list, load_from_file, load_from_rows
from .models import DistributionEntry, DistributionList, MAX_ADDRESS_LENGTH, Role

__all__ = [
    "DispatchError",
    "LoadError",
    "ReportDistributionError",
    "ValidationError",
    "load_distribution_list",
    "load_from_file",
    "load_from_rows",
    "DistributionEntry",
    "DistributionList",
    "MAX_ADDRESS_LENGTH",
    "Role",
]
