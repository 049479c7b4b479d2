"""Public API exports for device inventory reconciliation."""

from .detection import detect_sources
from .errors import InputValidationError, MissingBaseSourceError, ReconciliationError
from .export import build_output_path, write_report_csv
from .loader import InputLimits, check_inputs, discover_csv_files, load_dataset, load_datasets
from .matching import DuplicateNameInfo, NameIndex, find_by_name, find_duplicate_names
from .merge import MergeEngine, assemble_report, build_report
from .models import Dataset, DeviceRecord, PresenceSummary, Record, Report, SourceAssignment
from .sources import SOURCE_ORDER, SourceDefinition, SourceKind, blank_fields, map_fields, parse_source_kind

__all__ = [
    "Dataset",
    "DeviceRecord",
    "DuplicateNameInfo",
    "InputLimits",
    "InputValidationError",
    "MergeEngine",
    "MissingBaseSourceError",
    "NameIndex",
    "PresenceSummary",
    "Record",
    "ReconciliationError",
    "Report",
    "SOURCE_ORDER",
    "SourceAssignment",
    "SourceDefinition",
    "SourceKind",
    "assemble_report",
    "blank_fields",
    "build_output_path",
    "build_report",
    "check_inputs",
    "detect_sources",
    "discover_csv_files",
    "find_by_name",
    "find_duplicate_names",
    "load_dataset",
    "load_datasets",
    "map_fields",
    "parse_source_kind",
    "write_report_csv",
]
