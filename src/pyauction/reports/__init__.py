"""Registry and sale-report exports."""

from .export import ExportError, export_registry_csv, export_sale_report_csv, sort_registry

__all__ = [
    "ExportError",
    "export_registry_csv",
    "export_sale_report_csv",
    "sort_registry",
]
