"""Deployment report rendering."""

from idemdeploy.report.renderer import (
    DeployReport,
    format_header,
    format_row,
    name_column_width,
    pad,
)

__all__ = ["DeployReport", "format_header", "format_row", "name_column_width", "pad"]
