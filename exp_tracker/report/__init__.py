"""Monthly spending report: log parsing, aggregation and charts."""

from .chart import VisualizationService
from .log_parser import LogFormatError, parse_log
from .stats import MonthStats

__all__ = [
	"LogFormatError",
	"MonthStats",
	"VisualizationService",
	"parse_log",
]
