"""Auxiliary position analysis over an external UCI engine."""

from chessmirror.analysis.models import Evaluation
from chessmirror.analysis.service import (
    AnalysisSession,
    UciAnalyzer,
    parse_bestmove,
    parse_info_line,
)

__all__ = [
    "AnalysisSession",
    "Evaluation",
    "UciAnalyzer",
    "parse_bestmove",
    "parse_info_line",
]
