from scannability.schemas.analysis import (
    AnalysisResult,
    AnchorBreakdown,
    CategoryScore,
    Finding,
    Problem,
    TriggeredSuggestion,
)

__all__ = [
    "AnalysisResult",
    "AnchorBreakdown",
    "CategoryScore",
    "Finding",
    "Problem",
    "TriggeredSuggestion",
]
