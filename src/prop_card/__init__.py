"""Research prop cards: hit rates, trends, splits and insight text for player props."""

from . import config as config  # re-export for convenience
from . import schemas as schemas
from .distribution import compute_distribution, compute_sensitivity, compute_stability
from .engine import generate_prop_card
from .hit_rate import summarize_hit_rate
from .insights import InsightPolicy, generate_insights
from .outcomes import evaluate_outcome
from .parser import parse_query_from_text, validate_parsed_query
from .pipeline import PropCardService
from .splits import compute_splits
from .trends import analyze_trend

__all__ = [
    "config",
    "schemas",
    "evaluate_outcome",
    "summarize_hit_rate",
    "analyze_trend",
    "compute_splits",
    "compute_distribution",
    "compute_sensitivity",
    "compute_stability",
    "generate_insights",
    "InsightPolicy",
    "parse_query_from_text",
    "validate_parsed_query",
    "generate_prop_card",
    "PropCardService",
]
