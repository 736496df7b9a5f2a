"""
omsim - synthetic "6+1" radon measurement campaigns and their statistics.
"""

__version__ = "0.1.0"

from .stats import (
    mean,
    stddev,
    coefficient_of_variation,
    geometric_mean,
    geometric_stddev,
    quantile,
    quantile_deviation,
    relative_quantile_deviation,
    factorial,
    SampleStatistics,
    describe,
)
from .rooms import Room, RoomKind, kind_from_id, rooms_from_frame
from .builder import (
    CampaignType,
    CampaignValidationError,
    DegenerateCampaignWarning,
    classify_type,
)
from .campaign import Campaign, CampaignBuilder
from .config import CampaignConfig, load_config
from .report import campaigns_to_frame, rank_campaigns, summarize_by_type

__all__ = [
    "__version__",
    "mean", "stddev", "coefficient_of_variation",
    "geometric_mean", "geometric_stddev",
    "quantile", "quantile_deviation", "relative_quantile_deviation",
    "factorial", "SampleStatistics", "describe",
    "Room", "RoomKind", "kind_from_id", "rooms_from_frame",
    "CampaignType", "CampaignValidationError", "DegenerateCampaignWarning", "classify_type",
    "Campaign", "CampaignBuilder",
    "CampaignConfig", "load_config",
    "campaigns_to_frame", "rank_campaigns", "summarize_by_type",
]
