"""FreshB4: food freshness scanning, pantry tracking and expiry alerts."""

from .ai import AIBackend, create_backend
from .ai.normalize import (
    normalize_analysis,
    normalize_recipes,
    parse_analysis_text,
    parse_recipes_text,
)
from .assistant import PantryAssistant, item_from_analysis
from .config import FreshB4Config, load_config
from .db import ItemNotFoundError, PantryDB
from .freshness import Tier, classify, status_label, tier_rank
from .models import AnalysisResult, PantryItem, RecipeBatch, RecipeSuggestion
from .notifications import (
    NotificationPlan,
    Notifier,
    plan_notifications,
    schedule_expiry_notifications,
)
from .summary import NOTIFICATION_POLICY, STATS_CARD_POLICY, PantrySummary, summarize

__all__ = [
    "AIBackend",
    "create_backend",
    "PantryAssistant",
    "item_from_analysis",
    "normalize_analysis",
    "normalize_recipes",
    "parse_analysis_text",
    "parse_recipes_text",
    "FreshB4Config",
    "load_config",
    "PantryDB",
    "ItemNotFoundError",
    "Tier",
    "classify",
    "status_label",
    "tier_rank",
    "AnalysisResult",
    "PantryItem",
    "RecipeBatch",
    "RecipeSuggestion",
    "NotificationPlan",
    "Notifier",
    "plan_notifications",
    "schedule_expiry_notifications",
    "PantrySummary",
    "summarize",
    "NOTIFICATION_POLICY",
    "STATS_CARD_POLICY",
]
