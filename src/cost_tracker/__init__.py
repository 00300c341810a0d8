"""Cost Tracker: ядро учёта расходов, доходов, бюджетов и накоплений."""

from cost_tracker.api import CostTracker

__all__ = ["CostTracker"]
