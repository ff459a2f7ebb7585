"""Store operation planner."""

from src.application.planning.request_planner import MAX_BATCH_KEYS, StoreOperationPlanner

__all__ = ["MAX_BATCH_KEYS", "StoreOperationPlanner"]
