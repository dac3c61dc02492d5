from .calculator import ROIEngine, compute_roi
from .result import CostBreakdown, ROIResult, SavingsProjection

__all__ = ["CostBreakdown", "ROIEngine", "ROIResult", "SavingsProjection", "compute_roi"]
