"""Application workflows and composition root."""

from .forms import PurchaseForm
from .refresh import RefreshScheduler
from .tracker import PortfolioTracker, build_tracker
from .workflows import AddPurchaseWorkflow, DeletePurchaseWorkflow

__all__ = [
    "PurchaseForm",
    "RefreshScheduler",
    "AddPurchaseWorkflow",
    "DeletePurchaseWorkflow",
    "PortfolioTracker",
    "build_tracker",
]
