"""Handler modules for Kopf events and the reconcilers behind them."""
from .heartbeat import HeartbeatReconciler
from .monitor import MonitorReconciler
from .monitor_group import MonitorGroupReconciler
from .reconciler import BaseReconciler, ReconcileResult
from .resources import reconcile_object, register_handlers
from .startup import configure_operator, start_runtime, stop_runtime

__all__ = [
    "BaseReconciler",
    "HeartbeatReconciler",
    "MonitorGroupReconciler",
    "MonitorReconciler",
    "ReconcileResult",
    "configure_operator",
    "reconcile_object",
    "register_handlers",
    "start_runtime",
    "stop_runtime",
]
