"""Runtime services: events, interaction modes, logging."""

from gridkit.runtime.events import EventBus, Subscription
from gridkit.runtime.interaction_modes import InteractionMode, InteractionModeMachine
from gridkit.runtime.logging import JsonFormatter, LoggingConfig, configure_logging

__all__ = [
    "EventBus",
    "InteractionMode",
    "InteractionModeMachine",
    "JsonFormatter",
    "LoggingConfig",
    "Subscription",
    "configure_logging",
]
