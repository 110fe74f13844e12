"""Page datalayer: plugin admission and event broadcast with replay."""

from datalayer.bootstrap import bootstrap_observability
from datalayer.config import (
    DatalayerSettings,
    DeliverySettings,
    TestModeSettings,
    load_default_settings,
    parse_settings,
)
from datalayer.contracts import (
    EVENT_INITIALIZE,
    Event,
    GatedRule,
    LoadRule,
    Plugin,
    PluginFactory,
    PluginSpec,
    PredicateRule,
    StaticRule,
    Subscriber,
)
from datalayer.datalayer import Datalayer
from datalayer.lifecycle import DatalayerState, Lifecycle, NotInitializedError
from datalayer.markup import MarkupElement, MetadataCollector, NullMetadataCollector
from datalayer.observability import (
    HealthStatus,
    NullLogger,
    NullMetrics,
    Observability,
    StdlibLogger,
    compute_health,
)
from datalayer.queue import EventQueue, InvalidSubscriberError
from datalayer.readiness import ReadinessLatch
from datalayer.registry import PluginEntry, PluginRegistry
from datalayer.rules import coerce_rule, evaluate_rule
from datalayer.testmode import CookieStore, InMemoryCookieStore, resolve_test_mode
from datalayer.validation import (
    MissingPageDataError,
    MissingSiteDataError,
    MissingUserDataError,
    ValidationError,
    validate_global_data,
)

__all__ = [
    "bootstrap_observability",
    "DatalayerSettings",
    "DeliverySettings",
    "TestModeSettings",
    "load_default_settings",
    "parse_settings",
    "EVENT_INITIALIZE",
    "Event",
    "GatedRule",
    "LoadRule",
    "Plugin",
    "PluginFactory",
    "PluginSpec",
    "PredicateRule",
    "StaticRule",
    "Subscriber",
    "Datalayer",
    "DatalayerState",
    "Lifecycle",
    "NotInitializedError",
    "MarkupElement",
    "MetadataCollector",
    "NullMetadataCollector",
    "HealthStatus",
    "NullLogger",
    "NullMetrics",
    "Observability",
    "StdlibLogger",
    "compute_health",
    "EventQueue",
    "InvalidSubscriberError",
    "ReadinessLatch",
    "PluginEntry",
    "PluginRegistry",
    "coerce_rule",
    "evaluate_rule",
    "CookieStore",
    "InMemoryCookieStore",
    "resolve_test_mode",
    "MissingPageDataError",
    "MissingSiteDataError",
    "MissingUserDataError",
    "ValidationError",
    "validate_global_data",
]
