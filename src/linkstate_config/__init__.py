"""Configuration ingestion and validation for a link-state routing daemon.

Turns a declarative configuration document into an immutable
ValidatedConfig and compiles the per-area matchers used to classify
discovered neighbors and interfaces.

Usage:
    from linkstate_config import load_config, MatchKind

    config = load_config("/etc/openr/openr.yaml")
    config.matches_area("0", "eth0", MatchKind.INTERFACE)
"""
from .config import FeatureFlags, InterfaceMatchers, ValidatedConfig
from .errors import (
    ConfigError,
    DuplicateAreaError,
    EmptyAreaRuleError,
    IncompatibleModeError,
    InvalidArgumentError,
    MalformedAddressError,
    OutOfRangeError,
    ParseError,
    PatternCompileError,
)
from .loader import load_config, load_document, validate_document
from .matchers import Area, AreaRegistry, MatchKind, PatternMatcherSet
from .parser import DocumentParser
from .prefix import PrefixAllocationParams, compute_allocation_params
from .schema import (
    DEFAULT_AREA_ID,
    AreaConfig,
    FloodRate,
    KvStoreConfig,
    LinkMonitorConfig,
    MonitorConfig,
    OpenrConfig,
    PrefixAllocationConfig,
    PrefixAllocationMode,
    PrefixForwardingAlgorithm,
    PrefixForwardingType,
    SparkConfig,
    StepDetectorConfig,
    WatchdogConfig,
)
from .validator import ConfigValidator, ValidationResult

__all__ = [
    # Entry points
    "load_config",
    "load_document",
    "validate_document",
    "ConfigValidator",
    "ValidationResult",
    "DocumentParser",
    # Result
    "ValidatedConfig",
    "FeatureFlags",
    "InterfaceMatchers",
    # Areas
    "Area",
    "AreaRegistry",
    "MatchKind",
    "PatternMatcherSet",
    # Prefix allocation
    "PrefixAllocationParams",
    "compute_allocation_params",
    # Schema
    "DEFAULT_AREA_ID",
    "AreaConfig",
    "FloodRate",
    "KvStoreConfig",
    "LinkMonitorConfig",
    "MonitorConfig",
    "OpenrConfig",
    "PrefixAllocationConfig",
    "PrefixAllocationMode",
    "PrefixForwardingAlgorithm",
    "PrefixForwardingType",
    "SparkConfig",
    "StepDetectorConfig",
    "WatchdogConfig",
    # Errors
    "ConfigError",
    "ParseError",
    "DuplicateAreaError",
    "EmptyAreaRuleError",
    "PatternCompileError",
    "OutOfRangeError",
    "InvalidArgumentError",
    "MalformedAddressError",
    "IncompatibleModeError",
]
