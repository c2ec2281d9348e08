"""Validated runtime configuration.

``ValidatedConfig`` is produced by ``ConfigValidator`` and never changes
afterwards. A new configuration means a new document and a new
validation pass.
"""
import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Mapping, Optional

import yaml

from .matchers import Area, AreaRegistry, MatchKind, PatternMatcherSet
from .prefix import PrefixAllocationParams
from .schema import (
    FloodRate,
    KvStoreConfig,
    LinkMonitorConfig,
    MonitorConfig,
    OpenrConfig,
    PrefixAllocationConfig,
    PrefixForwardingAlgorithm,
    PrefixForwardingType,
    SparkConfig,
    WatchdogConfig,
)


@dataclass(frozen=True)
class FeatureFlags:
    """Feature gates, read once from the document."""
    v4: bool = False
    segment_routing: bool = False
    netlink_fib_handler: bool = False
    ordered_fib_programming: bool = False
    prefix_allocation: bool = False
    bgp_peering: bool = False
    watchdog: bool = False

    @classmethod
    def from_document(cls, document: OpenrConfig) -> "FeatureFlags":
        return cls(
            v4=document.enable_v4,
            segment_routing=document.enable_segment_routing,
            netlink_fib_handler=document.enable_netlink_fib_handler,
            ordered_fib_programming=document.enable_ordered_fib_programming,
            prefix_allocation=document.enable_prefix_allocation,
            bgp_peering=document.enable_bgp_peering,
            watchdog=document.enable_watchdog,
        )


@dataclass(frozen=True)
class InterfaceMatchers:
    """Compiled link monitor interface pattern sets."""
    include: PatternMatcherSet
    exclude: PatternMatcherSet
    redistribute: PatternMatcherSet


class ValidatedConfig:
    """Immutable, validated configuration held for the process lifetime.

    Usage:
        config = ConfigValidator().validate(document)
        if config.matches_area("0", "eth0", MatchKind.INTERFACE):
            ...
    """

    __slots__ = (
        "_document",
        "_areas",
        "_flags",
        "_interface_matchers",
        "_prefix_allocation_params",
    )

    def __init__(
        self,
        document: OpenrConfig,
        areas: AreaRegistry,
        interface_matchers: InterfaceMatchers,
        prefix_allocation_params: Optional[PrefixAllocationParams] = None,
    ):
        areas.freeze()
        object.__setattr__(self, "_document", document)
        object.__setattr__(self, "_areas", areas)
        object.__setattr__(self, "_flags", FeatureFlags.from_document(document))
        object.__setattr__(self, "_interface_matchers", interface_matchers)
        object.__setattr__(self, "_prefix_allocation_params", prefix_allocation_params)

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("ValidatedConfig is read-only")

    def __delattr__(self, name: str) -> None:
        raise AttributeError("ValidatedConfig is read-only")

    # === Identity ===

    @property
    def document(self) -> OpenrConfig:
        """The validated document, including injected defaults."""
        return self._document

    @property
    def node_name(self) -> str:
        return self._document.node_name

    @property
    def domain(self) -> str:
        return self._document.domain

    # === Areas ===

    @property
    def areas(self) -> AreaRegistry:
        return self._areas

    @property
    def area_ids(self) -> list[str]:
        return self._areas.area_ids

    def get_area(self, area_id: str) -> Area:
        """Raises KeyError for an unknown area."""
        return self._areas.get(area_id)

    def matches_area(self, area_id: str, candidate: str, kind: MatchKind) -> bool:
        return self._areas.matches(area_id, candidate, kind)

    # === Feature gates ===

    @property
    def flags(self) -> FeatureFlags:
        return self._flags

    def is_v4_enabled(self) -> bool:
        return self._flags.v4

    def is_segment_routing_enabled(self) -> bool:
        return self._flags.segment_routing

    def is_netlink_fib_handler_enabled(self) -> bool:
        return self._flags.netlink_fib_handler

    def is_ordered_fib_programming_enabled(self) -> bool:
        return self._flags.ordered_fib_programming

    def is_prefix_allocation_enabled(self) -> bool:
        return self._flags.prefix_allocation

    def is_bgp_peering_enabled(self) -> bool:
        return self._flags.bgp_peering

    def is_watchdog_enabled(self) -> bool:
        return self._flags.watchdog

    # === Sub-configs ===

    @property
    def prefix_forwarding_type(self) -> PrefixForwardingType:
        return self._document.prefix_forwarding_type

    @property
    def prefix_forwarding_algorithm(self) -> PrefixForwardingAlgorithm:
        return self._document.prefix_forwarding_algorithm

    @property
    def kvstore_config(self) -> KvStoreConfig:
        return self._document.kvstore_config

    @property
    def flood_rate(self) -> Optional[FloodRate]:
        return self._document.kvstore_config.flood_rate

    @property
    def spark_config(self) -> SparkConfig:
        return self._document.spark_config

    @property
    def monitor_config(self) -> MonitorConfig:
        return self._document.monitor_config

    @property
    def link_monitor_config(self) -> LinkMonitorConfig:
        return self._document.link_monitor_config

    @property
    def watchdog_config(self) -> Optional[WatchdogConfig]:
        return self._document.watchdog_config

    @property
    def prefix_allocation_config(self) -> Optional[PrefixAllocationConfig]:
        return self._document.prefix_allocation_config

    @property
    def prefix_allocation_params(self) -> Optional[PrefixAllocationParams]:
        """Set only for an enabled DYNAMIC_ROOT_NODE prefix allocation."""
        return self._prefix_allocation_params

    @property
    def bgp_config(self) -> Optional[Mapping[str, Any]]:
        if self._document.bgp_config is None:
            return None
        return MappingProxyType(self._document.bgp_config)

    @property
    def bgp_translation_config(self) -> Optional[Mapping[str, Any]]:
        if self._document.bgp_translation_config is None:
            return None
        return MappingProxyType(self._document.bgp_translation_config)

    # === Link monitor interface selection ===

    @property
    def include_interface_matcher(self) -> PatternMatcherSet:
        return self._interface_matchers.include

    @property
    def exclude_interface_matcher(self) -> PatternMatcherSet:
        return self._interface_matchers.exclude

    @property
    def redistribute_interface_matcher(self) -> PatternMatcherSet:
        return self._interface_matchers.redistribute

    def is_interface_included(self, if_name: str) -> bool:
        """Interface is monitored: matches an include and no exclude pattern."""
        return (
            self._interface_matchers.include.match(if_name) and
            not self._interface_matchers.exclude.match(if_name)
        )

    def is_interface_redistributed(self, if_name: str) -> bool:
        """Interface addresses are advertised."""
        return self._interface_matchers.redistribute.match(if_name)

    # === Serialization ===

    def to_dict(self) -> dict:
        return self._document.to_dict()

    def get_running_config(self, indent: Optional[int] = 2) -> str:
        """JSON re-serialization of the validated document."""
        return json.dumps(self.to_dict(), indent=indent, sort_keys=True)

    def to_yaml(self) -> str:
        return yaml.safe_dump(self.to_dict(), sort_keys=True)

    def __repr__(self) -> str:
        return (
            f"ValidatedConfig(node_name={self.node_name!r}, "
            f"areas={self.area_ids!r}, flags={self._flags!r})"
        )
