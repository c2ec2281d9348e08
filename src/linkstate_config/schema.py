"""Schema definitions for the routing daemon configuration document.

Defines the typed field tree the raw document is parsed into. All
dataclasses are frozen: once parsed, a document is never mutated.
Defaulted copies are produced with ``dataclasses.replace``.
"""
from dataclasses import dataclass, field, fields, is_dataclass
from enum import Enum
from typing import Any, Mapping, Optional

# Area used when the document declares none
DEFAULT_AREA_ID = "0"
MATCH_ALL_PATTERN = ".*"


class PrefixForwardingType(int, Enum):
    """How prefixes are programmed into the forwarding plane."""
    IP = 0
    SR_MPLS = 1


class PrefixForwardingAlgorithm(int, Enum):
    """Route computation used for prefix forwarding."""
    SP_ECMP = 0
    KSP2_ED_ECMP = 1


class PrefixAllocationMode(int, Enum):
    """Role of this node in prefix allocation."""
    DYNAMIC_LEAF_NODE = 0
    DYNAMIC_ROOT_NODE = 1
    STATIC = 2


@dataclass(frozen=True)
class AreaConfig:
    """A routing area and the rules that classify neighbors/interfaces."""
    area_id: str
    neighbor_regexes: tuple[str, ...] = ()
    interface_regexes: tuple[str, ...] = ()


@dataclass(frozen=True)
class FloodRate:
    """Flood rate limit for state advertisements."""
    flood_msg_per_sec: int
    flood_msg_burst_size: int


@dataclass(frozen=True)
class KvStoreConfig:
    key_ttl_ms: int = 300000
    sync_interval_s: int = 60
    ttl_decrement_ms: int = 1
    flood_rate: Optional[FloodRate] = None
    key_prefix_filters: tuple[str, ...] = ()
    key_originator_id_filters: tuple[str, ...] = ()


@dataclass(frozen=True)
class StepDetectorConfig:
    """RTT step detector thresholds and window sizes."""
    fast_window_size: int = 10
    slow_window_size: int = 60
    lower_threshold: int = 2
    upper_threshold: int = 5
    ads_threshold: int = 500


@dataclass(frozen=True)
class SparkConfig:
    """Neighbor discovery settings."""
    neighbor_discovery_port: int = 6666
    hello_time_s: int = 20
    fastinit_hello_time_ms: int = 500
    keepalive_time_s: int = 2
    hold_time_s: int = 10
    graceful_restart_time_s: int = 30
    step_detector_conf: StepDetectorConfig = field(default_factory=StepDetectorConfig)


@dataclass(frozen=True)
class MonitorConfig:
    max_event_log: int = 100
    enable_event_log_submission: bool = True


@dataclass(frozen=True)
class LinkMonitorConfig:
    """Link flap damping and interface selection."""
    linkflap_initial_backoff_ms: int = 60000
    linkflap_max_backoff_ms: int = 300000
    use_rtt_metric: bool = True
    include_interface_regexes: tuple[str, ...] = ()
    exclude_interface_regexes: tuple[str, ...] = ()
    redistribute_interface_regexes: tuple[str, ...] = ()


@dataclass(frozen=True)
class WatchdogConfig:
    interval_s: int = 20
    thread_timeout_s: int = 300
    max_memory_mb: int = 800


@dataclass(frozen=True)
class PrefixAllocationConfig:
    """Prefix allocation settings."""
    loopback_interface: str = "lo"
    prefix_allocation_mode: PrefixAllocationMode = PrefixAllocationMode.DYNAMIC_LEAF_NODE
    seed_prefix: Optional[str] = None
    allocate_prefix_len: Optional[int] = None
    set_loopback_addr: bool = False
    override_loopback_addr: bool = False


@dataclass(frozen=True)
class OpenrConfig:
    """Complete configuration document."""
    node_name: str = ""
    domain: str = ""
    areas: tuple[AreaConfig, ...] = ()
    listen_addr: str = "::"
    openr_ctrl_thrift_port: int = 2018
    enable_v4: bool = False
    enable_segment_routing: bool = False
    enable_netlink_fib_handler: bool = False
    prefix_forwarding_type: PrefixForwardingType = PrefixForwardingType.IP
    prefix_forwarding_algorithm: PrefixForwardingAlgorithm = PrefixForwardingAlgorithm.SP_ECMP
    kvstore_config: KvStoreConfig = field(default_factory=KvStoreConfig)
    spark_config: SparkConfig = field(default_factory=SparkConfig)
    monitor_config: MonitorConfig = field(default_factory=MonitorConfig)
    link_monitor_config: LinkMonitorConfig = field(default_factory=LinkMonitorConfig)
    enable_watchdog: bool = False
    watchdog_config: Optional[WatchdogConfig] = None
    enable_prefix_allocation: bool = False
    prefix_allocation_config: Optional[PrefixAllocationConfig] = None
    enable_ordered_fib_programming: bool = False
    fib_port: int = 60100
    enable_bgp_peering: bool = False
    # BGP sections are owned by the BGP speaker and passed through untouched
    bgp_config: Optional[Mapping[str, Any]] = None
    bgp_translation_config: Optional[Mapping[str, Any]] = None

    def to_dict(self) -> dict:
        """Convert to plain dict in wire form (enums as ints, unset optionals omitted)."""
        return to_plain(self)


def default_area() -> AreaConfig:
    """Area synthesized when the document declares none."""
    return AreaConfig(
        area_id=DEFAULT_AREA_ID,
        neighbor_regexes=(MATCH_ALL_PATTERN,),
        interface_regexes=(MATCH_ALL_PATTERN,),
    )


def to_plain(value: Any) -> Any:
    """Recursively convert schema objects to JSON/YAML friendly values."""
    if is_dataclass(value) and not isinstance(value, type):
        result = {}
        for f in fields(value):
            item = getattr(value, f.name)
            if item is None:
                continue
            result[f.name] = to_plain(item)
        return result
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Mapping):
        return {str(k): to_plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_plain(v) for v in value]
    return value
