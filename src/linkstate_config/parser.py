"""Parser for the configuration document.

Converts a decoded dict (from JSON or YAML) into the strongly-typed
OpenrConfig tree. Only shape and type are checked here; cross-field
invariants belong to the validator.
"""
import logging
from dataclasses import fields
from enum import Enum
from typing import Any, Mapping, Optional, TypeVar

from .errors import ParseError
from .schema import (
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

logger = logging.getLogger(__name__)

E = TypeVar("E", bound=Enum)


class DocumentParser:
    """Parse a configuration document from its decoded dict form."""

    def parse(self, config: Any) -> OpenrConfig:
        """
        Parse a configuration dict into an OpenrConfig object.

        Args:
            config: Decoded document (top-level mapping)

        Returns:
            OpenrConfig object

        Raises:
            ParseError: If a field has the wrong shape or type
        """
        doc = self._section(config, "config", OpenrConfig)
        defaults = OpenrConfig()

        return OpenrConfig(
            node_name=self._str(doc, "node_name", defaults.node_name),
            domain=self._str(doc, "domain", defaults.domain),
            areas=self._parse_areas(doc.get("areas")),
            listen_addr=self._str(doc, "listen_addr", defaults.listen_addr),
            openr_ctrl_thrift_port=self._int(
                doc, "openr_ctrl_thrift_port", defaults.openr_ctrl_thrift_port
            ),
            enable_v4=self._bool(doc, "enable_v4", False),
            enable_segment_routing=self._bool(doc, "enable_segment_routing", False),
            enable_netlink_fib_handler=self._bool(
                doc, "enable_netlink_fib_handler", False
            ),
            prefix_forwarding_type=self._enum(
                doc, "prefix_forwarding_type", PrefixForwardingType,
                defaults.prefix_forwarding_type,
            ),
            prefix_forwarding_algorithm=self._enum(
                doc, "prefix_forwarding_algorithm", PrefixForwardingAlgorithm,
                defaults.prefix_forwarding_algorithm,
            ),
            kvstore_config=self._parse_kvstore(doc.get("kvstore_config")),
            spark_config=self._parse_spark(doc.get("spark_config")),
            monitor_config=self._parse_monitor(doc.get("monitor_config")),
            link_monitor_config=self._parse_link_monitor(
                doc.get("link_monitor_config")
            ),
            enable_watchdog=self._bool(doc, "enable_watchdog", False),
            watchdog_config=self._parse_watchdog(doc.get("watchdog_config")),
            enable_prefix_allocation=self._bool(doc, "enable_prefix_allocation", False),
            prefix_allocation_config=self._parse_prefix_allocation(
                doc.get("prefix_allocation_config")
            ),
            enable_ordered_fib_programming=self._bool(
                doc, "enable_ordered_fib_programming", False
            ),
            fib_port=self._int(doc, "fib_port", defaults.fib_port),
            enable_bgp_peering=self._bool(doc, "enable_bgp_peering", False),
            bgp_config=self._passthrough(doc, "bgp_config"),
            bgp_translation_config=self._passthrough(doc, "bgp_translation_config"),
        )

    # --- Sections ---

    def _parse_areas(self, areas: Any) -> tuple[AreaConfig, ...]:
        """Parse the areas list."""
        if areas is None:
            return ()
        if not isinstance(areas, list):
            raise ParseError("expected a list", path="areas")

        parsed = []
        for index, area in enumerate(areas):
            path = f"areas[{index}]"
            area = self._section(area, path, AreaConfig)
            if "area_id" not in area:
                raise ParseError("missing required field: area_id", path=path)
            parsed.append(AreaConfig(
                area_id=self._str(area, "area_id", "", path),
                neighbor_regexes=self._str_list(area, "neighbor_regexes", path),
                interface_regexes=self._str_list(area, "interface_regexes", path),
            ))
        return tuple(parsed)

    def _parse_kvstore(self, config: Any) -> KvStoreConfig:
        path = "kvstore_config"
        if config is None:
            return KvStoreConfig()
        config = self._section(config, path, KvStoreConfig)
        defaults = KvStoreConfig()

        flood_rate = None
        if config.get("flood_rate") is not None:
            rate_path = f"{path}.flood_rate"
            rate = self._section(config["flood_rate"], rate_path, FloodRate)
            for key in ("flood_msg_per_sec", "flood_msg_burst_size"):
                if key not in rate:
                    raise ParseError(f"missing required field: {key}", path=rate_path)
            flood_rate = FloodRate(
                flood_msg_per_sec=self._int(rate, "flood_msg_per_sec", 0, rate_path),
                flood_msg_burst_size=self._int(rate, "flood_msg_burst_size", 0, rate_path),
            )

        return KvStoreConfig(
            key_ttl_ms=self._int(config, "key_ttl_ms", defaults.key_ttl_ms, path),
            sync_interval_s=self._int(
                config, "sync_interval_s", defaults.sync_interval_s, path
            ),
            ttl_decrement_ms=self._int(
                config, "ttl_decrement_ms", defaults.ttl_decrement_ms, path
            ),
            flood_rate=flood_rate,
            key_prefix_filters=self._str_list(config, "key_prefix_filters", path),
            key_originator_id_filters=self._str_list(
                config, "key_originator_id_filters", path
            ),
        )

    def _parse_spark(self, config: Any) -> SparkConfig:
        """Parse neighbor discovery timers."""
        path = "spark_config"
        if config is None:
            return SparkConfig()
        config = self._section(config, path, SparkConfig)
        defaults = SparkConfig()

        step_conf = StepDetectorConfig()
        if config.get("step_detector_conf") is not None:
            step_path = f"{path}.step_detector_conf"
            step = self._section(config["step_detector_conf"], step_path, StepDetectorConfig)
            step_conf = StepDetectorConfig(**{
                f.name: self._int(step, f.name, getattr(step_conf, f.name), step_path)
                for f in fields(StepDetectorConfig)
            })

        return SparkConfig(
            neighbor_discovery_port=self._int(
                config, "neighbor_discovery_port", defaults.neighbor_discovery_port, path
            ),
            hello_time_s=self._int(config, "hello_time_s", defaults.hello_time_s, path),
            fastinit_hello_time_ms=self._int(
                config, "fastinit_hello_time_ms", defaults.fastinit_hello_time_ms, path
            ),
            keepalive_time_s=self._int(
                config, "keepalive_time_s", defaults.keepalive_time_s, path
            ),
            hold_time_s=self._int(config, "hold_time_s", defaults.hold_time_s, path),
            graceful_restart_time_s=self._int(
                config, "graceful_restart_time_s", defaults.graceful_restart_time_s, path
            ),
            step_detector_conf=step_conf,
        )

    def _parse_monitor(self, config: Any) -> MonitorConfig:
        path = "monitor_config"
        if config is None:
            return MonitorConfig()
        config = self._section(config, path, MonitorConfig)
        defaults = MonitorConfig()

        return MonitorConfig(
            max_event_log=self._int(config, "max_event_log", defaults.max_event_log, path),
            enable_event_log_submission=self._bool(
                config, "enable_event_log_submission",
                defaults.enable_event_log_submission, path,
            ),
        )

    def _parse_link_monitor(self, config: Any) -> LinkMonitorConfig:
        """Parse link flap backoff and interface pattern lists."""
        path = "link_monitor_config"
        if config is None:
            return LinkMonitorConfig()
        config = self._section(config, path, LinkMonitorConfig)
        defaults = LinkMonitorConfig()

        return LinkMonitorConfig(
            linkflap_initial_backoff_ms=self._int(
                config, "linkflap_initial_backoff_ms",
                defaults.linkflap_initial_backoff_ms, path,
            ),
            linkflap_max_backoff_ms=self._int(
                config, "linkflap_max_backoff_ms", defaults.linkflap_max_backoff_ms, path
            ),
            use_rtt_metric=self._bool(config, "use_rtt_metric", defaults.use_rtt_metric, path),
            include_interface_regexes=self._str_list(
                config, "include_interface_regexes", path
            ),
            exclude_interface_regexes=self._str_list(
                config, "exclude_interface_regexes", path
            ),
            redistribute_interface_regexes=self._str_list(
                config, "redistribute_interface_regexes", path
            ),
        )

    def _parse_watchdog(self, config: Any) -> Optional[WatchdogConfig]:
        path = "watchdog_config"
        if config is None:
            return None
        config = self._section(config, path, WatchdogConfig)
        defaults = WatchdogConfig()

        return WatchdogConfig(
            interval_s=self._int(config, "interval_s", defaults.interval_s, path),
            thread_timeout_s=self._int(
                config, "thread_timeout_s", defaults.thread_timeout_s, path
            ),
            max_memory_mb=self._int(config, "max_memory_mb", defaults.max_memory_mb, path),
        )

    def _parse_prefix_allocation(self, config: Any) -> Optional[PrefixAllocationConfig]:
        """Parse prefix allocation settings (mode rules are checked later)."""
        path = "prefix_allocation_config"
        if config is None:
            return None
        config = self._section(config, path, PrefixAllocationConfig)
        defaults = PrefixAllocationConfig()

        seed_prefix = config.get("seed_prefix")
        if seed_prefix is not None and not isinstance(seed_prefix, str):
            raise ParseError("expected a string", path=f"{path}.seed_prefix")

        allocate_prefix_len = None
        if config.get("allocate_prefix_len") is not None:
            allocate_prefix_len = self._int(config, "allocate_prefix_len", 0, path)

        return PrefixAllocationConfig(
            loopback_interface=self._str(
                config, "loopback_interface", defaults.loopback_interface, path
            ),
            prefix_allocation_mode=self._enum(
                config, "prefix_allocation_mode", PrefixAllocationMode,
                defaults.prefix_allocation_mode, path,
            ),
            seed_prefix=seed_prefix,
            allocate_prefix_len=allocate_prefix_len,
            set_loopback_addr=self._bool(
                config, "set_loopback_addr", defaults.set_loopback_addr, path
            ),
            override_loopback_addr=self._bool(
                config, "override_loopback_addr", defaults.override_loopback_addr, path
            ),
        )

    # --- Field helpers ---

    def _section(self, value: Any, path: str, schema: type) -> Mapping[str, Any]:
        """Check that a section is a mapping and warn about unknown keys."""
        if not isinstance(value, Mapping):
            raise ParseError(
                f"expected a mapping, got {type(value).__name__}", path=path
            )
        known = {f.name for f in fields(schema)}
        for key in value:
            if key not in known:
                logger.warning(f"Ignoring unknown field '{key}' in {path}")
        return value

    def _int(
        self,
        section: Mapping[str, Any],
        key: str,
        default: int,
        path: Optional[str] = None,
    ) -> int:
        value = section.get(key)
        if value is None:
            return default
        # bool is an int subclass, but true/false is never a valid number here
        if isinstance(value, bool) or not isinstance(value, int):
            raise ParseError(
                f"expected an integer, got {value!r}", path=_join(path, key)
            )
        return value

    def _bool(
        self,
        section: Mapping[str, Any],
        key: str,
        default: bool,
        path: Optional[str] = None,
    ) -> bool:
        value = section.get(key)
        if value is None:
            return default
        if not isinstance(value, bool):
            raise ParseError(
                f"expected a boolean, got {value!r}", path=_join(path, key)
            )
        return value

    def _str(
        self,
        section: Mapping[str, Any],
        key: str,
        default: str,
        path: Optional[str] = None,
    ) -> str:
        value = section.get(key)
        if value is None:
            return default
        if not isinstance(value, str):
            raise ParseError(
                f"expected a string, got {value!r}", path=_join(path, key)
            )
        return value

    def _str_list(
        self,
        section: Mapping[str, Any],
        key: str,
        path: Optional[str] = None,
    ) -> tuple[str, ...]:
        """Read a list of strings."""
        value = section.get(key)
        if value is None:
            return ()
        if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
            raise ParseError("expected a list of strings", path=_join(path, key))
        return tuple(value)

    def _enum(
        self,
        section: Mapping[str, Any],
        key: str,
        enum_cls: type[E],
        default: E,
        path: Optional[str] = None,
    ) -> E:
        """Read an enum given as its integer wire value or its name."""
        value = section.get(key)
        if value is None:
            return default

        valid = ", ".join(member.name for member in enum_cls)
        try:
            if isinstance(value, str):
                return enum_cls[value.upper()]
            if isinstance(value, int) and not isinstance(value, bool):
                return enum_cls(value)
        except (KeyError, ValueError):
            pass
        raise ParseError(
            f"invalid {enum_cls.__name__} {value!r}. Valid: {valid}",
            path=_join(path, key),
        )

    def _passthrough(self, section: Mapping[str, Any], key: str) -> Optional[dict]:
        """Sections owned by other components are kept as plain mappings."""
        value = section.get(key)
        if value is None:
            return None
        if not isinstance(value, Mapping):
            raise ParseError(
                f"expected a mapping, got {type(value).__name__}", path=key
            )
        return dict(value)


def _join(path: Optional[str], key: str) -> str:
    return f"{path}.{key}" if path else key
