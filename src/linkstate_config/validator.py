"""Startup validation for the configuration document.

Runs every cross-field check in a fixed order and stops at the first
violation. Later checks rely on state built by earlier ones (the area
registry is needed by the single-area checks), so the order matters.
"""
import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Optional

from .config import InterfaceMatchers, ValidatedConfig
from .errors import (
    ConfigError,
    IncompatibleModeError,
    InvalidArgumentError,
    OutOfRangeError,
)
from .matchers import AreaRegistry, PatternMatcherSet, EMPTY_MATCHER
from .prefix import PrefixAllocationParams, compute_allocation_params
from .schema import (
    OpenrConfig,
    PrefixAllocationMode,
    PrefixForwardingAlgorithm,
    PrefixForwardingType,
    default_area,
)
from .utils.logging_config import timed

logger = logging.getLogger(__name__)

MIN_PORT = 1
MAX_PORT = 65535


@dataclass
class ValidationResult:
    """Result of a non-raising validation run.

    Validation is fail-fast, so ``errors`` holds at most one entry.
    """
    valid: bool
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    config: Optional[ValidatedConfig] = None
    error: Optional[ConfigError] = None


class ConfigValidator:
    """Validate a parsed document and build the ValidatedConfig."""

    @timed("validate")
    def validate(self, document: OpenrConfig) -> ValidatedConfig:
        """
        Validate a document.

        Checks, in order:
        1. Areas (default area, duplicates, pattern compilation)
        2. Forwarding type/algorithm compatibility
        3. Single-area-only features
        4. KvStore flood rate
        5. Spark timers and step detector
        6. Monitor
        7. Link monitor backoff and interface patterns
        8. Prefix allocation
        9. BGP peering
        10. Watchdog

        Args:
            document: Parsed configuration document

        Returns:
            ValidatedConfig built from the (possibly defaulted) document

        Raises:
            ConfigError: On the first violated invariant
        """
        if not document.areas:
            logger.info("No areas configured, using default area")
            document = dataclasses.replace(document, areas=(default_area(),))

        areas = self._populate_areas(document)
        self._check_forwarding(document)
        self._check_single_area_features(document, areas)
        self._check_kvstore(document)
        self._check_spark(document)
        self._check_monitor(document)
        interface_matchers = self._check_link_monitor(document)
        prefix_params = self._check_prefix_allocation(document)
        document = self._check_bgp(document)
        self._check_watchdog(document)

        logger.info(
            f"Configuration for node '{document.node_name}' is valid "
            f"({len(areas)} area(s): {', '.join(areas.area_ids)})"
        )
        return ValidatedConfig(
            document=document,
            areas=areas,
            interface_matchers=interface_matchers,
            prefix_allocation_params=prefix_params,
        )

    def check(self, document: OpenrConfig) -> ValidationResult:
        """Run validate() and report the outcome as a value instead of raising."""
        try:
            config = self.validate(document)
        except ConfigError as e:
            return ValidationResult(valid=False, errors=[str(e)], error=e)

        warnings = []
        if config.is_bgp_peering_enabled() and document.bgp_translation_config is None:
            warnings.append(
                "bgp_translation_config missing, substituted empty default"
            )
        return ValidationResult(valid=True, warnings=warnings, config=config)

    # --- Checks ---

    def _populate_areas(self, document: OpenrConfig) -> AreaRegistry:
        """Register every area and compile its patterns."""
        areas = AreaRegistry()
        for area in document.areas:
            areas.add_area(area.area_id, area.neighbor_regexes, area.interface_regexes)
        return areas

    def _check_forwarding(self, document: OpenrConfig) -> None:
        if (document.prefix_forwarding_algorithm == PrefixForwardingAlgorithm.KSP2_ED_ECMP and
                document.prefix_forwarding_type != PrefixForwardingType.SR_MPLS):
            raise IncompatibleModeError(
                "prefix_forwarding_type must be set to SR_MPLS for KSP2_ED_ECMP"
            )

    def _check_single_area_features(
        self,
        document: OpenrConfig,
        areas: AreaRegistry
    ) -> None:
        if len(areas) <= 1:
            return
        if document.enable_ordered_fib_programming:
            raise IncompatibleModeError(
                "enable_ordered_fib_programming only support single area config"
            )
        if document.enable_prefix_allocation:
            raise IncompatibleModeError(
                "prefix_allocation only support single area config"
            )

    def _check_kvstore(self, document: OpenrConfig) -> None:
        flood_rate = document.kvstore_config.flood_rate
        if flood_rate is None:
            return
        if flood_rate.flood_msg_per_sec <= 0:
            raise OutOfRangeError("kvstore flood_msg_per_sec should be > 0")
        if flood_rate.flood_msg_burst_size <= 0:
            raise OutOfRangeError("kvstore flood_msg_burst_size should be > 0")

    def _check_spark(self, document: OpenrConfig) -> None:
        """Validate neighbor discovery port, timers and step detector."""
        spark = document.spark_config

        if not MIN_PORT <= spark.neighbor_discovery_port <= MAX_PORT:
            raise OutOfRangeError(
                f"neighbor_discovery_port ({spark.neighbor_discovery_port}) "
                f"should be in range [{MIN_PORT}, {MAX_PORT}]"
            )

        _require_positive("hello_time_s", spark.hello_time_s)

        # Fast initial discovery must not be slower than regular hellos
        _require_positive("fastinit_hello_time_ms", spark.fastinit_hello_time_ms)
        if spark.fastinit_hello_time_ms > 1000 * spark.hello_time_s:
            raise InvalidArgumentError(
                f"fastinit_hello_time_ms ({spark.fastinit_hello_time_ms}) "
                f"should be <= hello_time_s ({spark.hello_time_s}) * 1000"
            )

        _require_positive("keepalive_time_s", spark.keepalive_time_s)
        if spark.keepalive_time_s > spark.hold_time_s:
            raise InvalidArgumentError(
                f"keepalive_time_s ({spark.keepalive_time_s}) "
                f"should be <= hold_time_s ({spark.hold_time_s})"
            )

        _require_positive("hold_time_s", spark.hold_time_s)

        _require_positive("graceful_restart_time_s", spark.graceful_restart_time_s)
        if spark.graceful_restart_time_s < 3 * spark.keepalive_time_s:
            raise InvalidArgumentError(
                f"graceful_restart_time_s ({spark.graceful_restart_time_s}) "
                f"should be >= 3 * keepalive_time_s ({spark.keepalive_time_s})"
            )

        step = spark.step_detector_conf
        if (step.lower_threshold < 0 or step.upper_threshold < 0 or
                step.lower_threshold >= step.upper_threshold):
            raise InvalidArgumentError(
                f"step_detector_conf.lower_threshold ({step.lower_threshold}) "
                f"should be < step_detector_conf.upper_threshold "
                f"({step.upper_threshold}), and they should be >= 0"
            )
        if (step.fast_window_size < 0 or step.slow_window_size < 0 or
                step.fast_window_size > step.slow_window_size):
            raise InvalidArgumentError(
                f"step_detector_conf.fast_window_size ({step.fast_window_size}) "
                f"should be <= step_detector_conf.slow_window_size "
                f"({step.slow_window_size}), and they should be >= 0"
            )

    def _check_monitor(self, document: OpenrConfig) -> None:
        max_event_log = document.monitor_config.max_event_log
        if max_event_log < 0:
            raise OutOfRangeError(
                f"monitor_max_event_log ({max_event_log}) should be >= 0"
            )

    def _check_link_monitor(self, document: OpenrConfig) -> InterfaceMatchers:
        """Validate link flap backoff and compile interface pattern sets."""
        lm = document.link_monitor_config

        if lm.linkflap_initial_backoff_ms < 0:
            raise OutOfRangeError(
                f"linkflap_initial_backoff_ms ({lm.linkflap_initial_backoff_ms}) "
                f"should be >= 0"
            )
        if lm.linkflap_max_backoff_ms < 0:
            raise OutOfRangeError(
                f"linkflap_max_backoff_ms ({lm.linkflap_max_backoff_ms}) should be >= 0"
            )
        if lm.linkflap_initial_backoff_ms > lm.linkflap_max_backoff_ms:
            raise OutOfRangeError(
                f"linkflap_initial_backoff_ms ({lm.linkflap_initial_backoff_ms}) "
                f"should be <= linkflap_max_backoff_ms ({lm.linkflap_max_backoff_ms})"
            )

        return InterfaceMatchers(
            include=_compile_optional(
                lm.include_interface_regexes, "include_interface_regexes"
            ),
            exclude=_compile_optional(
                lm.exclude_interface_regexes, "exclude_interface_regexes"
            ),
            redistribute=_compile_optional(
                lm.redistribute_interface_regexes, "redistribute_interface_regexes"
            ),
        )

    def _check_prefix_allocation(
        self,
        document: OpenrConfig
    ) -> Optional[PrefixAllocationParams]:
        """Apply the mode-specific prefix allocation rules."""
        if not document.enable_prefix_allocation:
            return None

        pa_config = document.prefix_allocation_config
        if pa_config is None:
            raise InvalidArgumentError(
                "enable_prefix_allocation = true, but prefix_allocation_config is empty"
            )

        seed_prefix = pa_config.seed_prefix or ""
        allocate_len = pa_config.allocate_prefix_len or 0

        if pa_config.prefix_allocation_mode == PrefixAllocationMode.DYNAMIC_ROOT_NODE:
            params = compute_allocation_params(seed_prefix, allocate_len)
            if params.is_v4 and not document.enable_v4:
                raise InvalidArgumentError(
                    "v4 seed_prefix detected, but enable_v4 = false"
                )
            logger.info(f"Prefix allocation: {params}")
            return params

        # DYNAMIC_LEAF_NODE and STATIC receive their prefixes from elsewhere
        if seed_prefix or allocate_len > 0:
            raise InvalidArgumentError(
                f"prefix_allocation_mode != DYNAMIC_ROOT_NODE "
                f"({pa_config.prefix_allocation_mode.name}), seed_prefix and "
                f"allocate_prefix_len must be empty"
            )
        return None

    def _check_bgp(self, document: OpenrConfig) -> OpenrConfig:
        """Validate BGP peering. May return a defaulted copy of the document."""
        if not document.enable_bgp_peering:
            return document

        if document.bgp_config is None:
            raise InvalidArgumentError(
                "enable_bgp_peering = true, but bgp_config is empty"
            )

        if document.bgp_translation_config is None:
            # Transitional compatibility: older deployments omit the
            # translation section. Remove once all of them set it explicitly.
            logger.warning(
                "enable_bgp_peering = true, but bgp_translation_config is empty; "
                "using default translation config"
            )
            document = dataclasses.replace(document, bgp_translation_config={})

        return document

    def _check_watchdog(self, document: OpenrConfig) -> None:
        if document.enable_watchdog and document.watchdog_config is None:
            raise InvalidArgumentError(
                "enable_watchdog = true, but watchdog_config is empty"
            )


def _require_positive(name: str, value: int) -> None:
    if value <= 0:
        raise OutOfRangeError(f"{name} ({value}) should be > 0")


def _compile_optional(patterns: tuple[str, ...], owner: str) -> PatternMatcherSet:
    """Link-monitor interface patterns match letter case exactly."""
    if not patterns:
        return EMPTY_MATCHER
    return PatternMatcherSet.compile(patterns, owner, case_sensitive=True)
