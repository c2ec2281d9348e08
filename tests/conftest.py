"""Shared fixtures."""
import logging

import pytest


@pytest.fixture(autouse=True)
def reset_package_loggers():
    """Undo handlers installed by setup_logging() so caplog keeps working."""
    yield
    for name in ("linkstate_config", "linkstate.perf"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        logger.propagate = True
        logger.setLevel(logging.NOTSET)


@pytest.fixture
def base_document():
    """A complete, valid single-area document in decoded form."""
    return {
        "node_name": "node-1",
        "domain": "fabric",
        "areas": [
            {
                "area_id": "spine",
                "neighbor_regexes": ["fsw.*"],
                "interface_regexes": ["eth.*", "po[0-9]+"],
            }
        ],
        "enable_v4": True,
        "prefix_forwarding_type": 0,
        "prefix_forwarding_algorithm": 0,
        "kvstore_config": {
            "key_ttl_ms": 300000,
            "flood_rate": {"flood_msg_per_sec": 100, "flood_msg_burst_size": 20},
        },
        "spark_config": {
            "neighbor_discovery_port": 6666,
            "hello_time_s": 20,
            "fastinit_hello_time_ms": 500,
            "keepalive_time_s": 2,
            "hold_time_s": 10,
            "graceful_restart_time_s": 30,
            "step_detector_conf": {
                "fast_window_size": 10,
                "slow_window_size": 60,
                "lower_threshold": 2,
                "upper_threshold": 5,
            },
        },
        "monitor_config": {"max_event_log": 100},
        "link_monitor_config": {
            "linkflap_initial_backoff_ms": 1000,
            "linkflap_max_backoff_ms": 60000,
            "include_interface_regexes": ["eth.*", "po.*"],
            "exclude_interface_regexes": ["eth99"],
            "redistribute_interface_regexes": ["lo"],
        },
    }
