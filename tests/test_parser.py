"""Tests for the document parser."""
import logging

import pytest

from linkstate_config.errors import ParseError
from linkstate_config.parser import DocumentParser
from linkstate_config.schema import (
    PrefixAllocationMode,
    PrefixForwardingAlgorithm,
    PrefixForwardingType,
    SparkConfig,
)


class TestDocumentParser:
    """Tests for DocumentParser."""

    def test_parse_empty_document(self):
        """Empty document gets all schema defaults."""
        doc = DocumentParser().parse({})

        assert doc.node_name == ""
        assert doc.areas == ()
        assert doc.spark_config == SparkConfig()
        assert doc.kvstore_config.flood_rate is None
        assert doc.prefix_allocation_config is None
        assert doc.bgp_config is None
        assert not doc.enable_v4

    def test_parse_full_document(self, base_document):
        doc = DocumentParser().parse(base_document)

        assert doc.node_name == "node-1"
        assert len(doc.areas) == 1
        area = doc.areas[0]
        assert area.area_id == "spine"
        assert area.neighbor_regexes == ("fsw.*",)
        assert area.interface_regexes == ("eth.*", "po[0-9]+")
        assert doc.kvstore_config.flood_rate.flood_msg_per_sec == 100
        assert doc.spark_config.step_detector_conf.upper_threshold == 5
        assert doc.link_monitor_config.exclude_interface_regexes == ("eth99",)

    def test_partial_section_keeps_defaults(self):
        doc = DocumentParser().parse({"spark_config": {"hello_time_s": 5}})

        assert doc.spark_config.hello_time_s == 5
        assert doc.spark_config.keepalive_time_s == 2
        assert doc.spark_config.step_detector_conf.slow_window_size == 60

    def test_enum_by_value_and_name(self):
        doc = DocumentParser().parse({
            "prefix_forwarding_type": "SR_MPLS",
            "prefix_forwarding_algorithm": 1,
            "prefix_allocation_config": {"prefix_allocation_mode": "dynamic_root_node"},
        })

        assert doc.prefix_forwarding_type == PrefixForwardingType.SR_MPLS
        assert doc.prefix_forwarding_algorithm == PrefixForwardingAlgorithm.KSP2_ED_ECMP
        assert (doc.prefix_allocation_config.prefix_allocation_mode ==
                PrefixAllocationMode.DYNAMIC_ROOT_NODE)

    def test_invalid_enum_raises(self):
        with pytest.raises(ParseError) as exc:
            DocumentParser().parse({"prefix_forwarding_type": 7})
        assert "prefix_forwarding_type" in str(exc.value)

    def test_non_mapping_document_raises(self):
        with pytest.raises(ParseError):
            DocumentParser().parse(["not", "a", "mapping"])

    def test_wrong_int_type_raises(self):
        """Field path is reported in the error."""
        with pytest.raises(ParseError) as exc:
            DocumentParser().parse({"spark_config": {"hello_time_s": "20"}})

        assert exc.value.path == "spark_config.hello_time_s"

    def test_bool_is_not_an_int(self):
        with pytest.raises(ParseError):
            DocumentParser().parse({"monitor_config": {"max_event_log": True}})

    def test_wrong_bool_type_raises(self):
        with pytest.raises(ParseError):
            DocumentParser().parse({"enable_v4": "yes"})

    def test_areas_must_be_list(self):
        with pytest.raises(ParseError):
            DocumentParser().parse({"areas": {"area_id": "0"}})

    def test_area_requires_id(self):
        with pytest.raises(ParseError) as exc:
            DocumentParser().parse({"areas": [{"neighbor_regexes": [".*"]}]})
        assert "areas[0]" in str(exc.value)

    def test_regexes_must_be_strings(self):
        with pytest.raises(ParseError):
            DocumentParser().parse({
                "areas": [{"area_id": "0", "neighbor_regexes": [1, 2]}]
            })

    def test_single_string_regex_rejected(self):
        with pytest.raises(ParseError) as exc:
            DocumentParser().parse({
                "areas": [{"area_id": "0", "interface_regexes": "eth.*"}]
            })
        assert exc.value.path == "areas[0].interface_regexes"

    def test_flood_rate_requires_both_fields(self):
        with pytest.raises(ParseError):
            DocumentParser().parse({
                "kvstore_config": {"flood_rate": {"flood_msg_per_sec": 10}}
            })

    def test_bgp_sections_pass_through(self):
        doc = DocumentParser().parse({
            "bgp_config": {"local_as": 65000, "peers": []},
        })

        assert doc.bgp_config == {"local_as": 65000, "peers": []}
        assert doc.bgp_translation_config is None

    def test_bgp_config_must_be_mapping(self):
        with pytest.raises(ParseError):
            DocumentParser().parse({"bgp_config": "65000"})

    def test_unknown_keys_are_ignored_with_warning(self, caplog):
        with caplog.at_level(logging.WARNING, logger="linkstate_config.parser"):
            doc = DocumentParser().parse({"node_name": "n", "bogus_field": 1})

        assert doc.node_name == "n"
        assert "bogus_field" in caplog.text

    def test_parsed_document_is_immutable(self, base_document):
        doc = DocumentParser().parse(base_document)
        with pytest.raises(AttributeError):
            doc.node_name = "other"
