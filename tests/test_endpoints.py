"""
Tests for endpoint resolution

Covers delimiter handling, positional dashboard pairing and blank slots.
"""

from hygieia_publisher.endpoints import Endpoint, resolve_endpoints, split_delimited


class TestSplitDelimited:
    """Test delimited string splitting"""

    def test_empty_and_none_give_no_slots(self):
        assert split_delimited("") == []
        assert split_delimited(None) == []
        assert split_delimited("   ") == []

    def test_slots_are_trimmed_and_blanks_kept(self):
        assert split_delimited(" a , ,b ") == ["a", "", "b"]

    def test_custom_separator(self):
        assert split_delimited("a;b", separator=";") == ["a", "b"]


class TestResolveEndpoints:
    """Test API / dashboard URL pairing"""

    def test_pairs_by_position(self):
        endpoints = resolve_endpoints("http://a/api,http://b/api", "http://a/dash,http://b/dash")

        assert endpoints == [
            Endpoint(service_url="http://a/api", dashboard_url="http://a/dash", index=0),
            Endpoint(service_url="http://b/api", dashboard_url="http://b/dash", index=1),
        ]

    def test_blank_dashboard_slot_gives_no_dashboard(self):
        endpoints = resolve_endpoints("http://a/api,http://b/api", "http://a/dash,")

        assert endpoints[0].dashboard_url == "http://a/dash"
        assert endpoints[1].dashboard_url is None

    def test_fewer_dashboards_than_endpoints(self):
        endpoints = resolve_endpoints("http://a/api,http://b/api,http://c/api", "http://a/dash")

        assert [e.dashboard_url for e in endpoints] == ["http://a/dash", None, None]

    def test_blank_service_slot_is_skipped_but_keeps_pairing(self):
        """A blank API slot is dropped without shifting later dashboards"""
        endpoints = resolve_endpoints("http://a/api,,http://c/api", "x,y,z")

        assert [(e.service_url, e.dashboard_url, e.index) for e in endpoints] == [
            ("http://a/api", "x", 0),
            ("http://c/api", "z", 2),
        ]

    def test_display_number_is_one_based(self):
        endpoints = resolve_endpoints(",http://b/api", "")

        assert endpoints[0].display_number == 2

    def test_nothing_configured(self):
        assert resolve_endpoints("", "http://a/dash") == []
        assert resolve_endpoints(None, None) == []

    def test_order_is_preserved(self):
        endpoints = resolve_endpoints("http://z/api, http://a/api ,http://m/api", None)

        assert [e.service_url for e in endpoints] == ["http://z/api", "http://a/api", "http://m/api"]
