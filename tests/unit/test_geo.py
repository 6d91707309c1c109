"""
Unit tests for Geographic Normalizer

Tests region code, name and fuzzy lookups.
"""
import pytest

from src.utils.geo import CODE_TO_REGION_NAME, US_STATES, normalize_region, region_name


class TestNormalizeRegion:
    """Test normalize_region function"""

    @pytest.mark.parametrize("value,expected", [("CA", "CA"), ("ca", "CA"), (" tx ", "TX")])
    def test_two_letter_codes(self, value, expected):
        """Test 2-letter codes are uppercased"""
        assert normalize_region(value) == expected

    @pytest.mark.parametrize("value,expected", [
        ("California", "CA"),
        ("NEW YORK", "NY"),
        ("  new   york ", "NY"),
        ("District of Columbia", "DC"),
        ("Virginia", "VA"),
        ("Ontario", "ON"),
    ])
    def test_full_names(self, value, expected):
        assert normalize_region(value) == expected

    def test_contained_name_prefers_longest(self):
        """Test 'State of West Virginia' is WV, not VA"""
        assert normalize_region("State of West Virginia") == "WV"
        assert normalize_region("State of Arkansas") == "AR"
        assert normalize_region("Texas Panhandle") == "TX"

    def test_fragment_matches_enclosing_name(self):
        """Test partial names resolve to the enclosing region name"""
        assert normalize_region("Dakota") == "ND"
        assert normalize_region("Hampshire") == "NH"

    @pytest.mark.parametrize("value", [None, "", "   ", "Atlantis", "12345", "n."])
    def test_unplaceable(self, value):
        """Test values that cannot be placed return None"""
        assert normalize_region(value) is None

    def test_all_states_round_trip(self):
        """Test every state name resolves to its own code"""
        for name, code in US_STATES.items():
            assert normalize_region(name.upper()) == code


class TestRegionName:
    """Test region_name function"""

    def test_known_codes(self):
        assert region_name("ca") == "California"
        assert region_name("DC") == "District of Columbia"
        assert region_name("NL") == "Newfoundland and Labrador"

    def test_unknown_code(self):
        assert region_name("zz") == "ZZ"
        assert region_name("") == ""

    def test_table_covers_states_and_dc(self):
        assert len(US_STATES) == 51
        assert set(US_STATES.values()) <= set(CODE_TO_REGION_NAME)
