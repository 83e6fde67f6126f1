"""
Unit Tests - Product Scope Detection
"""

from supportbot.knowledge.products import detect_product_filter, matches_product


class TestDetectProductFilter:
    """Tests for detect_product_filter."""

    def test_detects_keyword(self):
        """Test a product name in the query is detected."""
        assert detect_product_filter("How do I add slabs in Inventory?") == "inventory"

    def test_first_keyword_in_order_wins(self):
        """Test keyword order decides between two products."""
        assert detect_product_filter("countergo quote vs systemize job") == "systemize"

    def test_substring_match(self):
        """Test keywords match as substrings."""
        assert detect_product_filter("CounterGo's quote screen") == "countergo"

    def test_no_product(self):
        """Test queries without a product name."""
        assert detect_product_filter("How do I print?") is None

    def test_custom_keywords(self):
        """Test configured keyword lists."""
        assert detect_product_filter("laser template", keywords=["laser"]) == "laser"


class TestMatchesProduct:
    """Tests for matches_product."""

    def test_matches_url(self):
        """Test a match on the URL."""
        assert matches_product("https://moraware.com/systemize/jobs", "", "systemize")

    def test_matches_category_case_insensitive(self):
        """Test a case-insensitive match on the category."""
        assert matches_product("https://moraware.com/kb/1", "CounterGo", "countergo")

    def test_no_match(self):
        """Test an article outside the scope."""
        assert not matches_product("https://moraware.com/kb/1", "Inventory", "countergo")
