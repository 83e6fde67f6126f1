"""
Unit Tests - Lexical Scoring

Tests for the tokenizer and weighted field-match scorer.
"""

from supportbot.core.types import Article
from supportbot.knowledge.lexical import LexicalScorer, tokenize


def make_article(id: str, title: str, content: str = "", **kwargs) -> Article:
    return Article(
        id=id,
        url=kwargs.pop("url", f"https://moraware.com/kb/{id}"),
        title=title,
        content=content,
        **kwargs,
    )


class TestTokenize:
    """Tests for query tokenization."""

    def test_lowercases_and_drops_short_tokens(self):
        """Test tokens are lower-cased and 1-2 character tokens dropped."""
        assert tokenize("How do I Print a Quote") == ["how", "print", "quote"]

    def test_only_short_tokens(self):
        """Test a query of short words yields no tokens."""
        assert tokenize("a an to of") == []

    def test_blank_query(self):
        """Test blank input."""
        assert tokenize("   ") == []


class TestLexicalScorer:
    """Tests for LexicalScorer."""

    def test_ranking_by_weighted_matches(self, sample_articles):
        """Test title, action and content weights produce the expected order."""
        scorer = LexicalScorer()

        results = scorer.score("print quote", sample_articles)

        assert [r.article.id for r in results] == ["1", "4", "3"]
        # print: title 20 + action 30 + content 3; quote: title 20 + action 30 + content 3
        assert results[0].score == 106
        assert results[1].score == 50
        assert results[2].score == 1

    def test_zero_scores_excluded(self, sample_articles):
        """Test articles without any match are not returned."""
        results = LexicalScorer().score("print quote", sample_articles)

        assert "2" not in [r.article.id for r in results]

    def test_query_equal_to_title_ranks_first(self, sample_articles):
        """Test a query identical to a title puts that article first."""
        results = LexicalScorer().score("Track Slabs", sample_articles)

        assert results[0].article.id == "3"
        assert results[0].score == 150

    def test_exact_title_bonus_applied_once(self):
        """Test a single-word title equal to a query token gets one +50."""
        article = make_article("a", "Labels")

        results = LexicalScorer().score("labels labels", [article])

        # +50 once, then title + action for each of the two tokens
        assert results[0].score == 50 + 2 * (20 + 30)

    def test_product_token_gets_no_action_bonus(self):
        """Test a product keyword in the title scores without the +30."""
        basics = make_article("a", "Inventory Basics")
        exact = make_article("b", "Inventory")

        results = LexicalScorer().score("inventory", [basics, exact])

        scores = {r.article.id: r.score for r in results}
        assert scores["a"] == 20
        assert scores["b"] == 70

    def test_content_matches_capped(self):
        """Test whole-word content matches contribute at most 10."""
        article = make_article("a", "Remnants", content="slab " * 15)

        results = LexicalScorer().score("slab", [article])

        assert results[0].score == 10

    def test_content_matches_whole_words_only(self):
        """Test partial words in content do not count."""
        article = make_article("a", "Forms", content="printed printer reprint")

        assert LexicalScorer().score("print", [article]) == []

    def test_ties_keep_kb_order(self):
        """Test equal scores keep their original order."""
        articles = [make_article(str(i), f"Quote {i}") for i in range(5)]

        results = LexicalScorer().score("quote", articles)

        assert [r.article.id for r in results] == ["0", "1", "2", "3", "4"]
        assert len({r.score for r in results}) == 1

    def test_max_results_truncates(self, sample_articles):
        """Test results are capped."""
        results = LexicalScorer().score("print quote", sample_articles, max_results=2)

        assert [r.article.id for r in results] == ["1", "4"]

    def test_default_max_results(self):
        """Test the constructor cap applies when no override is given."""
        articles = [make_article(str(i), f"Quote {i}") for i in range(20)]

        assert len(LexicalScorer(max_results=3).score("quote", articles)) == 3

    def test_product_filter_restricts_candidates(self, sample_articles):
        """Test only articles in the product scope are scored."""
        results = LexicalScorer().score("print", sample_articles, product_filter="systemize")

        assert [r.article.id for r in results] == ["4"]

    def test_product_filter_with_no_matching_articles(self, sample_articles):
        """Test an empty scoped set stays empty instead of widening."""
        articles = [a for a in sample_articles if "countergo" not in a.url]

        assert LexicalScorer().score("print quote", articles, product_filter="countergo") == []

    def test_no_tokens_returns_empty(self, sample_articles):
        """Test a query with no usable tokens."""
        assert LexicalScorer().score("a to", sample_articles) == []

    def test_deterministic(self, sample_articles):
        """Test repeated scoring gives identical output."""
        scorer = LexicalScorer()

        first = scorer.score("print job slab", sample_articles)
        second = scorer.score("print job slab", sample_articles)

        assert first == second
