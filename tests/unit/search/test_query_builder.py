"""Tests for the Solr query builder."""

from __future__ import annotations

import pytest

from libdiscover.recommend.authority import build_cross_reference_query
from libdiscover.search.query import Query, QueryGroup
from libdiscover.search.solr.query_builder import MATCH_ALL, QueryBuilder, escape_token

HEADING_SPECS = {
    "Heading": {
        "QueryFields": {
            "heading": [["onephrase", 500], ["and", 100]],
            "use_for": [["and", None]],
        },
    },
    "Scoped": {
        "QueryFields": {"heading": [["or", 10]]},
        "FilterQuery": "record_type:Heading",
    },
}


class TestQueryBuilderWithoutSpecs:
    def test_handler_used_as_field(self) -> None:
        params = QueryBuilder().build(Query(lookfor="Twain", handler="Heading"))
        assert params == {"q": "Heading:(Twain)"}

    def test_whitespace_collapsed(self) -> None:
        params = QueryBuilder().build(Query(lookfor="  Mark   Twain ", handler="Heading"))
        assert params["q"] == "Heading:(Mark Twain)"

    def test_empty_query_matches_all(self) -> None:
        assert QueryBuilder().build(Query(lookfor="")) == {"q": MATCH_ALL}
        assert QueryBuilder().build(QueryGroup()) == {"q": MATCH_ALL}

    def test_cross_reference_query(self) -> None:
        params = QueryBuilder().build(build_cross_reference_query("Twain"))
        assert params["q"] == "(Heading:(Twain)) AND NOT (MainHeading:(Twain))"

    def test_or_group(self) -> None:
        group = QueryGroup(
            operator="OR",
            queries=(Query(lookfor="solar", handler="Title"), Query(lookfor="wind", handler="Title")),
        )
        assert QueryBuilder().build(group)["q"] == "(Title:(solar) OR Title:(wind))"

    def test_not_group_with_several_clauses(self) -> None:
        group = QueryGroup(
            queries=(
                QueryGroup(operator="AND", queries=(Query(lookfor="a", handler="X"),)),
                QueryGroup(operator="NOT", queries=(Query(lookfor="b", handler="Y"), Query(lookfor="c", handler="Z"))),
            ),
        )
        assert QueryBuilder().build(group)["q"] == "(X:(a)) AND NOT (Y:(b) OR Z:(c))"

    def test_groups_joined_with_or(self) -> None:
        group = QueryGroup(
            join="OR",
            queries=(
                QueryGroup(queries=(Query(lookfor="a", handler="X"),)),
                QueryGroup(queries=(Query(lookfor="b", handler="Y"),)),
            ),
        )
        assert QueryBuilder().build(group)["q"] == "(X:(a)) OR (Y:(b))"


class TestQueryBuilderWithSpecs:
    def test_query_fields_expanded_and_boosted(self) -> None:
        params = QueryBuilder(HEADING_SPECS).build(Query(lookfor="Mark Twain", handler="Heading"))
        assert params["q"] == (
            '(heading:("Mark Twain")^500 OR heading:(Mark AND Twain)^100 OR use_for:(Mark AND Twain))'
        )

    def test_filter_query_anded(self) -> None:
        params = QueryBuilder(HEADING_SPECS).build(Query(lookfor="Mark Twain", handler="Scoped"))
        assert params["q"] == "(heading:(Mark OR Twain)^10 AND (record_type:Heading))"

    def test_phrase_quotes_escaped(self) -> None:
        params = QueryBuilder({"T": {"QueryFields": {"title": [["onephrase"]]}}}).build(
            Query(lookfor='say "hi"', handler="T")
        )
        assert params["q"] == 'title:("say \\"hi\\"")'

    def test_unknown_handler_skipped(self) -> None:
        specs = {"T": {"QueryFields": {"title": [["fuzzy", 5], ["exact", None]]}}}
        assert QueryBuilder(specs).build(Query(lookfor="x", handler="T"))["q"] == "title:(x)"

    def test_unspecified_handler_falls_back(self) -> None:
        assert QueryBuilder(HEADING_SPECS).build(Query(lookfor="x", handler="Other"))["q"] == "Other:(x)"

    def test_specs_property_is_copy_of_input(self) -> None:
        builder = QueryBuilder(HEADING_SPECS)
        assert builder.specs == HEADING_SPECS
        assert builder.specs is not HEADING_SPECS


# ── Escaping ─────────────────────────────────────────────────────────────────


class TestTermEscaping:
    @pytest.mark.parametrize(
        ("token", "expected"),
        [
            ("Twain:", "Twain\\:"),
            ("(1835", "\\(1835"),
            ("[a-z]", "\\[a\\-z\\]"),
            ("wild*?", "wild\\*\\?"),
            ("c++", "c\\+\\+"),
            ("&&", "\\&\\&"),
            ("||", "\\|\\|"),
            ("a/b", "a\\/b"),
            ("x^2~", "x\\^2\\~"),
            ("!", "\\!"),
            ("back\\slash", "back\\\\slash"),
            ("AND", "and"),
            ("NOT", "not"),
            ("Android", "Android"),
        ],
    )
    def test_escape_token(self, token: str, expected: str) -> None:
        assert escape_token(token) == expected

    def test_colon_in_term_without_specs(self) -> None:
        params = QueryBuilder().build(Query(lookfor="Twain: a life", handler="Heading"))
        assert params["q"] == "Heading:(Twain\\: a life)"

    def test_unbalanced_paren_in_cross_reference_query(self) -> None:
        q = QueryBuilder().build(build_cross_reference_query("Twain (Mark"))["q"]
        assert q == "(Heading:(Twain \\(Mark)) AND NOT (MainHeading:(Twain \\(Mark))"
        assert q.replace("\\(", "").count("(") == q.count(")")

    def test_and_handler_escapes_each_token(self) -> None:
        params = QueryBuilder(HEADING_SPECS).build(Query(lookfor="Twain: a life (1835", handler="Heading"))
        assert params["q"] == (
            '(heading:("Twain: a life (1835")^500'
            " OR heading:(Twain\\: AND a AND life AND \\(1835)^100"
            " OR use_for:(Twain\\: AND a AND life AND \\(1835))"
        )

    def test_boolean_keywords_searched_as_words(self) -> None:
        params = QueryBuilder(HEADING_SPECS).build(Query(lookfor="war AND peace", handler="Scoped"))
        assert params["q"] == "(heading:(war OR and OR peace)^10 AND (record_type:Heading))"

    def test_exact_handler_escapes(self) -> None:
        specs = {"T": {"QueryFields": {"title": [["exact", None]]}}}
        assert QueryBuilder(specs).build(Query(lookfor="a-b c", handler="T"))["q"] == "title:(a\\-b c)"
