"""
Whitespace scoping tests

Tests opt-in whitespace skipping and the save-override-restore discipline
of with_whitespace().
"""

import pytest

from prefixparse.lib.matchers import DIGITS, LETTERS, WHITESPACE, MatchMany
from prefixparse.lib.parser import Parser, either, sequence, token
from prefixparse.lib.whitespace import (
    one_or_more_skipping,
    separated,
    sequence_skipping,
    skipping_trailing_whitespace,
    skipping_whitespace,
    whitespace_policy,
    with_whitespace,
    zero_or_more_skipping,
)
from prefixparse.models import Failed, ParseContext, Parsed, View


SPACES = whitespace_policy(WHITESPACE)
number = token(MatchMany(DIGITS), int)
word = token(MatchMany(LETTERS))


def run(parser, text, whitespace=SPACES):
    return parser.parse(View.of(text), ParseContext(whitespace=whitespace, verbosity=0))


class TestSkipping:
    """Test the whitespace-aware combinator variants"""

    def test_sequence_skipping(self):
        result = run(sequence_skipping(number, "+", number), "1 +\n 2")
        assert result.value == (1, "+", 2)
        assert result.rest.is_empty

    def test_plain_sequence_does_not_skip(self):
        """Whitespace skipping is opt-in even when a policy is active"""
        assert isinstance(run(sequence(number, "+"), "1 +"), Failed)

    def test_sequence_skipping_leading_whitespace_not_skipped(self):
        """Only gaps between operands are skipped"""
        assert isinstance(run(sequence_skipping(number, number), " 1 2"), Failed)

    def test_skipping_whitespace(self):
        result = run(skipping_whitespace(number), "   7")
        assert result.value == 7

    def test_skipping_with_no_policy(self):
        assert isinstance(run(skipping_whitespace(number), " 7", whitespace=None), Failed)

    def test_skipping_trailing_whitespace(self):
        result = run(skipping_trailing_whitespace(number), "7  x")
        assert result.value == 7
        assert result.rest.text == "x"

    def test_repetition_skips_between_items(self):
        result = run(one_or_more_skipping(word), "alpha beta\tgamma")
        assert result.value == ["alpha", "beta", "gamma"]

    def test_repetition_gives_back_trailing_whitespace(self):
        """Whitespace before a failed attempt is not consumed"""
        result = run(zero_or_more_skipping(word), "alpha beta  1")
        assert result.value == ["alpha", "beta"]
        assert result.rest.text == "  1"

    def test_repetition_first_item_not_skipped(self):
        result = run(zero_or_more_skipping(word), " alpha")
        assert result.value == []

    def test_separated(self):
        result = run(separated(number, ","), "1 , 2,3 ;")
        assert result.value == [1, 2, 3]
        assert result.rest.text == " ;"

    def test_methods(self):
        assert run(number.then_skipping("+"), "1 +").value == (1, "+")
        assert run(number.skipping_whitespace(), " 1").value == 1


class TestScopedOverride:
    """Test that with_whitespace() installs and restores policies"""

    def test_disable_inside_subgrammar(self):
        """A string literal rule keeps its interior spaces"""
        quoted = with_whitespace(sequence_skipping('"', word, '"'), None)
        assert isinstance(run(quoted, '" ab"'), Failed)
        assert run(quoted, '"ab"').value == ('"', "ab", '"')

    def test_install_policy(self):
        parser = with_whitespace(sequence_skipping(number, number), WHITESPACE)
        assert run(parser, "1 2", whitespace=None).value == (1, 2)

    def test_matcher_and_string_policies(self):
        dashes = with_whitespace(sequence_skipping(number, number), "-")
        assert run(dashes, "1-2", whitespace=None).value == (1, 2)

    def test_policy_restored_after_success(self):
        context = ParseContext(whitespace=SPACES, verbosity=0)
        with_whitespace(number, None).parse(View.of("1"), context)
        assert context.whitespace is SPACES

    def test_policy_restored_after_failure(self):
        context = ParseContext(whitespace=SPACES, verbosity=0)
        result = with_whitespace(number, None).parse(View.of("x"), context)
        assert isinstance(result, Failed)
        assert context.whitespace is SPACES

    def test_policy_restored_after_exception(self):
        """Restoration also happens when a transform raises"""
        context = ParseContext(whitespace=SPACES, verbosity=0)

        def boom(_):
            raise KeyError("boom")

        with pytest.raises(KeyError):
            with_whitespace(number.map(boom), None).parse(View.of("1"), context)
        assert context.whitespace is SPACES

    def test_policy_visible_inside(self):
        """The subtree sees the installed policy"""
        seen = []

        def spy(view, context):
            seen.append(context.whitespace)
            return Parsed(None, view)

        dashes = whitespace_policy("-")
        context = ParseContext(whitespace=SPACES, verbosity=0)
        with_whitespace(Parser(spy), dashes).parse(View.of(""), context)
        assert seen == [dashes]

    def test_nested_overrides(self):
        inner = with_whitespace(sequence_skipping(word, "!"), None)
        outer = with_whitespace(sequence_skipping(number, inner), WHITESPACE)
        assert run(outer, "1 ab!", whitespace=None).value == (1, ("ab", "!"))
        assert isinstance(run(outer, "1 ab !", whitespace=None), Failed)


class TestContextSkip:
    """Test ParseContext.whitespace_skip()"""

    def test_no_policy_returns_view(self):
        view = View.of("  x")
        assert ParseContext().whitespace_skip(view) is view

    def test_skips_run(self):
        assert ParseContext(whitespace=SPACES).whitespace_skip(View.of(" \n x")).text == "x"

    def test_whitespace_failures_not_recorded(self):
        context = ParseContext(whitespace=SPACES, verbosity=0)
        context.whitespace_skip(View.of("x"))
        assert context.furthest is None

    def test_policy_that_fails_consumes_nothing(self):
        policy = whitespace_policy(either(" ", "\t"))
        view = View.of("x")
        assert ParseContext(whitespace=policy).whitespace_skip(view) == view
