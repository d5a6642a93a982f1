"""
Expected-set tracking tests

Tests that every parser's expectation is derived structurally from the
way it was built, without running it, and that the context keeps the
furthest failure.
"""

import pytest

from prefixparse.lib.matchers import DIGITS, WHITESPACE, Literal, MatchMany
from prefixparse.lib.parser import (
    Deferred,
    Parser,
    either,
    one_of,
    one_or_more,
    optional,
    sequence,
    token,
    zero_or_more,
)
from prefixparse.lib.whitespace import skipping_whitespace, with_whitespace
from prefixparse.models import Failed, ParseContext, View


a, b, c = Literal("a"), Literal("b"), Literal("c")


def exploding(view, context):
    raise AssertionError("expectations must not run the parser")


class TestStructuralDerivation:
    """Test expectation composition rules"""

    def test_primitive(self):
        assert token(a).expected_prefixes == (a,)
        assert token(a).expected_whitespace == ()

    def test_sequence_uses_first_operand(self):
        assert sequence(a, b, c).expected_prefixes == (a,)

    def test_either_unions_in_order(self):
        assert either(b, a, b).expected_prefixes == (b, a)

    def test_one_of(self):
        assert one_of(a, b).expected_prefixes == (a, b)

    def test_optional_and_repetition_use_inner(self):
        inner = either(a, b)
        assert optional(inner).expected_prefixes == (a, b)
        assert zero_or_more(inner).expected_prefixes == (a, b)
        assert one_or_more(inner).expected_prefixes == (a, b)

    def test_map_keeps_expectation(self):
        assert token(a).map(len).expected_prefixes == (a,)

    def test_derivation_never_runs_parser(self):
        """Composite expectations come from structure alone"""
        leaf = Parser(exploding, lambda: token(c).expectation)
        parser = either(sequence(leaf, a), optional(b))
        assert parser.expected_prefixes == (c, b)


class TestWhitespaceExpectation:
    """Test static tracking of permitted whitespace"""

    def test_skipping_marks_ambient(self):
        expectation = skipping_whitespace(a).expectation
        assert expectation.ambient_whitespace
        assert expectation.whitespace == ()

    def test_with_whitespace_resolves_ambient(self):
        expectation = with_whitespace(skipping_whitespace(a), WHITESPACE).expectation
        assert not expectation.ambient_whitespace
        assert expectation.whitespace == (MatchMany(WHITESPACE),)

    def test_no_whitespace_permitted(self):
        """A disabled policy resolves to an empty whitespace set"""
        expectation = with_whitespace(skipping_whitespace(a), None).expectation
        assert not expectation.ambient_whitespace
        assert expectation.whitespace == ()

    def test_non_skipping_parser_unaffected(self):
        expectation = with_whitespace(token(a), WHITESPACE).expectation
        assert expectation.whitespace == ()


class TestRecursiveDerivation:
    """Test derivation over self-referential grammars"""

    def test_cycle_contributes_nothing(self):
        this = Deferred()
        head = sequence(this, "!")
        target = either(head, token(a))
        this.resolve(target)
        assert target.expected_prefixes == (a,)

    def test_inner_parser_sees_full_cycle(self):
        """A parser cut short by the cycle is not cached with the cut result"""
        this = Deferred()
        head = sequence(this, "!")
        target = either(head, token(a))
        this.resolve(target)
        assert target.expected_prefixes == (a,)
        assert head.expected_prefixes == (a,)
        assert this.expected_prefixes == (a,)

    def test_unresolved_deferred_is_empty(self):
        assert Deferred().expected_prefixes == ()

    def test_failed_derivation_leaves_no_cycle_flag(self):
        """A derive callable that raises does not poison later derivations"""
        def derive():
            broken.expectation
            raise ValueError("bad grammar")

        broken = Parser(exploding, derive)
        with pytest.raises(ValueError):
            broken.expectation
        assert Parser._cycle_hit is False
        assert Parser._derivation_depth == 0

        head = sequence(b, c)
        assert either(head, a).expected_prefixes == (b, a)
        assert head._expectation is not None


class TestFailureStamping:
    """Test the expected sets carried by Failed values"""

    def test_failure_at_entry_uses_static_set(self):
        result = either(a, b).parse(View.of("z"), ParseContext(verbosity=0))
        assert isinstance(result, Failed)
        assert result.expected == (a, b)

    def test_failure_inside_keeps_inner_set(self):
        result = sequence(a, b).parse(View.of("az"), ParseContext(verbosity=0))
        assert result.at.start == 1
        assert result.expected == (b,)

    def test_ambient_whitespace_resolved_at_failure(self):
        policy = token(MatchMany(WHITESPACE))
        context = ParseContext(whitespace=policy, verbosity=0)
        result = skipping_whitespace(a).parse(View.of("z"), context)
        assert result.expected_whitespace == (MatchMany(WHITESPACE),)


class TestFurthestFailure:
    """Test ParseContext furthest-failure bookkeeping"""

    def test_deeper_failure_wins(self):
        context = ParseContext(verbosity=0)
        parser = either(sequence(a, b, c), sequence(a, "x"))
        parser.parse(View.of("abz"), context)
        assert context.furthest.offset == 2
        assert context.furthest.expected == (c,)

    def test_same_offset_merges(self):
        context = ParseContext(verbosity=0)
        either(sequence(a, b), sequence(a, c)).parse(View.of("az"), context)
        assert context.furthest.offset == 1
        assert context.furthest.expected == (b, c)

    def test_failure_swallowed_by_repetition_still_recorded(self):
        digits = token(MatchMany(DIGITS))
        context = ParseContext(verbosity=0)
        parser = zero_or_more(sequence("+", digits))
        result = parser.parse(View.of("+"), context)
        assert result.value == []
        assert context.furthest.offset == 1
        assert context.furthest.expected == (MatchMany(DIGITS),)

    def test_reset(self):
        context = ParseContext(verbosity=0)
        token(a).parse(View.of("z"), context)
        assert context.furthest is not None
        context.reset()
        assert context.furthest is None
