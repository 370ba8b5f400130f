import pytest

from intake.domain.headers.pattern import AliasList, SingleAlias, compile_pattern, to_alias_spec


def test_delimited_string_equals_explicit_list():
    from_string = compile_pattern({"key": "a|b|c"})
    from_list = compile_pattern({"key": ["a", "b", "c"]})
    assert from_string.aliases == from_list.aliases == {"key": frozenset({"a", "b", "c"})}


def test_candidates_are_normalized():
    compiled = compile_pattern({"orderNumber": "Order No|ORDER-ID", "weight": ["Weight", "Gross Weight"]})
    assert compiled.aliases["orderNumber"] == frozenset({"orderno", "orderid"})
    assert compiled.aliases["weight"] == frozenset({"weight", "grossweight"})


def test_canonical_key_order_is_preserved():
    compiled = compile_pattern({"z": "z", "a": "a", "m": ["m"]})
    assert compiled.keys() == ["z", "a", "m"]


def test_tokens_is_union_of_all_aliases():
    compiled = compile_pattern({"a": "x|y", "b": ["z"]})
    assert compiled.tokens == frozenset({"x", "y", "z"})


def test_empty_alternatives_are_dropped():
    compiled = compile_pattern({"a": "x||y|"})
    assert compiled.aliases["a"] == frozenset({"x", "y"})


def test_compile_is_noop_for_compiled_pattern():
    compiled = compile_pattern({"a": "x"})
    assert compile_pattern(compiled) is compiled


def test_alias_spec_variants():
    assert to_alias_spec("a|b") == SingleAlias("a|b")
    assert to_alias_spec(["a", "b"]) == AliasList(("a", "b"))
    spec = SingleAlias("a|b")
    assert to_alias_spec(spec) is spec
    assert compile_pattern({"k": AliasList(("A", "B"))}).aliases["k"] == frozenset({"a", "b"})


def test_non_string_alias_is_rejected():
    with pytest.raises(TypeError):
        to_alias_spec(["a", 1])
