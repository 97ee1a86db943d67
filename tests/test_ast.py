import json

import pytest
from hypothesis import given
from hypothesis import strategies as st

from bases.bases_ast import Control, Node, Rule, Stop, Terminal
from bases.bases_constants import MAX_ARITY
from bases.bases_operator import Operator, OperatorTable, Role
from bases.bases_symbol import Symbol, SymbolKind

TABLE = OperatorTable.default()


def op(kind: SymbolKind, role: str = "infix"):  # type: ignore[no-untyped-def]
    found = getattr(TABLE, role)(kind)
    assert found is not None
    return found


def ident(name: str, offset: int = 0) -> Terminal:
    return Terminal(Symbol.identifier(name, offset))


def test_leaf_renderings() -> None:
    assert Terminal(Symbol.literal(SymbolKind.STRING, '"foo"')).render() == '"foo"'
    assert Control(Symbol.keyword(SymbolKind.BREAK)).render() == "break"
    assert Stop(Symbol.eof(3)).render() == "EOF"
    assert Stop(Symbol.illegal("@", 1)).render() == "@"


def test_rule_render_binary() -> None:
    tree = Rule(
        op(SymbolKind.ADD),
        [
            Terminal(Symbol.literal(SymbolKind.INT, "1", 0)),
            Rule(
                op(SymbolKind.MUL),
                [
                    Terminal(Symbol.literal(SymbolKind.INT, "2", 4)),
                    Terminal(Symbol.literal(SymbolKind.INT, "3", 8)),
                ],
                6,
            ),
        ],
        2,
    )
    assert tree.render() == "(+ 1 (* 2 3))"
    assert str(tree) == "(+ 1 (* 2 3))"
    assert tree.to_source() == "(1 + (2 * 3))"


def test_rule_render_unary() -> None:
    neg = Rule(op(SymbolKind.SUB, "prefix"), [ident("x", 1)], 0)
    inc = Rule(op(SymbolKind.INC, "postfix"), [ident("y")], 1)
    assert neg.render() == "(- x)"
    assert neg.to_source() == "(- x)"
    assert inc.render() == "(++ y)"
    assert inc.to_source() == "(y ++)"


def test_rule_enforces_arity() -> None:
    with pytest.raises(ValueError, match="takes 2 operand"):
        Rule(op(SymbolKind.ADD), [ident("a")])
    with pytest.raises(ValueError, match="takes 1 operand"):
        Rule(op(SymbolKind.NOT, "prefix"), [ident("a"), ident("b")])
    with pytest.raises(ValueError):
        Rule(op(SymbolKind.INC, "postfix"), [])


def test_rule_rejects_unbound_operator() -> None:
    with pytest.raises(ValueError, match=f"expected 1 to {MAX_ARITY}"):
        Rule(Operator(SymbolKind.ADD), [])
    assert max(o.arity for o in TABLE.operators(Role.INFIX)) == MAX_ARITY


def test_children_are_immutable() -> None:
    rule = Rule(op(SymbolKind.MUL), [ident("a"), ident("b")])
    assert isinstance(rule.children, tuple)
    assert Terminal(Symbol.identifier("a")).children == ()


def test_equality() -> None:
    a = Rule(op(SymbolKind.SUB), [ident("a"), ident("b", 4)], 2)
    b = Rule(op(SymbolKind.SUB), [ident("a"), ident("b", 4)], 2)
    c = Rule(op(SymbolKind.SUB), [ident("a"), ident("c", 4)], 2)
    assert a == b
    assert hash(a) == hash(b)
    assert a != c
    assert a != "(- a b)"
    assert Terminal(Symbol.eof()) != Stop(Symbol.eof())
    assert Stop(Symbol.eof()) == Stop(Symbol.eof())


def test_repr() -> None:
    rule = Rule(op(SymbolKind.MUL), [ident("a"), ident("b", 4)])
    assert repr(ident("a")) == "Terminal(Symbol(IDENT, 'a', 0))"
    assert repr(rule) == (
        "Rule('*', [Terminal(Symbol(IDENT, 'a', 0)), Terminal(Symbol(IDENT, 'b', 4))])"
    )


def test_to_dict() -> None:
    rule = Rule(op(SymbolKind.QUO), [ident("a", 0), Stop(Symbol.eof(4))], 2)
    d = rule.to_dict()
    assert d["kind"] == "rule"
    assert d["value"] == "/"
    assert d["symbol"] == "QUO"
    assert d["offset"] == 2
    assert [c["kind"] for c in d["children"]] == ["terminal", "stop"]
    assert d["children"][1]["value"] == "EOF"
    assert json.loads(json.dumps(d)) == d


def test_walk_and_degraded() -> None:
    clean = Rule(op(SymbolKind.ADD), [ident("a"), ident("b")])
    assert [n.render() for n in clean.walk()] == ["(+ a b)", "a", "b"]
    assert not clean.is_degraded()
    degraded = Rule(op(SymbolKind.ADD), [ident("a"), Control(Symbol.keyword(SymbolKind.IF))])
    assert degraded.is_degraded()
    assert Stop(Symbol.eof()).is_degraded()


def test_offsets() -> None:
    assert ident("q", 7).offset == 7
    assert Rule(op(SymbolKind.ADD), [ident("a"), ident("b")], 3).offset == 3


def test_base_node_is_abstract() -> None:
    node = Node()
    with pytest.raises(NotImplementedError):
        node.render()
    with pytest.raises(NotImplementedError):
        node.to_source()
    with pytest.raises(NotImplementedError):
        node.to_dict()
    with pytest.raises(NotImplementedError):
        _ = node.offset


@given(st.lists(st.sampled_from(["a", "b", "c"]), min_size=1, max_size=8))  # type: ignore[misc]
def test_left_chain_render(names: list[str]) -> None:
    tree: Node = ident(names[0])
    expected = names[0]
    for name in names[1:]:
        tree = Rule(op(SymbolKind.SUB), [tree, ident(name)])
        expected = f"(- {expected} {name})"
    assert tree.render() == expected
