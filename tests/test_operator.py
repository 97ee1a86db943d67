import pytest
from hypothesis import given
from hypothesis import strategies as st

from bases.bases_constants import MAX_OPERATORS
from bases.bases_operator import (
    UNBOUND,
    Assoc,
    BindingLevel,
    Operator,
    OperatorTable,
    Role,
    encode,
)
from bases.bases_symbol import SymbolKind

K = SymbolKind

# (precedence, assoc, kinds) exactly as the seed table defines them.
SEED = [
    (23, Assoc.UNARY_RIGHT, [K.LPAREN]),
    (22, Assoc.BINARY_RIGHT, [K.PERIOD]),
    (21, Assoc.UNARY_LEFT, [K.INC, K.DEC]),
    (20, Assoc.UNARY_RIGHT, [K.INC, K.DEC]),
    (19, Assoc.UNARY_RIGHT, [K.ADD, K.SUB]),
    (18, Assoc.UNARY_RIGHT, [K.NOT, K.TILDE]),
    (17, Assoc.BINARY_LEFT, [K.MUL, K.QUO, K.REM]),
    (16, Assoc.BINARY_LEFT, [K.ADD, K.SUB]),
    (15, Assoc.BINARY_LEFT, [K.SHL, K.SHR]),
    (14, Assoc.BINARY_LEFT, [K.LSS, K.GTR, K.LEQ, K.GEQ]),
    (13, Assoc.BINARY_LEFT, [K.EQL, K.NEQ]),
    (12, Assoc.BINARY_LEFT, [K.AND]),
    (11, Assoc.BINARY_LEFT, [K.AND_NOT]),
    (10, Assoc.BINARY_LEFT, [K.XOR]),
    (9, Assoc.BINARY_LEFT, [K.OR]),
    (8, Assoc.BINARY_LEFT, [K.LAND]),
    (7, Assoc.BINARY_LEFT, [K.LOR]),
    (6, Assoc.BINARY_RIGHT, [K.DEFINE, K.ASSIGN]),
    (5, Assoc.BINARY_RIGHT, [K.ADD_ASSIGN, K.SUB_ASSIGN]),
    (4, Assoc.BINARY_RIGHT, [K.MUL_ASSIGN, K.QUO_ASSIGN, K.REM_ASSIGN]),
    (3, Assoc.BINARY_RIGHT, [K.SHL_ASSIGN, K.SHR_ASSIGN]),
    (2, Assoc.BINARY_RIGHT, [K.AND_ASSIGN, K.AND_NOT_ASSIGN, K.XOR_ASSIGN, K.OR_ASSIGN]),
    (1, Assoc.BINARY_LEFT, [K.COMMA, K.SEMICOLON]),
]


def L(n: int) -> BindingLevel:
    return BindingLevel(n)


@pytest.mark.parametrize(
    "precedence,assoc,expected",
    [
        (1, Assoc.BINARY_LEFT, (L(1), L(2))),
        (16, Assoc.BINARY_LEFT, (L(31), L(32))),
        (6, Assoc.BINARY_RIGHT, (L(12), L(11))),
        (21, Assoc.UNARY_LEFT, (L(41), UNBOUND)),
        (23, Assoc.UNARY_RIGHT, (UNBOUND, L(45))),
        (0, Assoc.BINARY_LEFT, (UNBOUND, UNBOUND)),
        (-3, Assoc.UNARY_RIGHT, (UNBOUND, UNBOUND)),
        (5, Assoc.NONASSOCIATIVE, (UNBOUND, UNBOUND)),
    ],
)  # type: ignore[misc]
def test_encode(
    precedence: int, assoc: Assoc, expected: tuple[BindingLevel, BindingLevel]
) -> None:
    assert encode(precedence, assoc) == expected


def test_unbound_is_below_every_level() -> None:
    assert UNBOUND < L(0)
    assert UNBOUND < L(-5)
    assert not UNBOUND < UNBOUND
    assert UNBOUND == BindingLevel()
    assert UNBOUND <= UNBOUND
    assert L(0) > UNBOUND
    assert L(3) >= L(3)
    assert not UNBOUND.is_bound
    assert L(1).is_bound
    assert repr(UNBOUND) == "UNBOUND"
    assert repr(L(7)) == "BindingLevel(7)"


def test_binding_level_rejects_other_types() -> None:
    assert (L(1) == 1) is False
    with pytest.raises(TypeError):
        L(1) < 2  # noqa: B015


@given(
    st.integers(min_value=1, max_value=500),
    st.integers(min_value=1, max_value=500),
    st.sampled_from([Assoc.UNARY_LEFT, Assoc.UNARY_RIGHT, Assoc.BINARY_LEFT, Assoc.BINARY_RIGHT]),
    st.sampled_from([Assoc.UNARY_LEFT, Assoc.UNARY_RIGHT, Assoc.BINARY_LEFT, Assoc.BINARY_RIGHT]),
)  # type: ignore[misc]
def test_higher_precedence_levels_exceed_lower(
    p: int, q: int, a: Assoc, b: Assoc
) -> None:
    if p == q:
        return
    high, low = (p, q) if p > q else (q, p)
    high_levels = [lv for lv in encode(high, a) if lv.is_bound]
    low_levels = [lv for lv in encode(low, b) if lv.is_bound]
    assert all(h > lo for h in high_levels for lo in low_levels)


@given(st.integers(min_value=1, max_value=500))  # type: ignore[misc]
def test_binary_sides_differ_and_swap(p: int) -> None:
    ll, lr = encode(p, Assoc.BINARY_LEFT)
    rl, rr = encode(p, Assoc.BINARY_RIGHT)
    assert ll < lr
    assert rl > rr
    assert (ll, lr) == (rr, rl)
    assert {ll.value, lr.value} == {2 * p, 2 * p - 1}


def test_assoc_arity_and_role() -> None:
    assert Assoc.UNARY_LEFT.arity == 1
    assert Assoc.BINARY_RIGHT.arity == 2
    assert Assoc.NONASSOCIATIVE.arity == 0
    assert Assoc.UNARY_RIGHT.role is Role.PREFIX
    assert Assoc.UNARY_LEFT.role is Role.POSTFIX
    assert Assoc.BINARY_LEFT.role is Role.INFIX
    assert Assoc.NONASSOCIATIVE.role is None


def test_default_table_reproduces_seed() -> None:
    table = OperatorTable.default()
    assert table.frozen
    expected: dict[Role, dict[SymbolKind, Operator]] = {role: {} for role in Role}
    for precedence, assoc, kinds in SEED:
        left, right = encode(precedence, assoc)
        role = assoc.role
        assert role is not None
        for kind in kinds:
            expected[role][kind] = Operator(kind, precedence, assoc, left, right)
    for role in Role:
        actual = {op.kind: op for op in table.operators(role)}
        assert actual == expected[role]


@pytest.mark.parametrize(
    "kind,role,levels",
    [
        (K.LPAREN, Role.PREFIX, (None, 45)),
        (K.PERIOD, Role.INFIX, (44, 43)),
        (K.INC, Role.POSTFIX, (41, None)),
        (K.DEC, Role.PREFIX, (None, 39)),
        (K.SUB, Role.PREFIX, (None, 37)),
        (K.SUB, Role.INFIX, (31, 32)),
        (K.MUL, Role.INFIX, (33, 34)),
        (K.ASSIGN, Role.INFIX, (12, 11)),
        (K.OR_ASSIGN, Role.INFIX, (4, 3)),
        (K.COMMA, Role.INFIX, (1, 2)),
    ],
)  # type: ignore[misc]
def test_default_levels(
    kind: SymbolKind, role: Role, levels: tuple[int | None, int | None]
) -> None:
    op, found = OperatorTable.default().lookup(kind, role)
    assert found
    assert (op.left.value, op.right.value) == levels


def test_lookup_absent() -> None:
    table = OperatorTable.default()
    op, found = table.lookup(K.MUL, Role.PREFIX)
    assert not found
    assert op.kind == K.MUL
    assert op.left == UNBOUND and op.right == UNBOUND
    assert table.prefix(K.RPAREN) is None
    assert table.infix(K.INC) is None
    assert table.postfix(K.ADD) is None


def test_plus_minus_are_prefix_and_infix() -> None:
    table = OperatorTable.default()
    for kind in (K.ADD, K.SUB):
        prefix = table.prefix(kind)
        infix = table.infix(kind)
        assert prefix is not None and infix is not None
        assert prefix.arity == 1 and infix.arity == 2
        assert prefix.precedence > infix.precedence


def test_postfix_above_prefix_increment() -> None:
    table = OperatorTable.default()
    post, pre = table.postfix(K.INC), table.prefix(K.INC)
    assert post is not None and pre is not None
    assert post.left > pre.right


def test_frozen_table_rejects_add() -> None:
    with pytest.raises(RuntimeError, match="frozen"):
        OperatorTable.default().add(3, Assoc.BINARY_LEFT, K.ARROW)


def test_add_validates_definition() -> None:
    table = OperatorTable()
    with pytest.raises(ValueError):
        table.add(0, Assoc.BINARY_LEFT, K.ADD)
    with pytest.raises(ValueError):
        table.add(3, Assoc.NONASSOCIATIVE, K.ADD)


def test_custom_table_routes_by_assoc() -> None:
    table = (
        OperatorTable()
        .add(2, Assoc.BINARY_RIGHT, K.XOR)
        .add(1, Assoc.UNARY_LEFT, K.NOT)
        .add(3, Assoc.UNARY_RIGHT, K.TILDE)
        .freeze()
    )
    assert table.infix(K.XOR) is not None
    assert table.postfix(K.NOT) is not None
    assert table.prefix(K.TILDE) is not None
    assert table.prefix(K.NOT) is None
    assert len(table.operators(Role.INFIX)) == 1


def test_operator_properties() -> None:
    op = OperatorTable.default().infix(K.SHL)
    assert op is not None
    assert op.spelling == "<<"
    assert str(op) == "<<"
    assert op.bound
    assert op.symbol(4).offset == 4
    assert not Operator(K.SHL).bound


def test_arrays_span_all_kinds() -> None:
    assert MAX_OPERATORS >= len(SymbolKind)
