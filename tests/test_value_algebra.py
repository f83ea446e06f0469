"""
Tests for the value algebra: constant folding and expression building.
"""

import operator

import pytest

from symval import (
    Operation, Value, Concrete, Variable, Equation,
    U8, I8, U32, combine, concrete, symbolic
)
from symval.core.value import FOLDS, reduce_tree


ALL_OPS = list(Operation)

PYTHON_OPERATORS = {
    Operation.ADD: operator.add,
    Operation.SUB: operator.sub,
    Operation.MUL: operator.mul,
    Operation.DIV: operator.truediv,
    Operation.AND: operator.and_,
    Operation.OR: operator.or_,
    Operation.XOR: operator.xor,
}


def make(kind: str) -> Value:
    """Build a sample value of the given variant"""
    if kind == "concrete":
        return Concrete(U8(6))
    if kind == "variable":
        return Variable("v", 8)
    return Equation(Operation.SUB, Variable("w", 8), Concrete(U8(1)))


class TestOperation:
    """Test the operation enum"""

    def test_seven_operations(self):
        assert [op.name for op in Operation] == ["ADD", "SUB", "MUL", "DIV", "AND", "OR", "XOR"]

    def test_tags(self):
        for op in Operation:
            assert op.value == op.name

    def test_all_binary(self):
        assert all(op.arity == 2 for op in Operation)

    def test_every_operation_has_a_fold(self):
        assert set(FOLDS) == set(Operation)


class TestConstantFolding:
    """Test Concrete/Concrete folding"""

    @pytest.mark.parametrize("op", ALL_OPS)
    def test_fold_matches_scalar_operation(self, op):
        a, b = U8(200), U8(7)
        result = combine(Concrete(a), Concrete(b), op)
        assert isinstance(result, Concrete)
        assert result.value == FOLDS[op](a, b)

    def test_add(self):
        result = Concrete(U8(7)) + Concrete(U8(3))
        assert isinstance(result, Concrete)
        assert result.value == U8(10)
        assert str(result) == "10"

    def test_fold_wraps(self):
        result = Concrete(U8(250)) + Concrete(U8(10))
        assert result.value == U8(4)

    def test_fold_signed(self):
        result = Concrete(I8(-7)) / Concrete(I8(2))
        assert result.value == I8(-3)

    def test_fold_python_ints(self):
        result = Concrete(12) ^ Concrete(10)
        assert result.value == 6

    def test_division_by_zero_raises(self):
        with pytest.raises(ArithmeticError):
            Concrete(U8(5)) / Concrete(U8(0))

    def test_division_by_zero_is_not_absorbed(self):
        with pytest.raises(ZeroDivisionError):
            combine(Concrete(U32(5)), Concrete(U32(0)), Operation.DIV)

    def test_mixed_scalar_types_raise(self):
        with pytest.raises(TypeError):
            Concrete(U8(1)) + Concrete(U32(1))


class TestExpressionBuilding:
    """Test every pairing that is not Concrete/Concrete"""

    PAIRINGS = [
        ("concrete", "variable"),
        ("concrete", "equation"),
        ("variable", "concrete"),
        ("variable", "variable"),
        ("variable", "equation"),
        ("equation", "concrete"),
        ("equation", "variable"),
        ("equation", "equation"),
    ]

    @pytest.mark.parametrize("op", ALL_OPS)
    @pytest.mark.parametrize("left_kind,right_kind", PAIRINGS)
    def test_builds_equation_in_order(self, left_kind, right_kind, op):
        left, right = make(left_kind), make(right_kind)
        result = combine(left, right, op)
        assert isinstance(result, Equation)
        assert result.op is op
        assert len(result.operands) == 2
        assert result.operands[0] is left
        assert result.operands[1] is right

    @pytest.mark.parametrize("op", ALL_OPS)
    def test_python_operators_dispatch(self, op):
        x = Variable("x", 8)
        c = Concrete(U8(3))
        result = PYTHON_OPERATORS[op](x, c)
        assert isinstance(result, Equation)
        assert result.op is op
        assert result.left is x and result.right is c

    def test_floor_division_is_div(self):
        result = Variable("x", 8) // Concrete(U8(2))
        assert result.op is Operation.DIV

    def test_no_commutative_reordering(self):
        x = Variable("x", 8)
        c = Concrete(U8(1))
        assert str(x + c) == "(ADD <x:8> 1)"
        assert str(c + x) == "(ADD 1 <x:8>)"

    def test_no_identity_elimination(self):
        x = Variable("x", 8)
        result = x + Concrete(U8(0))
        assert isinstance(result, Equation)
        assert str(result) == "(ADD <x:8> 0)"

    def test_no_flattening(self):
        x, y, z = Variable("x", 8), Variable("y", 8), Variable("z", 8)
        result = (x + y) + z
        assert str(result) == "(ADD (ADD <x:8> <y:8>) <z:8>)"

    def test_symbolic_division_by_zero_builds_equation(self):
        x = Variable("x", 8)
        zero = Concrete(U8(0))
        result = x / zero
        assert isinstance(result, Equation)
        assert result.op is Operation.DIV
        assert result.left is x
        assert result.right is zero

    def test_equation_over_zero_divisor_is_not_evaluated(self):
        inner = Variable("x", 8) + Concrete(U8(1))
        result = inner / Concrete(U8(0))
        assert isinstance(result, Equation)

    def test_operands_unchanged(self):
        x = Variable("x", 8)
        c = Concrete(U8(3))
        x * c
        assert str(x) == "<x:8>" and str(c) == "3"

    def test_non_value_operand_rejected(self):
        with pytest.raises(TypeError):
            Variable("x", 8) + 1


class TestVariants:
    """Test construction and invariants of each variant"""

    def test_symbolic_derives_width(self):
        assert symbolic("x", U8).bit_width == 8
        assert symbolic("x", U32).bit_width == 32

    def test_symbolic_requires_sized_type(self):
        with pytest.raises(TypeError):
            symbolic("x", int)

    def test_concrete_converts(self):
        value = concrete(10, U8)
        assert value.value == U8(10)

    def test_concrete_keeps_scalar(self):
        scalar = U8(4)
        assert concrete(scalar, U8).value is scalar

    def test_concrete_rejects_non_scalar(self):
        with pytest.raises(TypeError):
            Concrete(1.5)

    def test_concrete_rejects_value(self):
        with pytest.raises(TypeError):
            Concrete(Variable("x", 8))

    def test_variable_requires_name(self):
        with pytest.raises(ValueError):
            Variable("", 8)

    def test_variable_requires_positive_width(self):
        with pytest.raises(ValueError):
            Variable("x", 0)

    def test_equation_requires_operation(self):
        with pytest.raises(TypeError):
            Equation("ADD", Variable("x", 8), Variable("y", 8))

    def test_equation_requires_values(self):
        with pytest.raises(TypeError):
            Equation(Operation.ADD, Variable("x", 8), U8(1))

    @pytest.mark.parametrize("value,attr", [
        (Concrete(U8(1)), "value"),
        (Variable("x", 8), "name"),
        (Equation(Operation.ADD, Variable("x", 8), Concrete(U8(1))), "op"),
    ])
    def test_immutable(self, value, attr):
        with pytest.raises(AttributeError):
            setattr(value, attr, None)

    def test_no_structural_equality(self):
        assert Variable("x", 8) != Variable("x", 8)

    def test_is_concrete(self):
        assert Concrete(U8(1)).is_concrete()
        assert Variable("x", 8).is_symbolic()
        assert (Variable("x", 8) + Concrete(U8(1))).is_symbolic()


class TestVariableQueries:
    """Test free_vars and variables"""

    def test_free_vars(self):
        x, y = symbolic("x", U8), symbolic("y", U8)
        value = (x + Concrete(U8(1))) * (y ^ x)
        assert value.free_vars() == {"x", "y"}

    def test_concrete_has_no_free_vars(self):
        assert Concrete(U8(1)).free_vars() == set()

    def test_variables_in_first_use_order(self):
        x, y, z = symbolic("x", U8), symbolic("y", U8), symbolic("z", U8)
        value = (z + x) * (y - z)
        assert value.variables() == [("z", 8), ("x", 8), ("y", 8)]

    def test_variables_distinguish_width(self):
        value = Equation(Operation.ADD, Variable("x", 8), Variable("x", 16))
        assert value.variables() == [("x", 8), ("x", 16)]

    def test_free_vars_of_deep_chain(self):
        acc = symbolic("x", U8)
        for i in range(5000):
            acc = acc * symbolic(f"y{i % 3}", U8)
        assert acc.free_vars() == {"x", "y0", "y1", "y2"}
        assert acc.variables() == [("x", 8), ("y0", 8), ("y1", 8), ("y2", 8)]


class TestReduceTree:
    """Test bottom-up evaluation of value trees"""

    def test_counts_nodes(self):
        value = (symbolic("x", U8) + concrete(1, U8)) * symbolic("y", U8)
        assert reduce_tree(value, lambda leaf: 1, lambda node, left, right: left + right + 1) == 5

    def test_operands_in_order(self):
        value = symbolic("a", U8) - symbolic("b", U8)
        result = reduce_tree(
            value, lambda leaf: leaf.name,
            lambda node, left, right: f"{left} {node.op.name} {right}"
        )
        assert result == "a SUB b"

    def test_leaf_only(self):
        assert reduce_tree(concrete(3, U8), lambda leaf: int(leaf.value), None) == 3

    def test_depth(self):
        acc = symbolic("x", U8)
        for _ in range(5000):
            acc = acc + concrete(1, U8)
        depth = reduce_tree(acc, lambda leaf: 0, lambda node, left, right: max(left, right) + 1)
        assert depth == 5000
