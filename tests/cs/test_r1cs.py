"""
R1CS 백엔드와 공통 연산 테스트.

테스트 대상:
  - 할당, 상수, 선형/곱셈 제약
  - 불리언 논리, is_zero, select, unpack
  - 공개 입력 치환과 불만족 보고
  - make_constraint_system
"""

import pytest

from falcon_zkp.cs import R1CS, PlonkConstraintSystem, make_constraint_system, ONE
from falcon_zkp.errors import ConfigurationError
from falcon_zkp.field import FR, CURVE_ORDER


class TestArithmetic:
    """기본 산술 테스트."""

    def test_square(self):
        """x·x = 9."""
        cs = R1CS()
        x = cs.alloc_witness(3)
        y = cs.mul(x, x)
        cs.enforce_constant(y, 9)
        assert cs.is_satisfied()

    def test_wrong_witness(self):
        """값을 바꾸면 불만족, 위치를 보고한다."""
        cs = R1CS()
        x = cs.alloc_witness(3)
        y = cs.mul(x, x)
        cs.enforce_constant(y, 9)
        cs.set_value(x, 4)
        assert not cs.is_satisfied()
        assert cs.which_is_unsatisfied() == "constraint 0"

    def test_linear_combination(self):
        """2a - 3b + 5."""
        cs = R1CS()
        a = cs.alloc_witness(10)
        b = cs.alloc_witness(4)
        out = cs.lc([(a, 2), (b, -3)], 5)
        assert cs.value(out) == 13
        assert cs.is_satisfied()

    def test_negative_wraps(self):
        """음수 결과는 p - k 로 표현된다."""
        cs = R1CS()
        a = cs.alloc_witness(1)
        b = cs.alloc_witness(2)
        assert cs.value(cs.sub(a, b)) == CURVE_ORDER - 1

    def test_mul_add_single_constraint(self):
        """mul_add 는 제약 하나로 a·b + c."""
        cs = R1CS()
        a, b, c = cs.alloc_witness(3), cs.alloc_witness(5), cs.alloc_witness(7)
        before = cs.num_constraints
        out = cs.mul_add(a, b, c)
        assert cs.num_constraints == before + 1
        assert cs.value(out) == 22
        assert cs.is_satisfied()

    def test_constant_reused(self):
        """같은 상수는 한 번만 할당된다."""
        cs = R1CS()
        assert cs.constant(1) == ONE
        assert cs.constant(7) == cs.constant(7)
        assert cs.num_constraints == 1


class TestBoolean:
    """불리언 연산 테스트."""

    @pytest.mark.parametrize("a,b", [(0, 0), (0, 1), (1, 0), (1, 1)])
    def test_logic(self, a, b):
        cs = R1CS()
        va, vb = cs.alloc_witness(a), cs.alloc_witness(b)
        assert cs.value(cs.logic_and(va, vb)) == (a & b)
        assert cs.value(cs.logic_or(va, vb)) == (a | b)
        assert cs.value(cs.logic_not(va)) == 1 - a
        assert cs.is_satisfied()

    @pytest.mark.parametrize("bits,expected_and,expected_or", [
        ([1, 1, 1, 1], 1, 1),
        ([1, 0, 1, 1], 0, 1),
        ([0, 0, 0], 0, 0),
    ])
    def test_logic_all(self, bits, expected_and, expected_or):
        cs = R1CS()
        vs = [cs.alloc_witness(b) for b in bits]
        assert cs.value(cs.logic_and_all(vs)) == expected_and
        assert cs.value(cs.logic_or_all(vs)) == expected_or
        assert cs.is_satisfied()

    def test_is_zero(self):
        cs = R1CS()
        assert cs.value(cs.is_zero(cs.alloc_witness(0))) == 1
        assert cs.value(cs.is_zero(cs.alloc_witness(12289))) == 0
        assert cs.is_satisfied()

    def test_is_zero_forged_output(self):
        """0 이 아닌 값에 z = 1 을 주면 불만족."""
        cs = R1CS()
        a = cs.alloc_witness(5)
        z = cs.is_zero(a)
        cs.set_value(z, 1)
        assert not cs.is_satisfied()

    def test_select(self):
        cs = R1CS()
        a, b = cs.alloc_witness(11), cs.alloc_witness(22)
        assert cs.value(cs.select(cs.alloc_witness(1), a, b)) == 11
        assert cs.value(cs.select(cs.alloc_witness(0), a, b)) == 22
        assert cs.is_satisfied()

    def test_non_boolean_rejected(self):
        cs = R1CS()
        cs.enforce_bool(cs.alloc_witness(2))
        assert not cs.is_satisfied()


class TestUnpack:
    """비트 분해 테스트."""

    def test_unpack_value(self):
        cs = R1CS()
        bits = cs.unpack(cs.alloc_witness(0b1011), 4)
        assert [cs.value(b) for b in bits] == [1, 1, 0, 1]
        assert cs.is_satisfied()

    def test_unpack_overflow(self):
        """2^bits 이상이면 재구성 제약이 불만족."""
        cs = R1CS()
        cs.unpack(cs.alloc_witness(16), 4)
        assert not cs.is_satisfied()

    @pytest.mark.parametrize("bits", [0, 254])
    def test_unpack_width(self, bits):
        cs = R1CS()
        with pytest.raises(ConfigurationError):
            cs.unpack(cs.alloc_witness(1), bits)

    def test_range_by_decomposition(self):
        """R1CS 의 range gate 는 비트 분해로 처리된다."""
        cs = R1CS()
        cs.enforce_range(cs.alloc_witness(255), 8)
        assert cs.is_satisfied()
        cs.enforce_range(cs.alloc_witness(256), 8)
        assert not cs.is_satisfied()


class TestPublicInputs:
    """공개 입력 테스트."""

    def build(self):
        cs = R1CS()
        x = cs.alloc_public(3)
        y = cs.alloc_public(9)
        cs.enforce_equal(cs.mul(x, x), y)
        return cs

    def test_public_inputs(self):
        cs = self.build()
        assert cs.public_inputs() == [FR(3), FR(9)]
        assert cs.num_public_inputs == 2
        assert cs.is_satisfied([FR(3), FR(9)])

    def test_wrong_public_inputs(self):
        """검증자의 공개 입력이 다르면 불만족."""
        cs = self.build()
        assert not cs.is_satisfied([FR(3), FR(10)])

    def test_public_input_length(self):
        cs = self.build()
        assert "length" in cs.which_is_unsatisfied([FR(3)])

    def test_stats(self):
        cs = self.build()
        stats = cs.stats()
        assert stats["backend"] == "r1cs"
        assert stats["num_public_inputs"] == 2
        assert stats["num_variables"] == cs.num_variables
        assert cs.num_witness_variables == cs.num_variables - 3

    def test_rows(self):
        cs = self.build()
        (a, b, c), = cs.rows(0, 1)
        assert a and b and c
        assert cs.witness_vector([5, 25])[1:3] == [5, 25]

    def test_assignment(self):
        cs = self.build()
        r = cs.assignment()
        assert r[0] == FR(1)
        assert r[1] == FR(3)


class TestFactory:
    """make_constraint_system 테스트."""

    def test_backends(self):
        assert isinstance(make_constraint_system("r1cs"), R1CS)
        cs = make_constraint_system("plonk", range_bit_len=16)
        assert isinstance(cs, PlonkConstraintSystem)
        assert cs.range_bit_len == 16

    def test_unknown_backend(self):
        with pytest.raises(ConfigurationError):
            make_constraint_system("groth16")

    def test_bad_range_width(self):
        with pytest.raises(ConfigurationError):
            R1CS(range_bit_len=0)
