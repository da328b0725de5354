"""
PLONK 백엔드 테스트.

테스트 대상:
  - Gate: check 메서드 (유효/무효, 공개 입력 항)
  - PlonkConstraintSystem: 게이트 0, 공개 입력 게이트, 선형 연쇄,
    네이티브 range gate, 셀렉터, copy constraint 순열
"""

import pytest

from falcon_zkp.cs import Gate, PlonkConstraintSystem, ONE
from falcon_zkp.field import FR, CURVE_ORDER


# ─────────────────────────────────────────────────────────────────────
# Gate 테스트
# ─────────────────────────────────────────────────────────────────────

class TestGate:
    """Gate 클래스 테스트."""

    def test_gate_reduces_selectors(self):
        """음수 셀렉터는 p - k 로 저장된다."""
        g = Gate(1, -1, 0, 0, 5)
        assert g.q_r == CURVE_ORDER - 1
        assert g.q_c == 5

    def test_multiplication_gate(self):
        g = Gate(0, 0, -1, 1, 0)
        assert g.check(3, 7, 21) is True
        assert g.check(3, 7, 20) is False

    def test_addition_gate(self):
        g = Gate(1, 1, -1, 0, 0)
        assert g.check(10, 20, 30) is True
        assert g.check(10, 20, 31) is False

    def test_public_input_term(self):
        """q_O·c + PI = 0."""
        g = Gate(0, 0, 1, 0, 0)
        assert g.check(0, 0, 42, pi=CURVE_ORDER - 42) is True
        assert g.check(0, 0, 42, pi=CURVE_ORDER - 41) is False


# ─────────────────────────────────────────────────────────────────────
# PlonkConstraintSystem 테스트
# ─────────────────────────────────────────────────────────────────────

class TestPlonkConstraintSystem:
    """PLONK 제약 시스템 테스트."""

    def test_gate_zero_pins_one(self):
        """게이트 0 은 ONE == 1."""
        cs = PlonkConstraintSystem()
        assert cs.n == 1
        assert cs.wires[0] == (ONE, ONE, ONE)
        assert cs.is_satisfied()
        cs.set_value(ONE, 2)
        assert cs.which_is_unsatisfied() == "gate 0"

    def test_x3_plus_x_plus_5(self):
        """x³ + x + 5 = 35."""
        cs = PlonkConstraintSystem()
        x = cs.alloc_witness(3)
        out = cs.alloc_public(35)
        x2 = cs.mul(x, x)
        x3 = cs.mul(x2, x)
        cs.enforce_linear([(x3, 1), (x, 1), (out, -1)], 5)
        assert cs.is_satisfied([FR(35)])
        assert not cs.is_satisfied([FR(36)])

    def test_long_linear_combination_chains(self):
        """항이 3개를 넘으면 중간 게이트로 연쇄한다."""
        cs = PlonkConstraintSystem()
        vs = [cs.alloc_witness(i + 1) for i in range(6)]
        before = cs.n
        out = cs.lc([(v, 1) for v in vs])
        assert cs.value(out) == 21
        assert cs.n - before == 5
        assert cs.is_satisfied()

    def test_native_range_gate(self):
        """range_bit_len 폭은 비트 분해 없이 range gate 하나."""
        cs = PlonkConstraintSystem(range_bit_len=8)
        a = cs.alloc_witness(255)
        gates_before = cs.n
        cs.enforce_range(a, 8)
        assert cs.n == gates_before
        assert cs.range_checks == [a]
        assert cs.is_satisfied()

    def test_native_range_gate_violation(self):
        cs = PlonkConstraintSystem(range_bit_len=8)
        cs.enforce_range(cs.alloc_witness(256), 8)
        assert cs.which_is_unsatisfied() == "range 0"

    def test_other_width_decomposes(self):
        cs = PlonkConstraintSystem(range_bit_len=8)
        cs.enforce_range(cs.alloc_witness(1000), 10)
        assert cs.range_checks == []
        assert cs.is_satisfied()

    def test_num_constraints_counts_range_gates(self):
        cs = PlonkConstraintSystem()
        cs.enforce_range(cs.alloc_witness(1), 8)
        assert cs.num_constraints == cs.n + 1

    def test_selector_polynomials(self):
        cs = PlonkConstraintSystem()
        x = cs.alloc_witness(4)
        cs.mul(x, x)
        q_l, q_r, q_o, q_m, q_c = cs.get_selector_polynomials()
        assert len(q_l) == cs.n
        assert q_m[1] == FR(1)
        assert q_o[1] == FR(CURVE_ORDER - 1)
        assert q_c[0] == FR(CURVE_ORDER - 1)

    def test_wire_values(self):
        cs = PlonkConstraintSystem()
        x = cs.alloc_witness(4)
        cs.mul(x, x)
        a_vals, b_vals, c_vals = cs.wire_values()
        assert (a_vals[1], b_vals[1], c_vals[1]) == (FR(4), FR(4), FR(16))

    def test_copy_constraints(self):
        """같은 변수를 쓰는 위치들이 하나의 순환을 이룬다."""
        cs = PlonkConstraintSystem()
        x = cs.alloc_witness(4)
        cs.mul(x, x)
        sigma = cs.build_copy_constraints()
        n = cs.n
        assert sorted(sigma) == list(range(3 * n))
        # gate 1 의 a, b 는 같은 변수 x
        assert sigma[1] == n + 1
        assert sigma[n + 1] == 1

    def test_rows(self):
        cs = PlonkConstraintSystem()
        (gate, wires), = cs.rows(0, 1)
        assert gate.q_l == 1
        assert wires == (ONE, ONE, ONE)
