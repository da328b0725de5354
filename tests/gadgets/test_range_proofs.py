"""
범위 증명 가젯 테스트.

테스트 대상:
  - is_less_than_constant: 여러 bound 에서 전수에 가까운 비교
  - lessThanQ / lessThan6144 / lessThan1024 / 노름 경계
  - leq765: limb 분할 경계, range gate 폭 불일치
"""

import pytest

from falcon_zkp.cs import R1CS, PlonkConstraintSystem
from falcon_zkp.errors import ConfigurationError
from falcon_zkp.falcon.param import MODULUS, FALCON_512, FALCON_1024
from falcon_zkp.gadgets.range_proofs import (
    is_less_than_constant,
    enforce_less_than_q,
    is_less_than_6144,
    enforce_less_than_6144,
    enforce_less_than_1024,
    enforce_less_than_norm_bound,
    enforce_leq_765,
)


BACKENDS = [R1CS, PlonkConstraintSystem]


def check(enforce, value, backend=R1CS, *args):
    cs = backend()
    enforce(cs, cs.alloc_witness(value), *args)
    return cs.is_satisfied()


class TestLessThanConstant:
    """상수 비교기 테스트."""

    @pytest.mark.parametrize("bound", [1, 2, 5, 8, 12, 100, 6144, MODULUS])
    def test_against_integer_comparison(self, bound):
        """0 .. 2^bits-1 의 표본에서 a < bound 와 일치한다."""
        num_bits = 14
        samples = set(range(0, 64)) | {bound - 1, bound, bound + 1, (1 << num_bits) - 1}
        for a in sorted(x for x in samples if 0 <= x < (1 << num_bits)):
            cs = R1CS()
            lt = is_less_than_constant(cs, cs.alloc_witness(a), bound, num_bits)
            assert cs.value(lt) == int(a < bound), (a, bound)
            assert cs.is_satisfied()

    def test_full_range_bound(self):
        """bound = 2^bits 이면 항상 참."""
        cs = R1CS()
        lt = is_less_than_constant(cs, cs.alloc_witness(15), 16, 4)
        assert cs.value(lt) == 1
        assert cs.is_satisfied()

    @pytest.mark.parametrize("bound", [0, 17])
    def test_bad_bound(self, bound):
        cs = R1CS()
        with pytest.raises(ConfigurationError):
            is_less_than_constant(cs, cs.alloc_witness(1), bound, 4)

    def test_forged_result(self):
        """비교 결과를 뒤집으면 불만족."""
        cs = R1CS()
        lt = is_less_than_constant(cs, cs.alloc_witness(MODULUS), MODULUS, 14)
        cs.set_value(lt, 1)
        assert not cs.is_satisfied()


class TestLessThanQ:
    """lessThanQ 테스트."""

    @pytest.mark.parametrize("backend", BACKENDS)
    @pytest.mark.parametrize("value", [0, 1, 4095, 4096, 8192, MODULUS - 1])
    def test_accepts(self, backend, value):
        assert check(enforce_less_than_q, value, backend)

    @pytest.mark.parametrize("backend", BACKENDS)
    @pytest.mark.parametrize("value", [MODULUS, MODULUS + 1, 12800, (1 << 14) - 1, 1 << 14, 1 << 20, 10000 * MODULUS])
    def test_rejects(self, backend, value):
        assert not check(enforce_less_than_q, value, backend)


class TestSmallBounds:
    """6144, 1024 경계 테스트."""

    def test_is_less_than_6144(self):
        for value, expected in [(0, 1), (6143, 1), (6144, 0), (6145, 0), (MODULUS - 1, 0)]:
            cs = R1CS()
            lt = is_less_than_6144(cs, cs.alloc_witness(value))
            assert cs.value(lt) == expected
            assert cs.is_satisfied()

    def test_enforce_less_than_6144(self):
        assert check(enforce_less_than_6144, 6143)
        assert not check(enforce_less_than_6144, 6144)

    def test_less_than_1024(self):
        assert check(enforce_less_than_1024, 0)
        assert check(enforce_less_than_1024, 1023)
        assert not check(enforce_less_than_1024, 1024)
        assert not check(enforce_less_than_1024, 5000)


class TestNormBound:
    """노름 경계 테스트."""

    @pytest.mark.parametrize("params", [FALCON_512, FALCON_1024])
    def test_boundary(self, params):
        bound = params.sig_l2_bound
        assert check(enforce_less_than_norm_bound, 0, R1CS, params)
        assert check(enforce_less_than_norm_bound, bound - 1, R1CS, params)
        assert not check(enforce_less_than_norm_bound, bound, R1CS, params)
        assert not check(enforce_less_than_norm_bound, bound + 1, R1CS, params)

    def test_bit_widths(self):
        assert FALCON_512.norm_bound_bits == 26
        assert FALCON_1024.norm_bound_bits == 27

    def test_overflowing_value(self):
        """2^bits 이상 값은 분해 단계에서 걸린다."""
        assert not check(enforce_less_than_norm_bound, 1 << 26, R1CS, FALCON_512)


class TestLeq765:
    """leq765 테스트."""

    @pytest.mark.parametrize("backend", BACKENDS)
    @pytest.mark.parametrize("value", [0, 1, 254, 255, 256, 509, 510, 511, 764, 765])
    def test_accepts(self, backend, value):
        assert check(enforce_leq_765, value, backend)

    @pytest.mark.parametrize("backend", BACKENDS)
    @pytest.mark.parametrize("value", [766, 767, 1000, MODULUS])
    def test_rejects(self, backend, value):
        assert not check(enforce_leq_765, value, backend)

    def test_range_gate_count(self):
        """PLONK 에서는 limb 마다 네이티브 range gate 하나."""
        cs = PlonkConstraintSystem()
        enforce_leq_765(cs, cs.alloc_witness(700))
        assert len(cs.range_checks) == 3

    def test_range_width_mismatch(self):
        """range gate 폭이 8이 아니면 ConfigurationError."""
        cs = PlonkConstraintSystem(range_bit_len=16)
        with pytest.raises(ConfigurationError):
            enforce_leq_765(cs, cs.alloc_witness(1))
