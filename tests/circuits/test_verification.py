"""
Falcon 검증 회로 E2E 테스트.

테스트 대상:
  - 세 변형 (schoolbook, ntt, dual_ntt) × 백엔드 (r1cs, plonk) 만족 여부
  - 공개 입력 순서와 멱등성
  - witness / 공개 입력 변조, 잘못된 메시지
  - 구성 오류 (N 불일치, 알 수 없는 변형)
  - constraint_counts
"""

import pytest

from falcon_zkp.circuits import (
    CIRCUITS,
    build_verification_circuit,
    constraint_counts,
    get_circuit_class,
)
from falcon_zkp.circuits.ntt import FalconNTTVerificationCircuit
from falcon_zkp.errors import ConfigurationError
from falcon_zkp.falcon.keys import Signature
from falcon_zkp.falcon.param import FALCON_512, FALCON_1024, MODULUS, NONCE_LEN
from falcon_zkp.field import FR


CASES = [
    ("schoolbook", "r1cs"),
    ("ntt", "r1cs"),
    ("ntt", "plonk"),
    ("dual_ntt", "r1cs"),
    ("dual_ntt", "plonk"),
]


@pytest.fixture(scope="module")
def built(public_key, message, signature):
    """(variant, backend) 별로 한 번만 합성한다."""
    cache = {}

    def get(variant, backend):
        key = (variant, backend)
        if key not in cache:
            cache[key] = build_verification_circuit(variant, backend, public_key, message, signature)
        return cache[key]

    return get


def tampered(cs, var, value):
    """var 값을 잠시 바꿔 만족 여부를 확인하고 되돌린다."""
    original = cs.value(var)
    cs.set_value(var, value)
    try:
        return cs.is_satisfied()
    finally:
        cs.set_value(var, original)


# ─────────────────────────────────────────────────────────────────────
# 유효한 서명
# ─────────────────────────────────────────────────────────────────────

class TestValidSignature:
    """유효한 (pk, msg, sig) 에 대한 회로."""

    @pytest.mark.parametrize("variant,backend", CASES)
    def test_satisfied(self, built, variant, backend):
        circuit, cs = built(variant, backend)
        assert cs.which_is_unsatisfied(circuit.public_inputs()) is None

    @pytest.mark.parametrize("variant", list(CIRCUITS))
    def test_public_input_layout(self, built, public_key, variant):
        """공개 입력 = pk NTT 계수 N개 + hm NTT 계수 N개."""
        circuit, cs = built(variant, "r1cs")
        pub = circuit.public_inputs()
        assert len(pub) == 2 * FALCON_512.n
        assert cs.num_public_inputs == len(pub)
        assert [int(x) for x in pub[:512]] == public_key.unpack().to_ntt().coeffs
        assert [int(x) for x in pub[512:]] == circuit.hm.to_ntt().coeffs
        assert cs.public_inputs() == pub

    @pytest.mark.parametrize("backend", ["r1cs", "plonk"])
    def test_rebuild_idempotent(self, public_key, message, signature, backend):
        """같은 입력으로 두 번 합성하면 공개 입력과 제약 구조가 같다."""
        first, cs1 = build_verification_circuit("ntt", backend, public_key, message, signature)
        second, cs2 = build_verification_circuit("ntt", backend, public_key, message, signature)
        assert first.public_inputs() == second.public_inputs()
        assert cs1.public_inputs() == cs2.public_inputs()
        assert cs1.num_constraints == cs2.num_constraints
        assert cs1.stats() == cs2.stats()
        assert cs1.values == cs2.values

    def test_cleartext_relation(self, built, public_key, signature):
        """v = hm - sig·pk 이고 노름이 경계 미만."""
        circuit, _ = built("ntt", "r1cs")
        assert circuit.v == circuit.hm - signature.unpack() * public_key.unpack()
        assert circuit.v.l2_norm() + circuit.sig_poly.l2_norm() < FALCON_512.sig_l2_bound

    def test_native_range_gates(self, built):
        """dual_ntt 의 PLONK 합성은 limb 마다 range gate 를 쓴다."""
        _, cs = built("dual_ntt", "plonk")
        assert len(cs.range_checks) == 3 * 4 * FALCON_512.n


# ─────────────────────────────────────────────────────────────────────
# 변조 / 잘못된 입력
# ─────────────────────────────────────────────────────────────────────

class TestInvalid:
    """불만족해야 하는 경우."""

    @pytest.mark.parametrize("variant", ["schoolbook", "ntt"])
    def test_tampered_signature_witness(self, built, variant):
        circuit, cs = built(variant, "r1cs")
        var = circuit.sig_var[0]
        assert not tampered(cs, var, (cs.value(var) + 1) % MODULUS)

    def test_tampered_dual_witness(self, built):
        circuit, cs = built("dual_ntt", "r1cs")
        var = circuit.sig_dual.pos[3]
        assert not tampered(cs, var, cs.value(var) + 1)

    def test_tampered_remainder(self, built):
        circuit, cs = built("schoolbook", "r1cs")
        var = circuit.v_var[7]
        assert not tampered(cs, var, (cs.value(var) + 1) % MODULUS)

    @pytest.mark.parametrize("variant,backend", CASES)
    def test_tampered_public_input(self, built, variant, backend):
        """검증자의 공개 입력이 하나라도 다르면 불만족."""
        circuit, cs = built(variant, backend)
        pub = circuit.public_inputs()
        pub[600] = pub[600] + FR(1)
        assert not cs.is_satisfied(pub)

    def test_public_input_length(self, built):
        circuit, cs = built("ntt", "plonk")
        assert not cs.is_satisfied(circuit.public_inputs()[:-1])

    @pytest.mark.parametrize("variant", ["ntt", "dual_ntt"])
    def test_wrong_message(self, public_key, signature, variant):
        """다른 메시지에 대해서는 v 가 커서 노름 검사가 실패한다."""
        circuit, cs = build_verification_circuit(
            variant, "r1cs", public_key, b"another message", signature)
        assert not cs.is_satisfied(circuit.public_inputs())

    def test_forged_message_relation(self, built, forging_cs, public_key, signature):
        """다른 메시지의 hm 에 맞춰 관계식의 mod_q 나머지를 주장해도 거부된다.

        짧은 v 는 원래 메시지의 것을 그대로 쓰므로 노름 검사는 통과하고,
        몫 범위 검사만이 위조를 막는다.
        """
        honest, _ = built("ntt", "r1cs")
        circuit = FalconNTTVerificationCircuit(public_key, b"another message", signature)
        circuit.v = honest.v

        cs = forging_cs()
        targets = iter(circuit.hm_ntt.coeffs)
        mul_add = cs.mul_add

        def claiming_mul_add(a, b, c):
            out = mul_add(a, b, c)
            target = next(targets, None)
            if target is not None:
                cs.claim(out, target)
            return out

        cs.mul_add = claiming_mul_add
        circuit.synthesize(cs)
        assert next(targets, None) is None
        assert not cs.is_satisfied(circuit.public_inputs())

    def test_dimension_mismatch(self, public_key, message):
        sig = Signature(bytes(NONCE_LEN), [0] * 1024, FALCON_1024)
        with pytest.raises(ConfigurationError):
            build_verification_circuit("ntt", "r1cs", public_key, message, sig)

    def test_unknown_variant(self):
        with pytest.raises(ConfigurationError):
            get_circuit_class("karatsuba")

    def test_unknown_backend(self, public_key, message, signature):
        with pytest.raises(ConfigurationError):
            build_verification_circuit("ntt", "groth16", public_key, message, signature)


class TestConstraintCounts:
    """변형별 비용 표."""

    def test_counts(self, public_key, message, signature):
        counts = constraint_counts(public_key, message, signature)
        assert set(counts) == set(CIRCUITS)
        assert counts["schoolbook"]["num_constraints"] > counts["ntt"]["num_constraints"]
        for stats in counts.values():
            assert stats["backend"] == "r1cs"
            assert stats["num_public_inputs"] == 2 * FALCON_512.n
