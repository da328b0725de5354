"""
검증 회로 공통부
=================

세 가지 변형 모두 같은 관계를 증명한다:

    hm = HashToPoint(nonce || msg)          (공개, 평문에서 계산)
    v  = hm - sig · pk  (mod q)             (witness, 평문에서 계산)
    ||(sig, v)|| 이 경계 미만

공개 입력 순서: pk 의 NTT 계수 N개, 이어서 hm 의 NTT 계수 N개.
"""

import logging

from falcon_zkp.errors import ConfigurationError
from falcon_zkp.field import to_fr
from falcon_zkp.falcon.polynomial import Polynomial
from falcon_zkp.gadgets.arithmetics import mod_q
from falcon_zkp.gadgets.poly_var import NTTPolyVar, PUBLIC


logger = logging.getLogger(__name__)


class FalconVerificationCircuit:
    """(pk, msg, sig) 한 쌍에 대한 검증 회로.

    속성:
        pk: PublicKey
        msg: 메시지 바이트
        sig: Signature
        params: ParameterSet
    """

    name = None

    def __init__(self, pk, msg, sig):
        if sig.params.n != pk.params.n:
            raise ConfigurationError(
                f"공개키(N={pk.params.n})와 서명(N={sig.params.n})의 차원이 다릅니다"
            )
        self.pk = pk
        self.msg = bytes(msg)
        self.sig = sig
        self.params = pk.params

        # 평문 값
        self.pk_poly = pk.unpack()
        self.sig_poly = sig.unpack()
        self.hm = Polynomial.from_hash_of_message(self.msg, sig.nonce, self.params.n)
        self.v = self.hm - self.sig_poly * self.pk_poly
        self.pk_ntt = self.pk_poly.to_ntt()
        self.hm_ntt = self.hm.to_ntt()

    @classmethod
    def build_circuit(cls, pk, msg, sig):
        return cls(pk, msg, sig)

    def public_inputs(self):
        """[pk NTT 계수..., hm NTT 계수...] (FR 리스트)."""
        return [to_fr(c) for c in self.pk_ntt.coeffs + self.hm_ntt.coeffs]

    def _alloc_public_inputs(self, cs):
        n = self.params.n
        self.pk_ntt_var = NTTPolyVar.alloc(cs, self.pk_ntt, PUBLIC, n)
        self.hm_ntt_var = NTTPolyVar.alloc(cs, self.hm_ntt, PUBLIC, n)

    def _enforce_ntt_relation(self, cs, sig_ntt, v_ntt):
        """인덱스마다 (sig·pk + v) mod q == hm.

        세 값이 모두 q 미만이므로 sig·pk + v < q² 이다.
        """
        q = self.params.modulus
        for s, p, v, h in zip(sig_ntt, self.pk_ntt_var, v_ntt, self.hm_ntt_var):
            cs.enforce_equal(mod_q(cs, cs.mul_add(s, p, v), q * q), h)

    def generate_constraints(self, cs):
        raise NotImplementedError

    def synthesize(self, cs):
        """제약을 만들고 같은 cs 를 반환한다."""
        before = cs.num_constraints
        self.generate_constraints(cs)
        logger.debug("%s circuit on %s: %d constraints, %d variables",
                     self.name, cs.name, cs.num_constraints - before, cs.num_variables)
        return cs
