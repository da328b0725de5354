"""
NTT + 부호 분리 검증 회로
==========================

NTT 회로와 같은 관계를 증명하되 sig, v 를 DualPolyVar (pos, neg) 로 둔다.

  1. 공개 입력 pk_ntt, hm_ntt 할당
  2. sig, v 를 부호 분리 witness 로 할당 (pos·neg = 0)
  3. 모든 pos/neg 계수 ≤ 765  (L∞ 경계, 결과적으로 [0, q) 표현도 보장)
  4. [0, q) 표현으로 되돌려 회로 안에서 NTT
  5. 인덱스마다 (sig_ntt·pk_ntt + v_ntt) mod q == hm_ntt

L2 누산기와 큰 비교기 대신 계수마다 8비트 limb 세 개만 검사한다.
"""

from falcon_zkp.circuits.base import FalconVerificationCircuit
from falcon_zkp.falcon.polynomial import DualPolynomial
from falcon_zkp.gadgets.norm import enforce_l_inf_765
from falcon_zkp.gadgets.ntt import ntt_circuit
from falcon_zkp.gadgets.poly_var import DualPolyVar


class FalconDualNTTVerificationCircuit(FalconVerificationCircuit):
    """부호 분리 표현과 L∞ 경계를 쓰는 NTT 회로."""

    name = "dual_ntt"

    def generate_constraints(self, cs):
        params = self.params
        n = params.n
        self._alloc_public_inputs(cs)

        self.sig_dual = DualPolyVar.alloc(cs, DualPolynomial.from_polynomial(self.sig_poly), n)
        self.v_dual = DualPolyVar.alloc(cs, DualPolynomial.from_polynomial(self.v), n)
        enforce_l_inf_765(cs, [self.sig_dual, self.v_dual])

        self.sig_var = self.sig_dual.to_poly_var(cs)
        self.v_var = self.v_dual.to_poly_var(cs)

        sig_ntt = ntt_circuit(cs, self.sig_var, params)
        v_ntt = ntt_circuit(cs, self.v_var, params)
        self._enforce_ntt_relation(cs, sig_ntt, v_ntt)
