"""
NTT 검증 회로
==============

  1. 공개 입력 pk_ntt, hm_ntt 할당
  2. sig, v 를 witness 로 할당하고 각 계수 < q 강제
  3. 회로 안에서 sig, v 를 NTT 변환
  4. 인덱스마다 (sig_ntt·pk_ntt + v_ntt) mod q == hm_ntt
  5. l2_norm(v, sig) < sig_l2_bound
"""

from falcon_zkp.circuits.base import FalconVerificationCircuit
from falcon_zkp.gadgets.norm import l2_norm
from falcon_zkp.gadgets.ntt import ntt_circuit
from falcon_zkp.gadgets.poly_var import PolyVar, WITNESS
from falcon_zkp.gadgets.range_proofs import enforce_less_than_q, enforce_less_than_norm_bound


class FalconNTTVerificationCircuit(FalconVerificationCircuit):
    """NTT 로 곱셈을 O(N log N) 에 검증하는 회로."""

    name = "ntt"

    def generate_constraints(self, cs):
        params = self.params
        n = params.n
        self._alloc_public_inputs(cs)

        # NTT 의 지연 감소는 입력이 [0, q) 임을 전제한다
        self.sig_var = PolyVar.alloc(cs, self.sig_poly, WITNESS, n)
        self.v_var = PolyVar.alloc(cs, self.v, WITNESS, n)
        for e in self.sig_var:
            enforce_less_than_q(cs, e)
        for e in self.v_var:
            enforce_less_than_q(cs, e)

        sig_ntt = ntt_circuit(cs, self.sig_var, params)
        v_ntt = ntt_circuit(cs, self.v_var, params)
        self._enforce_ntt_relation(cs, sig_ntt, v_ntt)

        norm = l2_norm(cs, [self.v_var, self.sig_var])
        enforce_less_than_norm_bound(cs, norm, params)
