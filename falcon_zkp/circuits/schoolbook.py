"""
Schoolbook 검증 회로
=====================

sig · pk 를 O(N²) 내적으로 직접 계산한다.

**버퍼 트릭**:
  buf = reverse([q - pk[0], ..., q - pk[N-1], pk[0], ..., pk[N-1]])
  이면 i 번째 열은 buf[N-1-i : 2N-1-i] 이고, sig 와의 내적이
  음순환 곱 (sig·pk)[i] 가 된다 (j > i 인 항은 -pk[N+i-j]).

**열 검사**:
  col = <sig, 열> mod q,  rhs = hm[i] + q - col ∈ [1, 2q)
  v[i] < q 이므로 rhs ≡ v[i] (mod q) 는 정확히
  rhs == v[i]  또는  rhs == v[i] + q 와 같다.

**공개 입력 연결**:
  공개 입력은 NTT 표현이므로, 계수 표현 pk, hm 을 witness 로 두고
  (각 계수 < q) 회로 안 NTT 결과가 공개 입력과 같음을 강제한다.

sig, v 의 계수는 q 미만으로 강제한다. 내적의 mod_q 는 열마다
N·q² 를 입력 상한으로 삼는다.
"""

from falcon_zkp.circuits.base import FalconVerificationCircuit
from falcon_zkp.gadgets.arithmetics import inner_product_mod
from falcon_zkp.gadgets.norm import l2_norm
from falcon_zkp.gadgets.ntt import ntt_circuit
from falcon_zkp.gadgets.poly_var import PolyVar, WITNESS
from falcon_zkp.gadgets.range_proofs import enforce_less_than_q, enforce_less_than_norm_bound


class FalconSchoolBookVerificationCircuit(FalconVerificationCircuit):
    """벡터-행렬 곱으로 sig·pk 를 검증하는 회로."""

    name = "schoolbook"

    def _link_public(self, cs, coeff_var, ntt_var):
        for e in coeff_var:
            enforce_less_than_q(cs, e)
        for a, b in zip(ntt_circuit(cs, coeff_var, self.params), ntt_var):
            cs.enforce_equal(a, b)

    def generate_constraints(self, cs):
        params = self.params
        n = params.n
        q = params.modulus
        self._alloc_public_inputs(cs)

        self.pk_var = PolyVar.alloc(cs, self.pk_poly, WITNESS, n)
        self.hm_var = PolyVar.alloc(cs, self.hm, WITNESS, n)
        self._link_public(cs, self.pk_var, self.pk_ntt_var)
        self._link_public(cs, self.hm_var, self.hm_ntt_var)

        self.sig_var = PolyVar.alloc(cs, self.sig_poly, WITNESS, n)
        self.v_var = PolyVar.alloc(cs, self.v, WITNESS, n)
        for e in self.sig_var:
            enforce_less_than_q(cs, e)
        for e in self.v_var:
            enforce_less_than_q(cs, e)

        neg_pk = [cs.lc([(p, -1)], q) for p in self.pk_var]
        buf = (neg_pk + list(self.pk_var))[::-1]

        for i in range(n):
            col = inner_product_mod(cs, self.sig_var.coeffs, buf[n - 1 - i:2 * n - 1 - i])
            rhs = cs.lc([(self.hm_var[i], 1), (col, -1)], q)
            v = self.v_var[i]
            same = cs.is_equal(rhs, v)
            plus_q = cs.is_zero(cs.lc([(rhs, 1), (v, -1)], -q))
            cs.enforce_true(cs.logic_or(same, plus_q))

        norm = l2_norm(cs, [self.v_var, self.sig_var])
        enforce_less_than_norm_bound(cs, norm, params)
