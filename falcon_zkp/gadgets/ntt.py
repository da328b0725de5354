"""
회로 내부 NTT (In-Circuit NTT)
================================

평문 NTT 와 같은 Cooley–Tukey 버터플라이 망을 선형결합으로 쌓는다.
단계마다 mod q 감소를 하지 않고, 모든 단계가 끝난 뒤 출력마다 한 번만
mod_q 를 적용한다.

**버터플라이** (단계 l, 트위들 s):

    u' = u + v·s
    v' = u + (C_{l+1} - v·s),     C_{l+1} = 2^l · q^(l+2)

  l 단계 이후 모든 값은 2^l · q^(l+1) 미만이므로 v·s < C_{l+1} 이고,
  뺄셈이 필드에서 음수로 감싸지지 않는다. C_{l+1} ≡ 0 (mod q) 이므로
  mod q 로 보면 평문 버터플라이 u - v·s 와 같다.

**용량 조건**:
  마지막 값의 상한 2^LOG_N · q^(LOG_N+1) 이 필드 위수보다 작아야 한다.
  회로를 만들기 전에 검사하고, 어긋나면 ConfigurationError.

  | N    | 상한 비트 수 |
  |------|--------------|
  | 512  | ~145         |
  | 1024 | ~160         |

비용: 버터플라이당 선형 제약 2개, 출력당 mod_q 1회 (몫은 상한에서 정한
비트 수로 분해한다).
"""

import logging

from falcon_zkp.errors import ConfigurationError
from falcon_zkp.falcon.ntt import ntt_table
from falcon_zkp.falcon.param import MODULUS
from falcon_zkp.field import fits_in_field
from falcon_zkp.gadgets.arithmetics import mod_q, quotient_bit_len
from falcon_zkp.gadgets.poly_var import NTTPolyVar


logger = logging.getLogger(__name__)


def bound_constants(params):
    """C[0] = q, C[l+1] = 2^l · q^(l+2)  (l = 0 .. LOG_N-1)."""
    consts = [MODULUS]
    for l in range(params.log_n):
        consts.append((1 << l) * MODULUS ** (l + 2))
    return consts


def output_bound(params):
    """마지막 단계 이후 값의 상한 2^LOG_N · q^(LOG_N+1)."""
    return (1 << params.log_n) * MODULUS ** (params.log_n + 1)


def check_capacity(params):
    """지연 감소 상한이 필드 안에 들어가는지 확인한다.

    Returns:
        int: 출력 mod_q 의 몫 비트 수
    """
    bound = output_bound(params)
    if not fits_in_field(bound):
        raise ConfigurationError(
            f"N={params.n} 의 NTT 중간값 상한 ({bound.bit_length()} 비트)이 필드를 넘습니다"
        )
    return quotient_bit_len(bound)


def ntt_circuit(cs, poly_var, params):
    """PolyVar → NTTPolyVar.

    입력 계수는 [0, q) 범위여야 한다 (호출자 책임).

    Args:
        cs: ConstraintSystem
        poly_var: 길이 N 의 PolyVar
        params: ParameterSet

    Raises:
        ConfigurationError: 길이가 N 이 아니거나 필드 용량이 부족할 때
    """
    n = params.n
    if len(poly_var) != n:
        raise ConfigurationError(f"NTT 입력 길이는 {n} 이어야 합니다: {len(poly_var)}")
    check_capacity(params)

    table = ntt_table(n)
    consts = bound_constants(params)
    before = cs.num_constraints

    out = list(poly_var.coeffs)
    t = n
    for l in range(params.log_n):
        m = 1 << l
        ht = t >> 1
        j1 = 0
        for i in range(m):
            s = table[m + i]
            for j in range(j1, j1 + ht):
                u = out[j]
                v = out[j + ht]
                out[j] = cs.lc([(u, 1), (v, s)])
                out[j + ht] = cs.lc([(u, 1), (v, -s)], consts[l + 1])
            j1 += t
        t = ht

    bound = output_bound(params)
    res = NTTPolyVar([mod_q(cs, x, bound) for x in out])
    logger.debug("ntt_circuit: n=%d, %d constraints", n, cs.num_constraints - before)
    return res
