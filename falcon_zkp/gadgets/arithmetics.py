"""
mod q 산술 가젯
================

**mod_q**:  b = a mod q   (a 는 정수로서 [0, bound) 범위)

    (1) a - t·q = b         (t = a div q, b = a mod q 를 witness 로 둔다)
    (2) b < q               (range proof)
    (3) t < 2^k,  k = bitlen((bound - 1) div q)

  (3) 이 없으면 필드에서 t = (a - b)·q⁻¹ 로 임의의 b < q 를 맞출 수 있다.
  t·q + b < 2^k·q + q 가 필드 위수보다 작으므로 (1) 은 정수 등식이 되고,
  b 는 a mod q 로 유일하게 정해진다. bound 는 호출자가 아는 입력 상한이다.

  | 호출자                | bound           |
  |-----------------------|-----------------|
  | add_mod / sub_mod     | 2q              |
  | mul_mod               | q²              |
  | inner_product_mod     | len · q²        |
  | ntt_circuit 출력      | 2^LOG_N·q^(LOG_N+1) |

**inner_product_mod**:  c = <a, b> mod q
  곱-누적(mul_add) 사슬로 합을 만든 뒤 mod_q 를 한 번만 적용한다.
"""

from falcon_zkp.errors import ConfigurationError
from falcon_zkp.falcon.param import MODULUS
from falcon_zkp.field import fits_in_field
from falcon_zkp.gadgets.range_proofs import enforce_less_than_q


def quotient_bit_len(bound):
    """a < bound 일 때 몫 a div q 를 담는 비트 수.

    Raises:
        ConfigurationError: bound 가 양수가 아니거나 t·q + b 가 필드를 넘을 수 있을 때
    """
    if bound < 1:
        raise ConfigurationError(f"mod_q 입력 상한은 양수여야 합니다: {bound}")
    bits = max(1, ((bound - 1) // MODULUS).bit_length())
    if not fits_in_field((1 << bits) * MODULUS):
        raise ConfigurationError(f"mod_q 몫 {bits} 비트가 필드를 넘습니다")
    return bits


def mod_q(cs, a, bound):
    """b = a mod q 인 변수 b 를 반환한다.

    Args:
        cs: ConstraintSystem
        a: 감소할 변수 (정수로서 [0, bound) 범위)
        bound: a 의 배타적 상한. 몫의 범위 검사 폭을 정한다

    Raises:
        ConfigurationError: bound 가 필드 용량을 넘을 때
    """
    qbits = quotient_bit_len(bound)
    va = cs.value(a)
    t = cs.alloc_witness(va // MODULUS)
    b = cs.alloc_witness(va % MODULUS)
    cs.enforce_linear([(a, 1), (t, -MODULUS), (b, -1)])
    enforce_less_than_q(cs, b)
    cs.unpack(t, qbits)
    return b


def add_mod(cs, a, b):
    return mod_q(cs, cs.add(a, b), 2 * MODULUS)


def sub_mod(cs, a, b):
    """(a - b) mod q. a, b < q 라고 가정하고 q 를 더해 음수를 피한다."""
    return mod_q(cs, cs.lc([(a, 1), (b, -1)], MODULUS), 2 * MODULUS)


def mul_mod(cs, a, b):
    return mod_q(cs, cs.mul(a, b), MODULUS * MODULUS)


def inner_product_mod(cs, a, b):
    """<a, b> mod q.

    a 의 원소는 q 미만, b 의 원소는 q 이하라고 가정한다.

    Raises:
        ConfigurationError: 길이가 다르거나 비어 있을 때
    """
    if len(a) != len(b) or not a:
        raise ConfigurationError(f"내적 길이가 잘못되었습니다: {len(a)} vs {len(b)}")
    acc = cs.mul(a[0], b[0])
    for x, y in zip(a[1:], b[1:]):
        acc = cs.mul_add(x, y, acc)
    return mod_q(cs, acc, len(a) * MODULUS * MODULUS)


def vector_matrix_mul_mod(cs, a, rows):
    """a · M mod q (M 의 각 행과의 내적)."""
    if not rows:
        raise ConfigurationError("빈 행렬입니다")
    return [inner_product_mod(cs, a, row) for row in rows]
