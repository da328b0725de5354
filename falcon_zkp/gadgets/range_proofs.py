"""
범위 증명 가젯 (Range-Proof Gadgets)
=====================================

**상수 비교기 (less-than-constant)**:
  a 를 num_bits 비트로 분해한 뒤, 상수 bound 의 비트 패턴을 LSB 부터 훑으며
  "a 의 하위 비트들 < bound 의 하위 비트들" 을 나타내는 불리언 lt 를 만든다.

    bound 의 비트가 1 인 구간 R:  lt ← NOT(AND(a_R)) OR lt
    bound 의 비트가 0 인 구간 R:  lt ← NOT(OR(a_R)) AND lt
    bound 의 가장 낮은 1 아래:    lt = false

  같은 값의 비트 구간을 한 번에 묶으므로, bound 가 바뀌어도 식을 다시
  유도할 필요가 없다.

**q = 12289 = 0b11_0000_0000_0001 의 경우** (14비트):
    lt = NOT(a13 AND a12) OR (a0..a11 모두 0)
  즉 "bit13=0 또는 bit12=0 또는 하위 12비트가 모두 0".

**leq765**:
  a = a1 + a2 + a3 로 나누고 각 limb 를 8비트 range gate 로 [0, 255] 에
  묶는다 (765 = 3·255). 백엔드의 range gate 폭이 8이 아니면 구성 오류.

사용 예시:
    >>> enforce_less_than_q(cs, b)
    >>> lt = is_less_than_6144(cs, e)
    >>> enforce_less_than_norm_bound(cs, norm, get_params(512))
"""

from falcon_zkp.errors import ConfigurationError
from falcon_zkp.falcon.param import MODULUS


Q_BITS = 14

LEQ_765_LIMB = 255
LEQ_765_LIMB_BITS = 8


def is_less_than_constant(cs, a, bound, num_bits):
    """a < bound 이면 1 인 불리언 변수를 반환한다.

    a 는 num_bits 비트로 분해되므로 a ≥ 2^num_bits 이면 회로가 불만족된다.

    Args:
        cs: ConstraintSystem
        a: 변수
        bound: 양의 정수 상수, bound ≤ 2^num_bits
        num_bits: 분해 비트 수

    Raises:
        ConfigurationError: bound 가 범위를 벗어날 때
    """
    if bound < 1 or bound > (1 << num_bits):
        raise ConfigurationError(f"bound {bound} 는 {num_bits} 비트 범위를 벗어납니다")
    bits = cs.unpack(a, num_bits)
    if bound == 1 << num_bits:
        return cs.constant(1)

    pattern = [(bound >> i) & 1 for i in range(num_bits)]
    i = 0
    while not pattern[i]:
        i += 1
    lt = None
    while i < num_bits:
        j = i
        while j < num_bits and pattern[j] == pattern[i]:
            j += 1
        run = bits[i:j]
        if pattern[i]:
            branch = cs.logic_not(cs.logic_and_all(run))
            lt = branch if lt is None else cs.logic_or(branch, lt)
        else:
            lt = cs.logic_and(cs.logic_not(cs.logic_or_all(run)), lt)
        i = j
    return lt


def enforce_less_than_constant(cs, a, bound, num_bits):
    """a < bound 를 강제한다."""
    if bound == 1 << num_bits:
        cs.unpack(a, num_bits)
        return
    cs.enforce_true(is_less_than_constant(cs, a, bound, num_bits))


def enforce_less_than_q(cs, a):
    enforce_less_than_constant(cs, a, MODULUS, Q_BITS)


def is_less_than_6144(cs, a):
    """a < 6144 = 2^12 + 2^11 (14비트 분해)."""
    return is_less_than_constant(cs, a, 6144, Q_BITS)


def enforce_less_than_6144(cs, a):
    enforce_less_than_constant(cs, a, 6144, Q_BITS)


def enforce_less_than_1024(cs, a):
    """a < 1024: 10비트 분해만으로 충분하다."""
    enforce_less_than_constant(cs, a, 1024, 10)


def enforce_less_than_norm_bound(cs, a, params):
    """a < params.sig_l2_bound (512: 26비트, 1024: 27비트)."""
    enforce_less_than_constant(cs, a, params.sig_l2_bound, params.norm_bound_bits)


def enforce_leq_765(cs, a):
    """a ≤ 765 를 세 개의 8비트 limb 로 증명한다.

    Raises:
        ConfigurationError: 백엔드 range gate 폭이 8비트가 아닐 때
    """
    if cs.range_bit_len != LEQ_765_LIMB_BITS:
        raise ConfigurationError(
            f"leq765 는 8비트 range gate 가 필요합니다: {cs.range_bit_len}"
        )
    va = cs.value(a)
    if va >= 2 * LEQ_765_LIMB:
        split = (LEQ_765_LIMB, LEQ_765_LIMB, va - 2 * LEQ_765_LIMB)
    elif va >= LEQ_765_LIMB:
        split = (LEQ_765_LIMB, va - LEQ_765_LIMB, 0)
    else:
        split = (va, 0, 0)
    limbs = [cs.alloc_witness(x) for x in split]
    for limb in limbs:
        cs.enforce_range(limb, LEQ_765_LIMB_BITS)
    terms = [(a, 1)]
    terms.extend((limb, -1) for limb in limbs)
    cs.enforce_linear(terms)
