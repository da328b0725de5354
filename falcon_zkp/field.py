"""
회로 필드 (Native Proof Field)
================================

모든 제약 시스템이 공유하는 기본 유한체를 정의한다.

**유한체 FR**:
  bn128 타원곡선의 스칼라 필드. Falcon 서명 링의 계수(q = 12289)보다
  훨씬 큰 필드이므로, NTT 중간값을 모듈러 감소 없이 누적할 수 있다.
  - 위수 p ≈ 2^254
  - 2^9 · q^10 (N=512) 과 2^10 · q^11 (N=1024) 모두 p보다 작다

**내부 표현**:
  제약 시스템 내부에서는 속도를 위해 p로 감소된 int를 사용하고,
  외부 API(공개 입력, 할당 벡터)에서만 FR 객체로 변환한다.

사용 예시:
    >>> from falcon_zkp.field import FR, to_fr
    >>> FR(3) * FR(7)           # FR(21)
    >>> to_fr(-1) == FR(CURVE_ORDER - 1)
    True
"""

from py_ecc.fields import bn128_FQ as FQ
from py_ecc import bn128


class FR(FQ):
    """bn128 스칼라 필드 위의 유한체 원소.

    py_ecc의 FQ 클래스를 상속하여 +, -, *, /, ** 등의 필드 연산을 제공한다.
    """
    field_modulus = bn128.curve_order


# 곡선 위수 (필드 크기)
CURVE_ORDER = bn128.curve_order


def to_fr(value):
    """정수 또는 FR 값을 FR 원소로 변환한다."""
    if isinstance(value, FR):
        return value
    return FR(int(value) % CURVE_ORDER)


def to_int(value):
    """정수 또는 FR 값을 [0, p) 범위의 int로 변환한다."""
    return int(value) % CURVE_ORDER


def fits_in_field(bound):
    """정수 bound가 필드 안에서 감소 없이 표현되는지 확인한다.

    Args:
        bound: 누적값의 상한 (정수)

    Returns:
        bool: bound < p 이면 True
    """
    return bound < CURVE_ORDER
