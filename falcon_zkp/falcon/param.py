"""
Falcon 파라미터 집합
=====================

링 ℤ_q[x]/(x^N + 1) 의 차원 N 에 따라 달라지는 상수들을 묶는다.

  | N    | LOG_N | L2 bound  | bound bits | pk bytes | sig bytes |
  |------|-------|-----------|------------|----------|-----------|
  | 512  | 9     | 34034726  | 26         | 897      | 666       |
  | 1024 | 10    | 70265242  | 27         | 1793     | 1280      |

사용 예시:
    >>> params = get_params(512)
    >>> params.log_n
    9
    >>> params.sig_l2_bound.bit_length()
    26
"""

from falcon_zkp.errors import ConfigurationError


MODULUS = 12289

# (q - 1) / 2: 중심화(centered) 표현의 경계
MODULUS_MINUS_1_OVER_TWO = (MODULUS - 1) // 2

NONCE_LEN = 40


class ParameterSet:
    """링 차원 N 하나에 대한 Falcon 상수 묶음.

    속성:
        n: 링 차원 (512 또는 1024)
        log_n: log2(n)
        sig_l2_bound: (s1, s2) 제곱 L2 노름의 상한 (이 값 미만이어야 함)
        pk_bytelen: 공개키 바이트 길이 (헤더 포함)
        sig_bytelen: 서명 바이트 길이 (헤더, nonce 포함)
    """

    def __init__(self, n, sig_l2_bound, pk_bytelen, sig_bytelen):
        if n < 2 or n & (n - 1):
            raise ConfigurationError(f"n은 2의 거듭제곱이어야 합니다: {n}")
        self.n = n
        self.log_n = n.bit_length() - 1
        self.sig_l2_bound = sig_l2_bound
        self.pk_bytelen = pk_bytelen
        self.sig_bytelen = sig_bytelen

    @property
    def norm_bound_bits(self):
        """노름 비교 게이트가 분해할 비트 수."""
        return self.sig_l2_bound.bit_length()

    @property
    def modulus(self):
        return MODULUS

    def __repr__(self):
        return f"ParameterSet(n={self.n})"


FALCON_512 = ParameterSet(512, 34034726, 897, 666)
FALCON_1024 = ParameterSet(1024, 70265242, 1793, 1280)

PARAMS = {
    512: FALCON_512,
    1024: FALCON_1024,
}


def get_params(n):
    """링 차원에 대응하는 ParameterSet을 반환한다.

    Raises:
        ConfigurationError: 지원하지 않는 차원일 때
    """
    try:
        return PARAMS[n]
    except KeyError:
        raise ConfigurationError(f"지원하지 않는 링 차원입니다: {n}") from None
