"""
평문 링 원소 (Cleartext Ring Elements)
========================================

회로에 witness/공개 입력으로 넣을 값을 평문에서 계산하는 데 사용한다.

**Polynomial**:
  ℤ_q[x]/(x^N + 1) 의 원소. 계수는 항상 [0, q) 범위로 저장된다.

**NTTPolynomial**:
  같은 원소의 NTT 표현. 좌표별 곱셈이 링 곱셈과 같다.

**DualPolynomial**:
  부호 분리 표현 (pos, neg). 각 인덱스에서 pos[i], neg[i] 중 최대 하나만
  0이 아니며, 중심화된 계수는 pos[i] - neg[i] 이다.

사용 예시:
    >>> hm = Polynomial.from_hash_of_message(b"testing message", nonce)
    >>> v = hm - sig * pk
    >>> v.l2_norm() + sig.l2_norm() < params.sig_l2_bound
"""

import hashlib

from falcon_zkp.errors import ConfigurationError
from falcon_zkp.falcon.ntt import ntt, intt
from falcon_zkp.falcon.param import MODULUS, MODULUS_MINUS_1_OVER_TWO


# 16비트 샘플 중 q의 배수 경계 (5q = 61445) 미만만 채택한다
HASH_SAMPLE_THRESHOLD = 5 * MODULUS


def _check_same_length(a, b):
    if len(a.coeffs) != len(b.coeffs):
        raise ConfigurationError(
            f"다항식 길이가 다릅니다: {len(a.coeffs)} vs {len(b.coeffs)}"
        )


class Polynomial:
    """계수 표현 링 원소."""

    def __init__(self, coeffs):
        self.coeffs = [int(c) % MODULUS for c in coeffs]

    @property
    def n(self):
        return len(self.coeffs)

    @classmethod
    def zero(cls, n):
        return cls([0] * n)

    @classmethod
    def from_hash_of_message(cls, message, nonce, n=512):
        """SHAKE256(nonce || message) 에서 계수를 뽑는다.

        2바이트씩 big-endian 으로 읽어 61445 미만인 값만 채택하고 q로 감소한다.

        Args:
            message: 메시지 바이트
            nonce: 서명 nonce 바이트
            n: 링 차원

        Returns:
            Polynomial: 해시된 메시지 다항식
        """
        shake = hashlib.shake_256(bytes(nonce) + bytes(message))
        length = 4 * n
        stream = shake.digest(length)
        coeffs = []
        pos = 0
        while len(coeffs) < n:
            if pos + 2 > length:
                length *= 2
                stream = shake.digest(length)
            sample = (stream[pos] << 8) | stream[pos + 1]
            pos += 2
            if sample < HASH_SAMPLE_THRESHOLD:
                coeffs.append(sample % MODULUS)
        return cls(coeffs)

    def to_ntt(self):
        return NTTPolynomial(ntt(self.coeffs))

    def __add__(self, other):
        _check_same_length(self, other)
        return Polynomial([a + b for a, b in zip(self.coeffs, other.coeffs)])

    def __sub__(self, other):
        _check_same_length(self, other)
        return Polynomial([a - b for a, b in zip(self.coeffs, other.coeffs)])

    def __neg__(self):
        return Polynomial([-a for a in self.coeffs])

    def __mul__(self, other):
        _check_same_length(self, other)
        return (self.to_ntt() * other.to_ntt()).to_poly()

    def schoolbook_mul(self, other):
        """O(N²) 음순환 곱셈. NTT 곱셈의 교차 검증용."""
        _check_same_length(self, other)
        n = self.n
        buf = [0] * (2 * n)
        for i, a in enumerate(self.coeffs):
            if a == 0:
                continue
            for j, b in enumerate(other.coeffs):
                buf[i + j] += a * b
        return Polynomial([buf[i] - buf[i + n] for i in range(n)])

    def centered(self):
        """[-(q+1)/2, (q-1)/2) 범위의 부호 있는 계수 리스트."""
        return [c - MODULUS if c >= MODULUS_MINUS_1_OVER_TWO else c for c in self.coeffs]

    def l2_norm(self):
        """중심화된 계수의 제곱 L2 노름."""
        return sum(c * c for c in self.centered())

    def infinity_norm(self):
        return max(abs(c) for c in self.centered())

    def __eq__(self, other):
        return isinstance(other, Polynomial) and self.coeffs == other.coeffs

    def __repr__(self):
        return f"Polynomial(n={self.n}, coeffs={self.coeffs[:4]}...)"


class NTTPolynomial:
    """NTT 표현 링 원소."""

    def __init__(self, coeffs):
        self.coeffs = [int(c) % MODULUS for c in coeffs]

    @property
    def n(self):
        return len(self.coeffs)

    def to_poly(self):
        return Polynomial(intt(self.coeffs))

    def __add__(self, other):
        _check_same_length(self, other)
        return NTTPolynomial([a + b for a, b in zip(self.coeffs, other.coeffs)])

    def __sub__(self, other):
        _check_same_length(self, other)
        return NTTPolynomial([a - b for a, b in zip(self.coeffs, other.coeffs)])

    def __mul__(self, other):
        _check_same_length(self, other)
        return NTTPolynomial([a * b for a, b in zip(self.coeffs, other.coeffs)])

    def __eq__(self, other):
        return isinstance(other, NTTPolynomial) and self.coeffs == other.coeffs


class DualPolynomial:
    """부호 분리 링 원소 (pos, neg).

    pos[i] · neg[i] == 0 이 항상 성립한다.
    """

    def __init__(self, pos, neg):
        if len(pos.coeffs) != len(neg.coeffs):
            raise ConfigurationError("pos/neg 길이가 다릅니다")
        for i, (p, m) in enumerate(zip(pos.coeffs, neg.coeffs)):
            if p and m:
                raise ConfigurationError(f"인덱스 {i}에서 pos, neg 가 모두 0이 아닙니다")
        self.pos = pos
        self.neg = neg

    @property
    def n(self):
        return self.pos.n

    @classmethod
    def from_polynomial(cls, poly):
        """[0, q) 표현을 부호 분리 표현으로 바꾼다.

        e < (q-1)/2 이면 pos 에, 그렇지 않으면 neg = q - e 에 넣는다.
        """
        pos = []
        neg = []
        for e in poly.coeffs:
            if e < MODULUS_MINUS_1_OVER_TWO:
                pos.append(e)
                neg.append(0)
            else:
                pos.append(0)
                neg.append(MODULUS - e)
        return cls(Polynomial(pos), Polynomial(neg))

    def to_polynomial(self):
        return self.pos - self.neg

    def l2_norm(self):
        return sum(p * p + m * m for p, m in zip(self.pos.coeffs, self.neg.coeffs))

    def infinity_norm(self):
        return max(max(self.pos.coeffs), max(self.neg.coeffs))
