"""
Falcon 키와 서명 (평문 참조 구현)
==================================

회로 테스트와 데모에 쓸 유효한 (공개키, 메시지, 서명) 을 만든다.

**서명 관계**:
  c = HashToPoint(nonce || message)
  s1 + s2·h ≡ c (mod q),  ||(s1, s2)||² < sig_l2_bound

  서명에는 s2 만 들어 있고, 검증자는 s1 = c - s2·h 를 다시 계산한다.

**서명 알고리즘**:
  목표 벡터 (c, 0) 에 대해 비밀 기저 B = [[g, -f], [G, -F]] 로
  링 단위 nearest-plane 반올림을 수행해 가까운 격자점 v 를 찾고
  (s1, s2) = (c, 0) - v 로 둔다. 반올림은 결정적이다. 가우시안 샘플링을
  하지 않으므로 비밀키 정보를 숨기지 못하며, 테스트 픽스처 생성용이다.

사용 예시:
    >>> keypair = KeyPair.keygen(512, seed=b"key seed")
    >>> sig = keypair.secret_key.sign_with_seed(b"test seed", b"testing message")
    >>> keypair.public_key.verify(b"testing message", sig)
    True
"""

import hashlib
import logging
import os

from falcon_zkp.falcon import codec
from falcon_zkp.falcon.fft import fft, ifft, sub_fft, mul_fft, div_fft, adj_fft, round_poly
from falcon_zkp.falcon.ntrugen import ShakePRNG, ntru_gen, poly_mul
from falcon_zkp.falcon.param import MODULUS, NONCE_LEN, get_params
from falcon_zkp.falcon.polynomial import Polynomial, NTTPolynomial


logger = logging.getLogger(__name__)


class PublicKey:
    """공개키 h = g / f mod q."""

    def __init__(self, h, params):
        self.h = h
        self.params = params

    @property
    def n(self):
        return self.params.n

    @classmethod
    def from_bytes(cls, data):
        params, coeffs = codec.decode_public_key(data)
        return cls(Polynomial(coeffs), params)

    def to_bytes(self):
        return codec.encode_public_key(self.h.coeffs, self.params)

    def unpack(self):
        return self.h

    def verify(self, message, signature):
        """서명 검증. 노름이 경계 이상이면 False."""
        if signature.params.n != self.n:
            return False
        c = Polynomial.from_hash_of_message(message, signature.nonce, self.n)
        s2 = signature.unpack()
        s1 = c - s2 * self.h
        return s1.l2_norm() + s2.l2_norm() < self.params.sig_l2_bound

    def __eq__(self, other):
        return isinstance(other, PublicKey) and self.h == other.h


class Signature:
    """서명 (nonce, s2). s2 는 부호 있는 정수 계수로 보관한다."""

    def __init__(self, nonce, s2, params):
        self.nonce = bytes(nonce)
        self.s2 = list(s2)
        self.params = params

    @classmethod
    def from_bytes(cls, data):
        params, nonce, s2 = codec.decode_signature(data)
        return cls(nonce, s2, params)

    def to_bytes(self):
        return codec.encode_signature(self.nonce, self.s2, self.params)

    def unpack(self):
        """s2 를 [0, q) 표현 Polynomial 로."""
        return Polynomial(self.s2)

    def __eq__(self, other):
        return (isinstance(other, Signature)
                and self.nonce == other.nonce and self.s2 == other.s2)


class SecretKey:
    """비밀 기저 (f, g, F, G)."""

    def __init__(self, f, g, F, G, params):
        self.f = f
        self.g = g
        self.F = F
        self.G = G
        self.params = params

        self._f_fft = fft(f)
        self._g_fft = fft(g)
        self._F_fft = fft(F)
        self._G_fft = fft(G)
        f_adj = adj_fft(self._f_fft)
        g_adj = adj_fft(self._g_fft)
        # <b1, b1> 와 Gram–Schmidt 벡터 b~2 = b2 - mu·b1
        self._b1_sq = [abs(a) ** 2 + abs(b) ** 2 for a, b in zip(self._g_fft, self._f_fft)]
        mu = [(G_ * ga + F_ * fa) / d for G_, ga, F_, fa, d in
              zip(self._G_fft, g_adj, self._F_fft, f_adj, self._b1_sq)]
        self._bt1 = sub_fft(self._G_fft, mul_fft(mu, self._g_fft))
        self._bt2 = [m * f_ - F_ for m, f_, F_ in zip(mu, self._f_fft, self._F_fft)]
        self._bt_sq = [abs(a) ** 2 + abs(b) ** 2 for a, b in zip(self._bt1, self._bt2)]

    @property
    def n(self):
        return self.params.n

    def public_key(self):
        f_ntt = Polynomial(self.f).to_ntt()
        g_ntt = Polynomial(self.g).to_ntt()
        h_ntt = NTTPolynomial([
            g * pow(f, MODULUS - 2, MODULUS) for g, f in zip(g_ntt.coeffs, f_ntt.coeffs)
        ])
        return PublicKey(h_ntt.to_poly(), self.params)

    def _preimage(self, c):
        """(c, 0) 에 가까운 격자점을 빼서 짧은 (s1, s2) 를 만든다."""
        c_fft = fft(c.coeffs)
        z2 = round_poly(ifft(div_fft(mul_fft(c_fft, adj_fft(self._bt1)), self._bt_sq)))
        z2_fft = fft(z2)
        t1 = sub_fft(c_fft, mul_fft(z2_fft, self._G_fft))
        t2 = mul_fft(z2_fft, self._F_fft)
        num = sub_fft(mul_fft(t1, adj_fft(self._g_fft)), mul_fft(t2, adj_fft(self._f_fft)))
        z1 = round_poly(ifft(div_fft(num, self._b1_sq)))

        z1f = poly_mul(z1, self.f)
        z2F = poly_mul(z2, self.F)
        z1g = poly_mul(z1, self.g)
        z2G = poly_mul(z2, self.G)
        s1 = [c_ - a - b for c_, a, b in zip(c.coeffs, z1g, z2G)]
        s2 = [a + b for a, b in zip(z1f, z2F)]
        return s1, s2

    def sign_with_seed(self, seed, message):
        """seed 에서 nonce 를 결정적으로 유도하여 서명한다.

        노름이 경계 이상이거나 압축이 안 되면 다음 nonce 로 다시 시도한다.
        """
        seed = bytes(seed)
        message = bytes(message)
        attempt = 0
        while True:
            nonce = hashlib.shake_256(
                b"nonce" + seed + message + attempt.to_bytes(4, "little")
            ).digest(NONCE_LEN)
            attempt += 1
            c = Polynomial.from_hash_of_message(message, nonce, self.n)
            s1, s2 = self._preimage(c)
            norm = sum(x * x for x in s1) + sum(x * x for x in s2)
            if norm >= self.params.sig_l2_bound:
                logger.debug("signature norm %d over bound, retrying", norm)
                continue
            slen = self.params.sig_bytelen - 1 - NONCE_LEN
            if codec.compress(s2, slen) is None:
                continue
            return Signature(nonce, s2, self.params)

    def sign(self, message):
        return self.sign_with_seed(os.urandom(32), message)


class KeyPair:
    """(SecretKey, PublicKey) 쌍."""

    def __init__(self, secret_key, public_key):
        self.secret_key = secret_key
        self.public_key = public_key

    @classmethod
    def keygen(cls, n=512, seed=None):
        """키 쌍을 생성한다. seed 가 같으면 같은 키가 나온다.

        Args:
            n: 링 차원 (512 또는 1024)
            seed: 바이트 시드 (None 이면 os.urandom)
        """
        params = get_params(n)
        if seed is None:
            seed = os.urandom(48)
        f, g, F, G = ntru_gen(params.n, ShakePRNG(seed))
        sk = SecretKey(f, g, F, G, params)
        return cls(sk, sk.public_key())
