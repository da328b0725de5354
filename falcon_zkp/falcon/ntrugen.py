"""
NTRU 키 생성 (f, g, F, G)
==========================

비밀 기저

    B = | g  -f |
        | G  -F |

를 만든다. 조건:
  - f, g: 작은 이산 가우시안 계수, ||(g, -f)||² 와 Gram–Schmidt 노름이
    1.17²·q 이하
  - f 는 mod q 에서 가역 (NTT 값에 0이 없음)
  - NTRU 방정식 f·G - g·F = q (mod x^N + 1)

**NTRU 방정식 풀이**:
  필드 노름 N(f)(x²) = f(x)·f(-x) 로 차원을 절반씩 줄여 정수 방정식까지
  내려간 뒤 확장 유클리드로 풀고, 올라오면서 (F, G) 를 (f, g) 방향으로
  Babai 축소한다. 큰 정수는 상위 53비트만 잘라 FFT 로 몫 k 를 추정한다.

**샘플러**:
  SHAKE256 스트림을 512바이트 단위로 읽어 16비트 little-endian 값으로 바꾸고,
  누적분포 테이블과 비교해 계수를 뽑는다. 계수합이 홀수가 될 때까지 반복한다.

사용 예시:
    >>> prng = ShakePRNG(b"seed")
    >>> f, g, F, G = ntru_gen(512, prng)
"""

import hashlib
import logging

from falcon_zkp.falcon.fft import fft, ifft, add_fft, mul_fft, div_fft, adj_fft, round_poly
from falcon_zkp.falcon.ntt import ntt
from falcon_zkp.falcon.param import MODULUS


logger = logging.getLogger(__name__)

# (1.17·√q)²
GS_NORM_BOUND = (1.17 ** 2) * MODULUS

MAX_FG_COEFF = 127


# ─────────────────────────────────────────────────────────────────────
# 가우시안 샘플링
# ─────────────────────────────────────────────────────────────────────

# 차원 256 이하 / 512 / 1024 용 누적분포 테이블 (16비트 스케일)
GAUSS_TAB8 = [
    1, 3, 6, 11, 22, 40, 73, 129,
    222, 371, 602, 950, 1460, 2183, 3179, 4509,
    6231, 8395, 11032, 14150, 17726, 21703, 25995, 30487,
    35048, 39540, 43832, 47809, 51385, 54503, 57140, 59304,
    61026, 62356, 63352, 64075, 64585, 64933, 65164, 65313,
    65406, 65462, 65495, 65513, 65524, 65529, 65532, 65534,
]
GAUSS_TAB9 = [
    1, 4, 11, 28, 65, 146, 308, 615,
    1164, 2083, 3535, 5692, 8706, 12669, 17574, 23285,
    29542, 35993, 42250, 47961, 52866, 56829, 59843, 62000,
    63452, 64371, 64920, 65227, 65389, 65470, 65507, 65524,
    65531, 65534,
]
GAUSS_TAB10 = [
    2, 8, 28, 94, 280, 742, 1761, 3753,
    7197, 12472, 19623, 28206, 37329, 45912, 53063, 58338,
    61782, 63774, 64793, 65255, 65441, 65507, 65527, 65533,
]


class ShakePRNG:
    """시드에서 결정적으로 뽑는 SHAKE256 기반 난수열."""

    def __init__(self, seed):
        self._seed = bytes(seed)
        self._block = 0
        self._words = []
        self._ptr = 0

    def next_512(self):
        """다음 512바이트 블록."""
        data = hashlib.shake_256(self._seed + self._block.to_bytes(8, "little")).digest(512)
        self._block += 1
        return data

    def next_u16(self):
        if self._ptr >= len(self._words):
            bb = self.next_512()
            self._words = [bb[2 * i] | (bb[2 * i + 1] << 8) for i in range(256)]
            self._ptr = 0
        y = self._words[self._ptr]
        self._ptr += 1
        return y


def gauss_sample(logn, prng):
    """계수합이 홀수인 가우시안 다항식 하나를 뽑는다.

    차원 256 이하에서는 256용 테이블 샘플을 여러 개 더해 분산을 맞춘다.
    """
    if logn == 10:
        tab, rounds = GAUSS_TAB10, 1
    elif logn == 9:
        tab, rounds = GAUSS_TAB9, 1
    elif 1 <= logn <= 8:
        tab, rounds = GAUSS_TAB8, 1 << (8 - logn)
    else:
        raise ValueError(f"지원하지 않는 logn: {logn}")

    half = len(tab) >> 1
    n = 1 << logn
    while True:
        coeffs = []
        for _ in range(n):
            while True:
                v = 0
                for _ in range(rounds):
                    y = prng.next_u16()
                    v += sum(1 for t in tab if t < y) - half
                if -MAX_FG_COEFF <= v <= MAX_FG_COEFF:
                    break
            coeffs.append(v)
        if sum(coeffs) & 1:
            return coeffs


# ─────────────────────────────────────────────────────────────────────
# 정수 다항식 연산 (mod x^n + 1)
# ─────────────────────────────────────────────────────────────────────

def poly_mul(a, b):
    """정수 계수 음순환 곱셈."""
    n = len(a)
    buf = [0] * (2 * n)
    for i, x in enumerate(a):
        if x == 0:
            continue
        for j, y in enumerate(b):
            buf[i + j] += x * y
    return [buf[i] - buf[i + n] for i in range(n)]


def field_norm(a):
    """N(a)(x²) = a(x)·a(-x) 를 만족하는 절반 차원 다항식."""
    half = len(a) // 2
    ae_sq = poly_mul(a[0::2], a[0::2])
    ao_sq = poly_mul(a[1::2], a[1::2])
    res = ae_sq[:]
    for i in range(half - 1):
        res[i + 1] -= ao_sq[i]
    res[0] += ao_sq[half - 1]
    return res


def lift(a):
    """a(x) → a(x²)."""
    res = [0] * (2 * len(a))
    for i, x in enumerate(a):
        res[2 * i] = x
    return res


def galois_conjugate(a):
    """a(x) → a(-x)."""
    return [-x if i & 1 else x for i, x in enumerate(a)]


def xgcd(b, n):
    """확장 유클리드: (d, u, v), u·b + v·n = d."""
    x0, x1, y0, y1 = 1, 0, 0, 1
    while n != 0:
        quot, b, n = b // n, n, b % n
        x0, x1 = x1, x0 - quot * x1
        y0, y1 = y1, y0 - quot * y1
    return b, x0, y0


def bitsize(x):
    """|x| 의 비트 길이를 8의 배수로 올림."""
    val = abs(x)
    res = 0
    while val:
        res += 8
        val >>= 8
    return res


def reduce(f, g, F, G):
    """(F, G) 에서 k·(f, g) 를 빼서 크기를 줄인다 (Babai 축소).

    큰 정수를 상위 53비트만 남기고 잘라 FFT 로 k 를 근사하고,
    더 줄어들지 않을 때까지 반복한다.
    """
    n = len(f)
    size = max(53, max(bitsize(x) for x in f + g))
    fa_fft = fft([x >> (size - 53) for x in f])
    ga_fft = fft([x >> (size - 53) for x in g])
    den_fft = add_fft(mul_fft(fa_fft, adj_fft(fa_fft)), mul_fft(ga_fft, adj_fft(ga_fft)))
    F = list(F)
    G = list(G)
    while True:
        big = max(53, max(bitsize(x) for x in F + G))
        if big < size:
            break
        Fa_fft = fft([x >> (big - 53) for x in F])
        Ga_fft = fft([x >> (big - 53) for x in G])
        num_fft = add_fft(mul_fft(Fa_fft, adj_fft(fa_fft)), mul_fft(Ga_fft, adj_fft(ga_fft)))
        k = round_poly(ifft(div_fft(num_fft, den_fft)))
        if not any(k):
            break
        fk = poly_mul(f, k)
        gk = poly_mul(g, k)
        shift = big - size
        for i in range(n):
            F[i] -= fk[i] << shift
            G[i] -= gk[i] << shift
    return F, G


def ntru_solve(f, g):
    """f·G - g·F = q 를 만족하는 (F, G) 를 찾는다.

    Raises:
        ValueError: 바닥 단계에서 gcd(N(f), N(g)) ≠ 1 일 때
    """
    if len(f) == 1:
        d, u, v = xgcd(f[0], g[0])
        if d != 1:
            raise ValueError("field norms are not coprime")
        return [-MODULUS * v], [MODULUS * u]
    Fp, Gp = ntru_solve(field_norm(f), field_norm(g))
    F = poly_mul(lift(Fp), galois_conjugate(g))
    G = poly_mul(lift(Gp), galois_conjugate(f))
    return reduce(f, g, F, G)


def gs_norm(f, g):
    """기저 B 의 Gram–Schmidt 노름 제곱 (두 행 중 큰 값)."""
    n = len(f)
    sq_fg = sum(x * x for x in f) + sum(x * x for x in g)
    f_fft = fft(f)
    g_fft = fft(g)
    inv_sum = sum(1.0 / (abs(a) ** 2 + abs(b) ** 2) for a, b in zip(f_fft, g_fft))
    sq_ft = MODULUS ** 2 * inv_sum / n
    return max(sq_fg, sq_ft)


def _is_invertible_mod_q(f):
    return all(x != 0 for x in ntt([x % MODULUS for x in f]))


def ntru_gen(n, prng):
    """비밀 기저 (f, g, F, G) 를 생성한다.

    Args:
        n: 링 차원 (2의 거듭제곱, 4 ~ 1024)
        prng: ShakePRNG

    Returns:
        tuple: (f, g, F, G) 정수 리스트
    """
    logn = n.bit_length() - 1
    attempts = 0
    while True:
        attempts += 1
        f = gauss_sample(logn, prng)
        g = gauss_sample(logn, prng)
        if gs_norm(f, g) > GS_NORM_BOUND:
            continue
        if not _is_invertible_mod_q(f):
            continue
        try:
            F, G = ntru_solve(f, g)
        except ValueError:
            logger.debug("ntru_solve failed on attempt %d", attempts)
            continue
        if any(abs(x) > MAX_FG_COEFF for x in F + G):
            continue
        fG = poly_mul(f, G)
        gF = poly_mul(g, F)
        if [a - b for a, b in zip(fG, gF)] != [MODULUS] + [0] * (n - 1):
            continue
        logger.debug("ntru basis found after %d attempts (n=%d)", attempts, n)
        return f, g, F, G
