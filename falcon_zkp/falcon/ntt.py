"""
평문 NTT (Number-Theoretic Transform) mod q
=============================================

ℤ_q[x]/(x^N + 1) 위의 음순환(negacyclic) NTT.

**트위들 테이블**:
  psi 를 2N차 원시 단위근이라 하면

    ntt_table(n)[k]     = psi^bitrev(k)
    inv_ntt_table(n)[k] = psi^(-bitrev(k))

  bitrev 는 log2(N) 비트 반전이다. 회로 내부 NTT 도 같은 테이블을 쓴다.

**정방향 (Cooley–Tukey)**:
  m = 1, 2, 4, ... 단계마다 블록 i 의 쌍 (u, v) 를
    u' = u + v·s,  v' = u - v·s   (s = table[m + i])
  로 바꾼다. 결과는 비트 반전 순서.

**역방향 (Gentleman–Sande)**:
  정방향의 역순으로 진행하고 마지막에 N^(-1) 을 곱한다.

사용 예시:
    >>> a = [1] + [0] * 511
    >>> intt(ntt(a)) == a
    True
"""

from falcon_zkp.falcon.param import MODULUS


_TABLES = {}


def _generator():
    """Z_q* 의 가장 작은 원시근."""
    order = MODULUS - 1
    for g in range(2, MODULUS):
        if pow(g, order // 2, MODULUS) != 1 and pow(g, order // 3, MODULUS) != 1:
            return g
    raise ArithmeticError("primitive root not found")


def bit_reverse(k, bits):
    """k 의 하위 bits 비트를 뒤집는다."""
    res = 0
    for _ in range(bits):
        res = (res << 1) | (k & 1)
        k >>= 1
    return res


def _build_tables(n):
    log_n = n.bit_length() - 1
    if (MODULUS - 1) % (2 * n):
        raise ValueError(f"q - 1 은 2N 으로 나누어떨어져야 합니다: N={n}")
    psi = pow(_generator(), (MODULUS - 1) // (2 * n), MODULUS)
    psi_inv = pow(psi, MODULUS - 2, MODULUS)
    fwd = [pow(psi, bit_reverse(k, log_n), MODULUS) for k in range(n)]
    inv = [pow(psi_inv, bit_reverse(k, log_n), MODULUS) for k in range(n)]
    return fwd, inv


def ntt_table(n):
    """정방향 트위들 테이블 (읽기 전용으로 공유된다)."""
    if n not in _TABLES:
        _TABLES[n] = _build_tables(n)
    return _TABLES[n][0]


def inv_ntt_table(n):
    """역방향 트위들 테이블."""
    if n not in _TABLES:
        _TABLES[n] = _build_tables(n)
    return _TABLES[n][1]


def ntt(coeffs):
    """계수 표현 → NTT 표현.

    Args:
        coeffs: [0, q) 범위 정수 리스트 (길이 N)

    Returns:
        list[int]: NTT 값 (비트 반전 순서)
    """
    n = len(coeffs)
    table = ntt_table(n)
    a = list(coeffs)
    t = n
    m = 1
    while m < n:
        t >>= 1
        for i in range(m):
            j1 = 2 * i * t
            s = table[m + i]
            for j in range(j1, j1 + t):
                u = a[j]
                v = a[j + t] * s % MODULUS
                a[j] = (u + v) % MODULUS
                a[j + t] = (u - v) % MODULUS
        m <<= 1
    return a


def intt(values):
    """NTT 표현 → 계수 표현."""
    n = len(values)
    table = inv_ntt_table(n)
    a = list(values)
    t = 1
    m = n
    while m > 1:
        hm = m >> 1
        j1 = 0
        for i in range(hm):
            s = table[hm + i]
            for j in range(j1, j1 + t):
                u = a[j]
                v = a[j + t]
                a[j] = (u + v) % MODULUS
                a[j + t] = (u - v) * s % MODULUS
            j1 += 2 * t
        t <<= 1
        m = hm
    n_inv = pow(n, MODULUS - 2, MODULUS)
    return [x * n_inv % MODULUS for x in a]
