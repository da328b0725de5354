"""
복소 FFT over ℝ[x]/(x^N + 1)
==============================

키 생성(NTRU 방정식 풀이)과 서명(nearest-plane 반올림)에서 쓰는
부동소수점 변환. 다항식 a 를 x^N + 1 의 N개 근

    ζ_j = exp(iπ(2j + 1) / N),   j = 0, ..., N-1

에서 평가한다. a(x) = a_e(x²) + x·a_o(x²) 로 쪼개면 ζ_j² 는 x^(N/2) + 1 의
(j mod N/2)번째 근이므로 재귀가 닫힌다:

    A[j] = A_e[j mod N/2] + ζ_j · A_o[j mod N/2]

이 평가 순서에서 adj(a)(x) = a(1/x) 는 각 값의 켤레이다.
"""

import cmath


def _root(j, n):
    return cmath.exp(1j * cmath.pi * (2 * j + 1) / n)


def fft(coeffs):
    """계수 리스트 → N개 복소 평가값."""
    n = len(coeffs)
    if n == 1:
        return [complex(coeffs[0])]
    half = n // 2
    even = fft(coeffs[0::2])
    odd = fft(coeffs[1::2])
    out = []
    for j in range(n):
        k = j % half
        out.append(even[k] + _root(j, n) * odd[k])
    return out


def ifft(values):
    """N개 복소 평가값 → 실수 계수 리스트."""
    return [z.real for z in _ifft(values)]


def _ifft(values):
    n = len(values)
    if n == 1:
        return [values[0]]
    half = n // 2
    even = []
    odd = []
    for k in range(half):
        even.append((values[k] + values[k + half]) / 2)
        odd.append((values[k] - values[k + half]) / (2 * _root(k, n)))
    even = _ifft(even)
    odd = _ifft(odd)
    out = []
    for k in range(half):
        out.append(even[k])
        out.append(odd[k])
    return out


def add_fft(a, b):
    return [x + y for x, y in zip(a, b)]


def sub_fft(a, b):
    return [x - y for x, y in zip(a, b)]


def mul_fft(a, b):
    return [x * y for x, y in zip(a, b)]


def div_fft(a, b):
    return [x / y for x, y in zip(a, b)]


def adj_fft(a):
    return [x.conjugate() for x in a]


def round_poly(coeffs):
    return [int(round(c)) for c in coeffs]
