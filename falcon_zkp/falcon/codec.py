"""
공개키 / 서명 바이트 인코딩
============================

**공개키** (pk_bytelen 바이트):
  헤더 1바이트 (0x00 | logn) + 계수당 14비트 big-endian 비트열.

**서명** (sig_bytelen 바이트):
  헤더 1바이트 (0x30 | logn) + nonce 40바이트 + 압축된 s2 (0 으로 패딩).

**압축 형식** (계수 하나):
  부호 1비트 | |x| 의 하위 7비트 | (|x| >> 7) 개의 0 | 종결 1

  디코딩 시 거부하는 경우:
    - |x| ≥ 2048
    - "-0" (부호 비트 1, 크기 0)
    - 패딩 비트 중 0이 아닌 비트
"""

from falcon_zkp.errors import ConfigurationError, DecodingError
from falcon_zkp.falcon.param import MODULUS, NONCE_LEN, get_params


PK_HEADER = 0x00
SIG_HEADER = 0x30

MAX_SIG_COEFF = 2048


def _params_from_header(header, expected_high):
    if header & 0xF0 != expected_high:
        raise DecodingError(f"잘못된 헤더 바이트: {header:#04x}")
    try:
        return get_params(1 << (header & 0x0F))
    except ConfigurationError as exc:
        raise DecodingError(str(exc)) from exc


def encode_public_key(coeffs, params):
    """[0, q) 계수 리스트를 공개키 바이트로 만든다."""
    if len(coeffs) != params.n:
        raise ConfigurationError(f"공개키 길이는 {params.n} 이어야 합니다: {len(coeffs)}")
    out = bytearray([PK_HEADER | params.log_n])
    acc = 0
    acc_len = 0
    for w in coeffs:
        acc = (acc << 14) | w
        acc_len += 14
        while acc_len >= 8:
            acc_len -= 8
            out.append((acc >> acc_len) & 0xFF)
        acc &= (1 << acc_len) - 1
    if acc_len > 0:
        out.append((acc << (8 - acc_len)) & 0xFF)
    return bytes(out)


def decode_public_key(data):
    """공개키 바이트 → (ParameterSet, 계수 리스트).

    Raises:
        DecodingError: 길이, 헤더, 계수 범위, 남는 비트가 올바르지 않을 때
    """
    if not data:
        raise DecodingError("빈 공개키")
    params = _params_from_header(data[0], PK_HEADER)
    if len(data) != params.pk_bytelen:
        raise DecodingError(f"공개키 길이는 {params.pk_bytelen} 이어야 합니다: {len(data)}")

    coeffs = []
    acc = 0
    acc_len = 0
    for byte in data[1:]:
        acc = (acc << 8) | byte
        acc_len += 8
        if acc_len >= 14:
            acc_len -= 14
            w = (acc >> acc_len) & 0x3FFF
            if w >= MODULUS:
                raise DecodingError(f"계수가 q 이상입니다: {w}")
            coeffs.append(w)
            acc &= (1 << acc_len) - 1
    if len(coeffs) != params.n or acc & ((1 << acc_len) - 1):
        raise DecodingError("공개키 끝에 잘못된 비트가 남아 있습니다")
    return params, coeffs


def compress(coeffs, slen):
    """부호 있는 계수 리스트를 slen 바이트로 압축한다.

    Returns:
        bytes 또는 None (계수가 너무 크거나 slen 에 들어가지 않을 때)
    """
    bits = []
    for x in coeffs:
        m = abs(x)
        if m >= MAX_SIG_COEFF:
            return None
        bits.append("1" if x < 0 else "0")
        bits.append(format(m & 0x7F, "07b"))
        bits.append("0" * (m >> 7) + "1")
    bitstring = "".join(bits)
    if len(bitstring) > 8 * slen:
        return None
    bitstring += "0" * (8 * slen - len(bitstring))
    return bytes(int(bitstring[i:i + 8], 2) for i in range(0, len(bitstring), 8))


def decompress(data, n):
    """압축된 바이트 → 부호 있는 계수 리스트 (길이 n).

    Raises:
        DecodingError: 형식 위반
    """
    bits = "".join(format(b, "08b") for b in data)
    pos = 0
    out = []
    for _ in range(n):
        if pos + 8 > len(bits):
            raise DecodingError("압축 데이터가 너무 짧습니다")
        negative = bits[pos] == "1"
        m = int(bits[pos + 1:pos + 8], 2)
        pos += 8
        while True:
            if pos >= len(bits):
                raise DecodingError("압축 데이터가 너무 짧습니다")
            bit = bits[pos]
            pos += 1
            if bit == "1":
                break
            m += 128
            if m >= MAX_SIG_COEFF:
                raise DecodingError(f"계수 크기가 {MAX_SIG_COEFF} 이상입니다")
        if negative and m == 0:
            raise DecodingError("-0 은 허용되지 않습니다")
        out.append(-m if negative else m)
    if "1" in bits[pos:]:
        raise DecodingError("패딩 비트가 0이 아닙니다")
    return out


def encode_signature(nonce, s2, params):
    """(nonce, s2) → 서명 바이트.

    Raises:
        DecodingError: s2 를 압축할 수 없을 때
    """
    if len(nonce) != NONCE_LEN:
        raise ConfigurationError(f"nonce 길이는 {NONCE_LEN} 이어야 합니다: {len(nonce)}")
    body = compress(s2, params.sig_bytelen - 1 - NONCE_LEN)
    if body is None:
        raise DecodingError("서명 계수를 압축할 수 없습니다")
    return bytes([SIG_HEADER | params.log_n]) + bytes(nonce) + body


def decode_signature(data):
    """서명 바이트 → (ParameterSet, nonce, s2)."""
    if not data:
        raise DecodingError("빈 서명")
    params = _params_from_header(data[0], SIG_HEADER)
    if len(data) != params.sig_bytelen:
        raise DecodingError(f"서명 길이는 {params.sig_bytelen} 이어야 합니다: {len(data)}")
    nonce = bytes(data[1:1 + NONCE_LEN])
    s2 = decompress(data[1 + NONCE_LEN:], params.n)
    return params, nonce, s2
