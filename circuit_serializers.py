"""
회로 데이터 직렬화/역직렬화 헬퍼
==================================

TinyDB 와 JSON 응답에 넣을 수 있는 형태로 변환한다.
FR, 공개 입력 리스트, 제약 행 (R1CS / PLONK), 회로 통계.
"""

from falcon_zkp.field import to_fr


# ─── FR list ───

def serialize_fr_list(lst):
    """list[FR] → list[str]"""
    return [str(int(v)) for v in lst]


def deserialize_fr_list(data):
    """list[str] → list[FR]"""
    return [to_fr(int(s)) for s in data]


# ─── 제약 행 ───

def serialize_lc(row):
    """((var, coeff), ...) → [[var, str], ...]"""
    return [[var, str(coeff)] for var, coeff in row]


def serialize_r1cs_rows(rows, start=0):
    return [
        {
            "index": start + i,
            "A": serialize_lc(a),
            "B": serialize_lc(b),
            "C": serialize_lc(c),
        }
        for i, (a, b, c) in enumerate(rows)
    ]


def serialize_plonk_rows(rows, start=0):
    return [
        {
            "index": start + i,
            "q_L": fr_short(gate.q_l),
            "q_R": fr_short(gate.q_r),
            "q_O": fr_short(gate.q_o),
            "q_M": fr_short(gate.q_m),
            "q_C": fr_short(gate.q_c),
            "a": a,
            "b": b,
            "c": c,
        }
        for i, (gate, (a, b, c)) in enumerate(rows)
    ]


def serialize_rows(cs, start=0, count=None):
    """백엔드 종류에 맞게 제약 행을 직렬화한다."""
    rows = cs.rows(start, count)
    if cs.name == "plonk":
        return serialize_plonk_rows(rows, start)
    return serialize_r1cs_rows(rows, start)


# ─── 회로 통계 ───

def serialize_stats(circuit, cs):
    stats = cs.stats()
    stats["variant"] = circuit.name
    stats["n"] = circuit.params.n
    return stats


def fr_short(val):
    """FR → 축약 문자열 (UI 표시용)"""
    if val is None:
        return "None"
    s = str(int(val))
    if len(s) <= 10:
        return s
    return s[:4] + "..." + s[-4:]


