"""
R1CS 백엔드 (Rank-1 Constraint System)
========================================

각 제약은 세 선형결합 A, B, C 에 대해

    ⟨A, w⟩ · ⟨B, w⟩ = ⟨C, w⟩

를 요구한다. w 는 할당 벡터 r = [1, x₁, x₂, ...] 이다.

**희소 표현**:
  선형결합은 (변수, 계수) 튜플의 튜플로 저장한다. 행 하나가 수백 개의
  변수를 참조하더라도 0 계수는 저장하지 않는다.

**제약 형태별 매핑**:
  | 연산            | A           | B     | C           |
  |-----------------|-------------|-------|-------------|
  | 선형 Σcᵢvᵢ + k  | Σcᵢvᵢ + k·1 | 1     | 0           |
  | 곱셈 a·b = c    | a           | b     | c           |
  | a·b + c = out   | a           | b     | out - c     |

range gate 는 비트 분해로 흉내낸다.
"""

from falcon_zkp.cs.base import ConstraintSystem, ONE
from falcon_zkp.field import CURVE_ORDER


_ONE_ROW = ((ONE, 1),)


def _row(terms, constant=0):
    row = []
    for var, coeff in terms:
        coeff %= CURVE_ORDER
        if coeff:
            row.append((var, coeff))
    constant %= CURVE_ORDER
    if constant:
        row.append((ONE, constant))
    return tuple(row)


def _eval(row, values):
    total = 0
    for var, coeff in row:
        total += values[var] * coeff
    return total % CURVE_ORDER


class R1CS(ConstraintSystem):
    """희소 행렬 A, B, C 로 표현되는 제약 시스템."""

    name = "r1cs"

    def __init__(self, range_bit_len=8):
        super().__init__(range_bit_len)
        self.constraints = []

    def enforce_linear(self, terms, constant=0):
        self.constraints.append((_row(terms, constant), _ONE_ROW, ()))

    def enforce_mul(self, a, b, c):
        self.constraints.append((((a, 1),), ((b, 1),), ((c, 1),)))

    def mul_add(self, a, b, c):
        out = self._new_var(self.values[a] * self.values[b] + self.values[c])
        self.constraints.append((((a, 1),), ((b, 1),), ((out, 1), (c, CURVE_ORDER - 1))))
        return out

    @property
    def num_constraints(self):
        return len(self.constraints)

    def witness_vector(self, public_values=None):
        """공개 입력을 대입한 할당 벡터 r."""
        values = list(self.values)
        if public_values is not None:
            for var, value in zip(self.public_vars, public_values):
                values[var] = value
        return values

    def _first_unsatisfied(self, public_values):
        values = self.witness_vector(public_values)
        for i, (a, b, c) in enumerate(self.constraints):
            if _eval(a, values) * _eval(b, values) % CURVE_ORDER != _eval(c, values):
                return f"constraint {i}"
        return None

    def rows(self, start=0, count=None):
        """제약 행 (A, B, C) 를 잘라서 반환한다."""
        end = len(self.constraints) if count is None else start + count
        return self.constraints[start:end]
