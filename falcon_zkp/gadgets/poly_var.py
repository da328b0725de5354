"""
다항식 변수 (Polynomial Variables)
====================================

링 원소의 N개 계수를 회로 변수로 묶은 타입들.

  | 타입        | 내용                                   |
  |-------------|----------------------------------------|
  | PolyVar     | 계수 표현, 각 계수는 [0, q) 값을 가짐     |
  | NTTPolyVar  | NTT 표현                                |
  | DualPolyVar | (pos, neg) 부호 분리, pos[i]·neg[i] = 0 |

할당만으로는 범위 제약이 생기지 않는다. [0, q) 에 의존하는 곳에서는
호출자가 range_proofs 의 가젯을 직접 적용해야 한다. 단, DualPolyVar 의
pos·neg = 0 조건은 할당 시점에 강제된다.
"""

from falcon_zkp.errors import ConfigurationError
from falcon_zkp.falcon.param import MODULUS


WITNESS = "witness"
PUBLIC = "public"


def _coefficients(poly):
    return list(poly.coeffs) if hasattr(poly, "coeffs") else list(poly)


class PolyVar:
    """계수 표현 다항식 변수."""

    def __init__(self, coeffs):
        self.coeffs = list(coeffs)

    @classmethod
    def alloc(cls, cs, poly, visibility=WITNESS, n=None):
        """평문 다항식의 각 계수를 변수로 할당한다.

        Args:
            cs: ConstraintSystem
            poly: Polynomial / NTTPolynomial 또는 int 리스트
            visibility: WITNESS 또는 PUBLIC
            n: 기대 길이 (주면 길이를 검사한다)

        Raises:
            ConfigurationError: visibility 가 잘못되었거나 길이가 다를 때
        """
        coeffs = _coefficients(poly)
        if n is not None and len(coeffs) != n:
            raise ConfigurationError(f"다항식 길이는 {n} 이어야 합니다: {len(coeffs)}")
        if visibility == WITNESS:
            alloc = cs.alloc_witness
        elif visibility == PUBLIC:
            alloc = cs.alloc_public
        else:
            raise ConfigurationError(f"알 수 없는 visibility: {visibility}")
        return cls([alloc(c) for c in coeffs])

    def __len__(self):
        return len(self.coeffs)

    def __getitem__(self, i):
        return self.coeffs[i]

    def __iter__(self):
        return iter(self.coeffs)

    def values(self, cs):
        return [cs.value(v) for v in self.coeffs]


class NTTPolyVar(PolyVar):
    """NTT 표현 다항식 변수."""


class DualPolyVar:
    """부호 분리 다항식 변수 (pos, neg)."""

    def __init__(self, pos, neg):
        if len(pos) != len(neg):
            raise ConfigurationError(f"pos/neg 길이가 다릅니다: {len(pos)} vs {len(neg)}")
        self.pos = pos
        self.neg = neg

    @classmethod
    def alloc(cls, cs, dual_poly, n=None):
        """pos, neg 를 witness 로 할당하고 인덱스마다 pos·neg = 0 을 강제한다."""
        pos = PolyVar.alloc(cs, dual_poly.pos, WITNESS, n)
        neg = PolyVar.alloc(cs, dual_poly.neg, WITNESS, n)
        zero = cs.constant(0)
        for p, m in zip(pos, neg):
            cs.enforce_mul(p, m, zero)
        return cls(pos, neg)

    def __len__(self):
        return len(self.pos)

    def parts(self):
        return [self.pos, self.neg]

    def to_poly_var(self, cs):
        """[0, q) 표현으로 되돌린다.

        out = pos - neg + q·flag,  flag = (neg ≠ 0)

        neg 가 0 이면 out = pos, 아니면 out = q - neg.
        """
        out = []
        for p, m in zip(self.pos, self.neg):
            flag = cs.logic_not(cs.is_zero(m))
            out.append(cs.lc([(p, 1), (m, -1), (flag, MODULUS)]))
        return PolyVar(out)
