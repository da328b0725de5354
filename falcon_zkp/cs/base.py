"""
제약 시스템 공통 인터페이스 (Constraint-System Capability)
===========================================================

가젯(gadget)은 이 인터페이스만 사용하므로 한 번만 작성된다. 백엔드는
세 가지 기본 연산만 구현한다:

  | 기본 연산                         | 의미                          |
  |-----------------------------------|-------------------------------|
  | enforce_linear(terms, constant)   | Σ cᵢ·vᵢ + constant = 0        |
  | enforce_mul(a, b, c)              | a · b = c                     |
  | enforce_range(a, bits)            | 0 ≤ a < 2^bits                |

그 외 연산(덧셈, 불리언 논리, is_zero, select, 비트 분해 등)은 이 기본
연산 위에서 정의된다.

**변수(variable)**:
  정수 핸들. 0번 변수는 상수 1 (ONE) 이다. 값은 p 로 감소된 int 로
  self.values 에 저장되며, 모든 연산은 제약을 만들면서 동시에 값을 계산한다
  (witness 생성과 회로 구성이 한 번에 진행된다).

**만족 여부**:
  잘못된 값은 예외를 일으키지 않는다. 값은 그대로 제약에 들어가고,
  is_satisfied() 가 False 를 돌려준다.

사용 예시:
    >>> cs = R1CS()
    >>> x = cs.alloc_witness(3)
    >>> y = cs.mul(x, x)
    >>> cs.enforce_constant(y, 9)
    >>> cs.is_satisfied()
    True
"""

from falcon_zkp.errors import ConfigurationError
from falcon_zkp.field import CURVE_ORDER, to_fr, to_int


ONE = 0

MAX_UNPACK_BITS = CURVE_ORDER.bit_length() - 1


class ConstraintSystem:
    """백엔드 공통 기반 클래스.

    속성:
        values: 변수 값 리스트 (int, mod p)
        public_vars: 공개 입력 변수 (할당 순서)
        range_bit_len: 백엔드의 고정 폭 range gate 비트 수
    """

    name = None

    def __init__(self, range_bit_len=8):
        if range_bit_len < 1:
            raise ConfigurationError(f"range_bit_len 은 양수여야 합니다: {range_bit_len}")
        self.values = [1]
        self.public_vars = []
        self.range_bit_len = range_bit_len
        self._constants = {1: ONE}

    # ─── 백엔드 기본 연산 ───

    def enforce_linear(self, terms, constant=0):
        raise NotImplementedError

    def enforce_mul(self, a, b, c):
        raise NotImplementedError

    def enforce_range(self, a, num_bits):
        """기본 구현: 비트 분해로 범위를 강제한다."""
        self.unpack(a, num_bits)

    def _register_public(self, var):
        """공개 입력 변수가 생길 때 백엔드가 필요한 제약을 추가한다."""

    def _first_unsatisfied(self, public_values):
        raise NotImplementedError

    @property
    def num_constraints(self):
        raise NotImplementedError

    # ─── 변수 할당 ───

    def _new_var(self, value):
        self.values.append(value % CURVE_ORDER)
        return len(self.values) - 1

    def alloc_witness(self, value):
        return self._new_var(to_int(value))

    def alloc_public(self, value):
        var = self._new_var(to_int(value))
        self.public_vars.append(var)
        self._register_public(var)
        return var

    def constant(self, value):
        """상수 변수. 같은 값은 한 번만 만든다."""
        value = to_int(value)
        if value not in self._constants:
            var = self._new_var(value)
            self.enforce_linear([(var, 1)], -value)
            self._constants[value] = var
        return self._constants[value]

    def value(self, var):
        return self.values[var]

    def set_value(self, var, value):
        """변수 값을 덮어쓴다 (변조 테스트용). 제약은 그대로 둔다."""
        self.values[var] = to_int(value)

    # ─── 선형 연산 ───

    def lc(self, terms, constant=0):
        """새 변수 out = Σ cᵢ·vᵢ + constant."""
        terms = list(terms)
        value = constant
        for var, coeff in terms:
            value += self.values[var] * coeff
        out = self._new_var(value)
        terms.append((out, -1))
        self.enforce_linear(terms, constant)
        return out

    def add(self, a, b):
        return self.lc([(a, 1), (b, 1)])

    def sub(self, a, b):
        return self.lc([(a, 1), (b, -1)])

    def scale(self, a, k):
        return self.lc([(a, k)])

    def add_constant(self, a, k):
        return self.lc([(a, 1)], k)

    def enforce_equal(self, a, b):
        self.enforce_linear([(a, 1), (b, -1)])

    def enforce_constant(self, a, k):
        self.enforce_linear([(a, 1)], -k)

    # ─── 곱셈 ───

    def mul(self, a, b):
        out = self._new_var(self.values[a] * self.values[b])
        self.enforce_mul(a, b, out)
        return out

    def mul_add(self, a, b, c):
        """a·b + c."""
        return self.add(self.mul(a, b), c)

    # ─── 불리언 ───

    def enforce_bool(self, a):
        self.enforce_mul(a, a, a)

    def enforce_true(self, bit):
        self.enforce_constant(bit, 1)

    def logic_not(self, a):
        return self.lc([(a, -1)], 1)

    def logic_and(self, a, b):
        return self.mul(a, b)

    def logic_or(self, a, b):
        ab = self.mul(a, b)
        return self.lc([(a, 1), (b, 1), (ab, -1)])

    def logic_and_all(self, bits):
        """모든 비트가 1 이면 1. 세 개 이상은 합 == 개수 로 검사한다."""
        bits = list(bits)
        if not bits:
            return self.constant(1)
        if len(bits) == 1:
            return bits[0]
        if len(bits) == 2:
            return self.logic_and(bits[0], bits[1])
        return self.is_zero(self.lc([(b, 1) for b in bits], -len(bits)))

    def logic_or_all(self, bits):
        """하나라도 1 이면 1. 세 개 이상은 합 ≠ 0 으로 검사한다."""
        bits = list(bits)
        if not bits:
            return self.constant(0)
        if len(bits) == 1:
            return bits[0]
        if len(bits) == 2:
            return self.logic_or(bits[0], bits[1])
        return self.logic_not(self.is_zero(self.lc([(b, 1) for b in bits])))

    def is_zero(self, a):
        """a == 0 이면 1, 아니면 0 인 불리언 변수.

        힌트 inv 를 두고 a·inv = 1 - z, a·z = 0 을 강제한다.
        """
        va = self.values[a]
        z = self._new_var(1 if va == 0 else 0)
        inv = self._new_var(0 if va == 0 else pow(va, CURVE_ORDER - 2, CURVE_ORDER))
        one_minus_z = self.lc([(z, -1)], 1)
        self.enforce_mul(a, inv, one_minus_z)
        self.enforce_mul(a, z, self.constant(0))
        return z

    def is_equal(self, a, b):
        return self.is_zero(self.sub(a, b))

    def select(self, cond, a, b):
        """cond 가 1 이면 a, 0 이면 b."""
        diff = self.sub(a, b)
        return self.add(self.mul(cond, diff), b)

    def unpack(self, a, num_bits):
        """a 를 little-endian 비트 num_bits 개로 분해한다.

        비트는 a 의 하위 비트로 채워지므로 a ≥ 2^num_bits 이면 재구성
        제약이 불만족된다.

        Raises:
            ConfigurationError: num_bits 가 1 미만이거나 필드 비트 수 이상일 때
        """
        if num_bits < 1 or num_bits > MAX_UNPACK_BITS:
            raise ConfigurationError(f"비트 분해 폭이 잘못되었습니다: {num_bits}")
        va = self.values[a]
        bits = [self._new_var((va >> i) & 1) for i in range(num_bits)]
        for b in bits:
            self.enforce_bool(b)
        terms = [(b, 1 << i) for i, b in enumerate(bits)]
        terms.append((a, -1))
        self.enforce_linear(terms)
        return bits

    # ─── 통계 / 내보내기 ───

    @property
    def num_variables(self):
        return len(self.values)

    @property
    def num_public_inputs(self):
        return len(self.public_vars)

    @property
    def num_witness_variables(self):
        return self.num_variables - 1 - self.num_public_inputs

    def public_inputs(self):
        return [to_fr(self.values[v]) for v in self.public_vars]

    def assignment(self):
        """전체 할당 벡터 (0번은 상수 1)."""
        return [to_fr(v) for v in self.values]

    def stats(self):
        return {
            "backend": self.name,
            "num_constraints": self.num_constraints,
            "num_variables": self.num_variables,
            "num_public_inputs": self.num_public_inputs,
            "num_witness_variables": self.num_witness_variables,
        }

    # ─── 만족 여부 ───

    def which_is_unsatisfied(self, public_inputs=None):
        """처음으로 불만족되는 제약의 설명, 모두 만족하면 None.

        Args:
            public_inputs: 검증자가 가진 공개 입력 (None 이면 현재 값)
        """
        if public_inputs is None:
            public_values = [self.values[v] for v in self.public_vars]
        else:
            public_values = [to_int(x) for x in public_inputs]
            if len(public_values) != len(self.public_vars):
                return (f"public input length {len(public_values)} "
                        f"!= {len(self.public_vars)}")
        return self._first_unsatisfied(public_values)

    def is_satisfied(self, public_inputs=None):
        return self.which_is_unsatisfied(public_inputs) is None
