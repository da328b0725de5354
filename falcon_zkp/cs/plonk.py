"""
PLONK 백엔드 (3-wire 산술 게이트 + range gate)
=================================================

**게이트 구조**:
  각 게이트는 3개의 배선(wire) a, b, c와 5개의 셀렉터로 구성:

    q_L·a + q_R·b + q_O·c + q_M·(a·b) + q_C (+ PI) = 0

**게이트 유형별 셀렉터 설정**:
  | 유형      | q_L | q_R | q_O | q_M | q_C | 의미               |
  |-----------|-----|-----|-----|-----|-----|--------------------|
  | 곱셈      |  0  |  0  | -1  |  1  |  0  | a·b = c            |
  | 선형      | c₁  | c₂  | c₃  |  0  |  k  | c₁a + c₂b + c₃c + k = 0 |
  | 상수 1    |  1  |  0  |  0  |  0  | -1  | a = 1              |
  | 공개입력  |  0  |  0  |  1  |  0  |  0  | c + PI = 0         |

  항이 3개를 넘는 선형결합은 중간 변수 s = c₁v₁ + c₂v₂ 를 만드는 게이트를
  연쇄해 3개 이하로 줄인 뒤 마지막 게이트로 닫는다.

**배선(Copy) 제약**:
  같은 변수를 참조하는 배선 위치들은 하나의 순환(cycle)으로 묶여 순열 σ 를
  이룬다 (build_copy_constraints). 값은 변수 단위로 저장되므로 회로 구성
  중에는 자동으로 일치한다.

**Range gate**:
  폭이 range_bit_len 인 범위 검사는 lookup 형태의 네이티브 게이트로
  기록한다. 다른 폭은 비트 분해로 처리한다.
"""

from falcon_zkp.cs.base import ConstraintSystem, ONE
from falcon_zkp.field import CURVE_ORDER, to_fr


MINUS_ONE = CURVE_ORDER - 1


class Gate:
    """PLONK 산술 게이트.

    게이트 방정식: q_L·a + q_R·b + q_O·c + q_M·(a·b) + q_C = 0
    """

    def __init__(self, q_l, q_r, q_o, q_m, q_c):
        self.q_l = q_l % CURVE_ORDER
        self.q_r = q_r % CURVE_ORDER
        self.q_o = q_o % CURVE_ORDER
        self.q_m = q_m % CURVE_ORDER
        self.q_c = q_c % CURVE_ORDER

    def evaluate(self, a, b, c):
        return (self.q_l * a + self.q_r * b + self.q_o * c
                + self.q_m * a * b + self.q_c) % CURVE_ORDER

    def check(self, a, b, c, pi=0):
        """게이트 제약이 만족되는지 확인한다 (pi 는 공개 입력 항)."""
        return (self.evaluate(a, b, c) + pi) % CURVE_ORDER == 0


class PlonkConstraintSystem(ConstraintSystem):
    """게이트 리스트와 배선(변수 인덱스)으로 표현되는 제약 시스템.

    속성:
        gates: Gate 리스트
        wires: 게이트별 (a, b, c) 변수 인덱스
        public_gates: 공개 입력 게이트 인덱스 (공개 입력 순서)
        range_checks: 네이티브 range gate 가 걸린 변수
    """

    name = "plonk"

    def __init__(self, range_bit_len=8):
        super().__init__(range_bit_len)
        self.gates = []
        self.wires = []
        self.public_gates = []
        self.range_checks = []
        # 게이트 0: ONE == 1
        self._add_gate(ONE, ONE, ONE, q_l=1, q_c=-1)

    def _add_gate(self, a, b, c, q_l=0, q_r=0, q_o=0, q_m=0, q_c=0):
        self.gates.append(Gate(q_l, q_r, q_o, q_m, q_c))
        self.wires.append((a, b, c))
        return len(self.gates) - 1

    def _register_public(self, var):
        self.public_gates.append(self._add_gate(ONE, ONE, var, q_o=1))

    def enforce_mul(self, a, b, c):
        self._add_gate(a, b, c, q_m=1, q_o=MINUS_ONE)

    def enforce_linear(self, terms, constant=0):
        terms = [(var, coeff % CURVE_ORDER) for var, coeff in terms]
        i = 0
        while len(terms) - i > 3:
            (v1, c1), (v2, c2) = terms[i], terms[i + 1]
            s = self._new_var(self.values[v1] * c1 + self.values[v2] * c2)
            self._add_gate(v1, v2, s, q_l=c1, q_r=c2, q_o=MINUS_ONE)
            terms[i + 1] = (s, 1)
            i += 1
        rest = terms[i:]
        while len(rest) < 3:
            rest.append((ONE, 0))
        (a, ca), (b, cb), (c, cc) = rest
        self._add_gate(a, b, c, q_l=ca, q_r=cb, q_o=cc, q_c=constant)

    def enforce_range(self, a, num_bits):
        if num_bits == self.range_bit_len:
            self.range_checks.append(a)
        else:
            super().enforce_range(a, num_bits)

    @property
    def n(self):
        """게이트 수 (패딩 전)."""
        return len(self.gates)

    @property
    def num_constraints(self):
        return len(self.gates) + len(self.range_checks)

    def _first_unsatisfied(self, public_values):
        values = self.values
        pi = {}
        for gate_index, value in zip(self.public_gates, public_values):
            pi[gate_index] = (-value) % CURVE_ORDER
        for i, (gate, (a, b, c)) in enumerate(zip(self.gates, self.wires)):
            if not gate.check(values[a], values[b], values[c], pi.get(i, 0)):
                return f"gate {i}"
        bound = 1 << self.range_bit_len
        for i, var in enumerate(self.range_checks):
            if values[var] >= bound:
                return f"range {i}"
        return None

    def get_selector_polynomials(self):
        """셀렉터 벡터 (q_L, q_R, q_O, q_M, q_C): 각각 FR 리스트."""
        q_l = [to_fr(g.q_l) for g in self.gates]
        q_r = [to_fr(g.q_r) for g in self.gates]
        q_o = [to_fr(g.q_o) for g in self.gates]
        q_m = [to_fr(g.q_m) for g in self.gates]
        q_c = [to_fr(g.q_c) for g in self.gates]
        return q_l, q_r, q_o, q_m, q_c

    def wire_values(self):
        """배선 값 (a_vals, b_vals, c_vals): 각각 FR 리스트."""
        a_vals = [to_fr(self.values[a]) for a, _, _ in self.wires]
        b_vals = [to_fr(self.values[b]) for _, b, _ in self.wires]
        c_vals = [to_fr(self.values[c]) for _, _, c in self.wires]
        return a_vals, b_vals, c_vals

    def build_copy_constraints(self):
        """배선 순열 σ 를 구성한다.

        위치 규칙: a의 i번째 = i, b의 i번째 = n+i, c의 i번째 = 2n+i.
        같은 변수를 가진 위치들을 하나의 순환으로 연결한다.

        Returns:
            list[int]: 길이 3n 의 순열. sigma[i] = i 와 연결된 다음 위치
        """
        n = self.n
        sigma = list(range(3 * n))
        positions = {}
        for i, wires in enumerate(self.wires):
            for w, var in enumerate(wires):
                positions.setdefault(var, []).append(w * n + i)
        for cycle in positions.values():
            for k, pos in enumerate(cycle):
                sigma[pos] = cycle[(k + 1) % len(cycle)]
        return sigma

    def rows(self, start=0, count=None):
        """(Gate, (a, b, c)) 행을 잘라서 반환한다."""
        end = len(self.gates) if count is None else start + count
        return list(zip(self.gates[start:end], self.wires[start:end]))
