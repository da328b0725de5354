"""
Falcon 서명 검증 회로 (세 가지 변형)
=====================================

  | 이름        | 곱셈 방식          | 노름 경계            |
  |-------------|--------------------|----------------------|
  | schoolbook  | O(N²) 내적         | L2 < sig_l2_bound    |
  | ntt         | 회로 내부 NTT      | L2 < sig_l2_bound    |
  | dual_ntt    | 부호 분리 + NTT    | 계수마다 ≤ 765 (L∞)  |

사용 예시:
    >>> from falcon_zkp.circuits import build_verification_circuit
    >>> circuit, cs = build_verification_circuit("ntt", "r1cs", pk, msg, sig)
    >>> cs.is_satisfied(circuit.public_inputs())
    True
"""

from falcon_zkp.circuits.base import FalconVerificationCircuit
from falcon_zkp.circuits.schoolbook import FalconSchoolBookVerificationCircuit
from falcon_zkp.circuits.ntt import FalconNTTVerificationCircuit
from falcon_zkp.circuits.dual_ntt import FalconDualNTTVerificationCircuit
from falcon_zkp.cs import make_constraint_system
from falcon_zkp.errors import ConfigurationError


CIRCUITS = {
    FalconSchoolBookVerificationCircuit.name: FalconSchoolBookVerificationCircuit,
    FalconNTTVerificationCircuit.name: FalconNTTVerificationCircuit,
    FalconDualNTTVerificationCircuit.name: FalconDualNTTVerificationCircuit,
}


def get_circuit_class(variant):
    try:
        return CIRCUITS[variant]
    except KeyError:
        raise ConfigurationError(f"알 수 없는 회로 변형입니다: {variant}") from None


def build_verification_circuit(variant, backend, pk, msg, sig, **options):
    """회로를 만들고 제약을 생성한다.

    Returns:
        tuple: (circuit, cs)
    """
    circuit = get_circuit_class(variant).build_circuit(pk, msg, sig)
    cs = make_constraint_system(backend, **options)
    circuit.synthesize(cs)
    return circuit, cs


def constraint_counts(pk, msg, sig, backend="r1cs"):
    """변형별 제약/변수 수 표."""
    counts = {}
    for variant in CIRCUITS:
        _, cs = build_verification_circuit(variant, backend, pk, msg, sig)
        counts[variant] = cs.stats()
    return counts
