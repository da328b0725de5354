"""
제약 시스템 백엔드
===================

  | 이름    | 클래스                 | range gate          |
  |---------|------------------------|---------------------|
  | r1cs    | R1CS                   | 비트 분해로 흉내냄   |
  | plonk   | PlonkConstraintSystem  | 네이티브 (8비트)     |

사용 예시:
    >>> from falcon_zkp.cs import make_constraint_system
    >>> cs = make_constraint_system("plonk", range_bit_len=8)
"""

from falcon_zkp.cs.base import ConstraintSystem, ONE
from falcon_zkp.cs.r1cs import R1CS
from falcon_zkp.cs.plonk import Gate, PlonkConstraintSystem
from falcon_zkp.errors import ConfigurationError


BACKENDS = {
    R1CS.name: R1CS,
    PlonkConstraintSystem.name: PlonkConstraintSystem,
}


def make_constraint_system(name, **options):
    """이름으로 백엔드를 만든다.

    Raises:
        ConfigurationError: 알 수 없는 백엔드 이름
    """
    try:
        cls = BACKENDS[name]
    except KeyError:
        raise ConfigurationError(f"알 수 없는 백엔드입니다: {name}") from None
    return cls(**options)
