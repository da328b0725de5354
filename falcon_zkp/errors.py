"""
오류 타입
==========

**ConfigurationError**:
  회로 구성 단계의 치명적 오류 (잘못된 다항식 길이, 필드 용량 초과,
  range gate 비트폭 불일치 등). 제약을 하나도 만들기 전에 중단한다.

**DecodingError**:
  공개키/서명 바이트 인코딩이 올바르지 않을 때.

잘못된 서명 자체는 예외가 아니다. 그 경우 회로가 불만족(unsatisfiable)으로
드러난다.
"""


class ConfigurationError(ValueError):
    """회로 구성 파라미터 오류."""


class DecodingError(ValueError):
    """키/서명 바이트 디코딩 오류."""
