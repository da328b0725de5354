"""
노름 가젯 (Norm Gadgets)
=========================

**l2_norm**:
  [0, q) 표현 계수 e 를 중심화한 뒤 제곱해 누적한다.

    e' = e        (e < 6144)
    e' = q - e    (그 외)

  누적은 mul_add 사슬로 만든다. 결과에는 범위 제약이 없으므로 호출자가
  enforce_less_than_norm_bound 를 적용한다.

**l2_norm_without_range_check**:
  이미 작은 값(예: DualPolyVar 의 pos/neg)의 제곱합. 중심화 없이 제곱한다.

**enforce_l_inf_765**:
  부호 분리 계수 하나하나에 leq765 를 적용한다. 서명과 나머지에 대한
  L∞ 경계와 같다.
"""

import logging

from falcon_zkp.falcon.param import MODULUS
from falcon_zkp.gadgets.range_proofs import is_less_than_6144, enforce_leq_765


logger = logging.getLogger(__name__)


def _sum_of_squares(cs, coeffs):
    acc = None
    for e in coeffs:
        acc = cs.mul(e, e) if acc is None else cs.mul_add(e, e, acc)
    return acc if acc is not None else cs.constant(0)


def l2_norm(cs, poly_vars):
    """여러 PolyVar 의 중심화 제곱 L2 노름 변수."""
    before = cs.num_constraints
    centered = []
    for pv in poly_vars:
        for e in pv:
            lt = is_less_than_6144(cs, e)
            neg = cs.lc([(e, -1)], MODULUS)
            centered.append(cs.select(lt, e, neg))
    res = _sum_of_squares(cs, centered)
    logger.debug("l2_norm over %d coefficients: %d constraints",
                 len(centered), cs.num_constraints - before)
    return res


def l2_norm_without_range_check(cs, poly_vars):
    """중심화 없이 계수 제곱을 합한다."""
    return _sum_of_squares(cs, [e for pv in poly_vars for e in pv])


def dual_l2_norm(cs, dual_vars):
    """DualPolyVar 들의 L2 노름. pos, neg 를 모두 제곱한다."""
    parts = []
    for dv in dual_vars:
        parts.extend(dv.parts())
    return l2_norm_without_range_check(cs, parts)


def enforce_l_inf_765(cs, dual_vars):
    """모든 pos/neg 계수 ≤ 765."""
    for dv in dual_vars:
        for part in dv.parts():
            for e in part:
                enforce_leq_765(cs, e)
