"""
Falcon 검증 회로 Flask Blueprint
==================================

입력(공개키, 서명, 메시지)을 DB 에 저장하고, 그 입력으로 세 가지
검증 회로를 합성해 통계/공개 입력/제약 행/만족 여부를 JSON 으로 돌려준다.

  | 메서드 | 경로                      | 설명                          |
  |--------|---------------------------|-------------------------------|
  | GET    | /circuit/inputs           | 저장된 입력                   |
  | POST   | /circuit/inputs           | hex 공개키·서명 + 메시지 저장 |
  | POST   | /circuit/inputs/generate  | 시드로 키 생성 후 서명        |
  | POST   | /circuit/build            | 회로 합성, 통계 저장          |
  | POST   | /circuit/check            | 공개 입력으로 만족 여부 검사  |
  | POST   | /circuit/rows             | 제약 행 일부                  |
  | GET    | /circuit/stats            | 저장된 합성 통계              |
  | POST   | /circuit/clear            | circuit.* 키 전부 삭제        |
"""

import logging

from flask import Blueprint, jsonify, request
from tinydb import Query

from falcon_zkp.circuits import build_verification_circuit
from falcon_zkp.errors import ConfigurationError, DecodingError
from falcon_zkp.falcon.keys import KeyPair, PublicKey, Signature

from circuit_serializers import (
    serialize_fr_list, deserialize_fr_list,
    serialize_rows, serialize_stats,
    fr_short,
)

logger = logging.getLogger(__name__)

circuit_bp = Blueprint('circuit', __name__, url_prefix='/circuit')

DATA = Query()

# DB는 app.py에서 주입
DB = None

DEFAULT_ROWS_LIMIT = 20


def init_circuit_bp(db):
    """app.py에서 DB를 주입받는다."""
    global DB
    DB = db


# ─── DB 헬퍼 ───

def db_get(key):
    """DB에서 키로 데이터를 조회한다."""
    result = DB.search(DATA.type == key)
    if not result:
        return None
    return result[0].get("data")


def db_set(key, data):
    """DB에 키로 데이터를 저장한다."""
    DB.upsert({"type": key, "data": data}, DATA.type == key)


def db_remove_prefix(prefix):
    """prefix로 시작하는 모든 키를 삭제한다."""
    DB.remove(DATA.type.test(lambda t: t.startswith(prefix)))


# ─── 에러 처리 ───

@circuit_bp.errorhandler(ConfigurationError)
def handle_configuration_error(err):
    return jsonify({"error": str(err)}), 400


@circuit_bp.errorhandler(DecodingError)
def handle_decoding_error(err):
    return jsonify({"error": str(err)}), 400


# ─── 입력 헬퍼 ───

def _store_inputs(pk, message, sig):
    data = {
        "public_key": pk.to_bytes().hex(),
        "signature": sig.to_bytes().hex(),
        "message": message.decode("utf-8"),
        "n": pk.n,
        "valid": pk.verify(message, sig),
    }
    db_set("circuit.inputs", data)
    # 입력이 바뀌면 이전 합성 결과는 무효
    db_remove_prefix("circuit.build.")
    return data


def _load_inputs():
    """DB 의 입력을 (pk, msg, sig) 로 복원한다. 없으면 None."""
    data = db_get("circuit.inputs")
    if data is None:
        return None
    pk = PublicKey.from_bytes(bytes.fromhex(data["public_key"]))
    sig = Signature.from_bytes(bytes.fromhex(data["signature"]))
    return pk, data["message"].encode("utf-8"), sig


def _build_from_request(body):
    inputs = _load_inputs()
    if inputs is None:
        return None, None
    pk, msg, sig = inputs
    variant = body.get("variant", "ntt")
    backend = body.get("backend", "r1cs")
    return build_verification_circuit(variant, backend, pk, msg, sig)


def _no_inputs():
    return jsonify({"error": "입력이 없습니다. /circuit/inputs 를 먼저 호출하세요"}), 400


# ──────────────────────────────────────────────────────────────
# 입력
# ──────────────────────────────────────────────────────────────

@circuit_bp.route("/inputs", methods=["GET"])
def inputs_get():
    return jsonify(db_get("circuit.inputs"))


@circuit_bp.route("/inputs", methods=["POST"])
def inputs_save():
    """hex 로 인코딩된 공개키와 서명, 평문 메시지를 저장한다."""
    body = request.get_json(silent=True) or {}
    try:
        pk = PublicKey.from_bytes(bytes.fromhex(body["public_key"]))
        sig = Signature.from_bytes(bytes.fromhex(body["signature"]))
        message = body["message"].encode("utf-8")
    except KeyError as err:
        return jsonify({"error": f"필드가 없습니다: {err.args[0]}"}), 400
    except ValueError as err:
        # DecodingError 와 잘못된 hex 모두
        return jsonify({"error": str(err)}), 400
    return jsonify(_store_inputs(pk, message, sig))


@circuit_bp.route("/inputs/generate", methods=["POST"])
def inputs_generate():
    """시드로 키 쌍을 만들고 메시지에 서명해 입력으로 저장한다."""
    body = request.get_json(silent=True) or {}
    n = int(body.get("n", 512))
    seed = body.get("seed", "falcon seed").encode("utf-8")
    message = body.get("message", "testing message").encode("utf-8")

    keypair = KeyPair.keygen(n, seed=seed)
    sig = keypair.secret_key.sign_with_seed(seed, message)
    logger.info("generated falcon-%d key pair and signature", n)
    return jsonify(_store_inputs(keypair.public_key, message, sig))


# ──────────────────────────────────────────────────────────────
# 회로
# ──────────────────────────────────────────────────────────────

@circuit_bp.route("/build", methods=["POST"])
def circuit_build():
    """회로를 합성하고 통계와 공개 입력을 저장한다."""
    body = request.get_json(silent=True) or {}
    circuit, cs = _build_from_request(body)
    if circuit is None:
        return _no_inputs()

    stats = serialize_stats(circuit, cs)
    stats["satisfied"] = cs.is_satisfied(circuit.public_inputs())
    key = f"circuit.build.{circuit.name}.{cs.name}"
    db_set(key, {
        "stats": stats,
        "public_inputs": serialize_fr_list(circuit.public_inputs()),
    })
    return jsonify({
        "stats": stats,
        "public_inputs_preview": [fr_short(v) for v in circuit.public_inputs()[:8]],
    })


@circuit_bp.route("/check", methods=["POST"])
def circuit_check():
    """주어진 공개 입력(없으면 회로의 것)으로 만족 여부를 확인한다."""
    body = request.get_json(silent=True) or {}
    circuit, cs = _build_from_request(body)
    if circuit is None:
        return _no_inputs()

    if "public_inputs" in body:
        try:
            public_inputs = deserialize_fr_list(body["public_inputs"])
        except (TypeError, ValueError) as err:
            return jsonify({"error": f"공개 입력이 잘못되었습니다: {err}"}), 400
    else:
        public_inputs = circuit.public_inputs()

    reason = cs.which_is_unsatisfied(public_inputs)
    return jsonify({
        "variant": circuit.name,
        "backend": cs.name,
        "satisfied": reason is None,
        "unsatisfied": reason,
    })


@circuit_bp.route("/rows", methods=["POST"])
def circuit_rows():
    """제약 행 [offset, offset+limit) 을 돌려준다."""
    body = request.get_json(silent=True) or {}
    circuit, cs = _build_from_request(body)
    if circuit is None:
        return _no_inputs()

    offset = int(body.get("offset", 0))
    limit = int(body.get("limit", DEFAULT_ROWS_LIMIT))
    return jsonify({
        "backend": cs.name,
        "total": cs.num_constraints,
        "rows": serialize_rows(cs, offset, limit),
    })


@circuit_bp.route("/stats", methods=["GET"])
def circuit_stats():
    builds = DB.search(DATA.type.test(lambda t: t.startswith("circuit.build.")))
    return jsonify({row["type"]: row["data"]["stats"] for row in builds})


@circuit_bp.route("/clear", methods=["POST"])
def circuit_clear():
    db_remove_prefix("circuit.")
    return jsonify({"cleared": True})
