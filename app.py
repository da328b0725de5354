"""
Falcon 서명 검증 회로 웹 앱
============================

환경 변수:
  | 이름            | 설명                                        |
  |-----------------|---------------------------------------------|
  | FALCON_ZKP_DB   | TinyDB 파일 경로 (없으면 메모리 DB)         |

실행:
    $ flask --app app run
"""

import logging
import os

from flask import Flask, jsonify
from tinydb import TinyDB
from tinydb.storages import MemoryStorage

from falcon_zkp.circuits import CIRCUITS
from falcon_zkp.cs import BACKENDS
from falcon_zkp.falcon.param import PARAMS

from circuit_routes import circuit_bp, init_circuit_bp

logger = logging.getLogger(__name__)


def open_db(path=None):
    if path:
        return TinyDB(path)      # Storage DB
    return TinyDB(storage=MemoryStorage)  # Memory DB


def create_app(db_path=None):
    app = Flask(__name__)
    app.config["DB_PATH"] = db_path or os.environ.get("FALCON_ZKP_DB")

    db = open_db(app.config["DB_PATH"])
    init_circuit_bp(db)
    app.register_blueprint(circuit_bp)
    logger.info("db: %s", app.config["DB_PATH"] or "memory")

    @app.route("/")
    def main():
        return jsonify({
            "variants": list(CIRCUITS),
            "backends": list(BACKENDS),
            "params": {
                str(n): {
                    "sig_l2_bound": p.sig_l2_bound,
                    "pk_bytelen": p.pk_bytelen,
                    "sig_bytelen": p.sig_bytelen,
                }
                for n, p in PARAMS.items()
            },
        })

    return app


app = create_app()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(debug=True)
