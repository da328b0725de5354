import sys
import os
import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = os.path.abspath(os.path.join(os.path.dirname(__file__), '..'))
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from falcon_zkp.cs import R1CS
from falcon_zkp.falcon.keys import KeyPair
from falcon_zkp.falcon.param import MODULUS
from falcon_zkp.field import CURVE_ORDER


# ── 테스트 상수 ──
TEST_MESSAGE = b"testing message"
KEY_SEED = b"key seed"
SIGN_SEED = b"test seed"


@pytest.fixture(scope="session")
def message():
    return TEST_MESSAGE


@pytest.fixture(scope="session")
def keypair():
    """Falcon-512 키 쌍 (시드 고정)."""
    return KeyPair.keygen(512, seed=KEY_SEED)


@pytest.fixture(scope="session")
def public_key(keypair):
    return keypair.public_key


@pytest.fixture(scope="session")
def signature(keypair):
    """TEST_MESSAGE 에 대한 결정적 서명."""
    return keypair.secret_key.sign_with_seed(SIGN_SEED, TEST_MESSAGE)


class ForgingR1CS(R1CS):
    """mod_q 의 몫을 필드에서 풀어 원하는 나머지를 주장하는 prover.

    claims[var] = c 이면 value(var) 는 c + q·t 를 돌려준다. t 는
    var - t·q ≡ c (mod p) 를 만족하는 필드 원소이므로, mod_q 는 이 값에서
    몫 t 와 나머지 c 를 witness 로 잡는다. shift 를 주면 claims 에 없는
    변수도 실제 나머지 + shift 를 주장한다.
    """

    def __init__(self, shift=None):
        super().__init__()
        self.claims = {}
        self.shift = shift

    def claim(self, var, remainder):
        self.claims[var] = remainder

    def value(self, var):
        if var in self.claims:
            c = self.claims[var]
        elif self.shift is not None:
            c = (self.values[var] % MODULUS + self.shift) % MODULUS
        else:
            return super().value(var)
        t = (self.values[var] - c) * pow(MODULUS, -1, CURVE_ORDER) % CURVE_ORDER
        return c + MODULUS * t


@pytest.fixture
def forging_cs():
    return ForgingR1CS
