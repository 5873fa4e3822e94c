import pytest

import app as app_module
import constants
import util
from config import TestingConfig


@pytest.fixture
def app():
    return app_module.create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()


def read_codewords(q):
    '''
    Undo the mask on a finished symbol and read the codewords back
    along the placement path
    '''
    mask = util.mask_function(constants.MASK_PATTERN)
    bits = []
    for r, c in util.zigzag(q.modules_cnt):
        if q.is_function[r][c]:
            continue
        bit = q.modules[r][c]
        if mask(r, c):
            bit = not bit
        bits.append(1 if bit else 0)

    total = util.total_codewords(q.version)
    codewords = []
    for i in range(total):
        byte = 0
        for bit in bits[i * 8:i * 8 + 8]:
            byte = (byte << 1) | bit
        codewords.append(byte)
    return codewords


def syndromes(codewords, ec_cnt):
    result = []
    for i in range(ec_cnt):
        s = 0
        for byte in codewords:
            s = util.gf_multiply(s, util._exp(i)) ^ byte
        result.append(s)
    return result
