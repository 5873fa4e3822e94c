import logging
from bisect import bisect_left

import constants


logger = logging.getLogger(__name__)


class DataOverflowError(OverflowError):
    '''
    Payload does not fit the largest supported version
    '''


class UnsupportedCharacterError(ValueError):
    '''
    Payload holds a character that byte mode cannot carry
    '''


class RSBlock:

    def __init__(self, total_count, data_count):
        self.total_count = total_count
        self.data_count = data_count

    @property
    def ec_count(self):
        return self.total_count - self.data_count


def check_version(version):
    if not constants.MIN_VERSION <= version <= constants.MAX_VERSION:
        raise ValueError('Invalid version {}'.format(version))


def rs_blocks(version):
    check_version(version)
    rs_block = constants.RS_BLOCK_TABLE[version - 1]

    blocks = []

    for i in range(0, len(rs_block), 3):
        count, total_count, data_count = rs_block[i:i + 3]
        for j in range(count):
            blocks.append(RSBlock(total_count, data_count))

    return blocks


def data_codewords(version):
    return sum(block.data_count for block in rs_blocks(version))


def total_codewords(version):
    return sum(block.total_count for block in rs_blocks(version))


def ec_count(version):
    check_version(version)
    return constants.EC_COUNT_TABLE[version]


# Precompute bit count limits, indexed by version
BIT_LIMIT_TABLE = [0] + [8 * data_codewords(version)
                         for version in range(constants.MIN_VERSION, constants.MAX_VERSION + 1)]

# GF(256) tables, exponents mirrored past 255 so log sums need no modulo

exponents = [0] * 512
log = [0] * 256

_x = 1
for i in range(255):
    exponents[i] = _x
    log[_x] = i
    _x <<= 1
    if _x & 0x100:
        _x ^= constants.GF_PRIMITIVE

for i in range(255, 512):
    exponents[i] = exponents[i - 255]

del _x


def _log(n):
    if n < 1:  # pragma: no cover
        raise ValueError(f"_log({n})")
    return log[n]


def _exp(n):
    return exponents[n]


def gf_multiply(a, b):
    if a == 0 or b == 0:
        return 0
    return exponents[log[a] + log[b]]


def rs_generator(ec_cnt):
    '''
    Generator polynomial prod(x - a^i) for i < ec_cnt
    Coefficients lowest degree first, gen[ec_cnt] == 1
    '''
    gen = [0] * (ec_cnt + 1)
    gen[0] = 1
    for i in range(ec_cnt):
        for j in range(ec_cnt, 0, -1):
            gen[j] = gf_multiply(gen[j], _exp(i)) ^ gen[j - 1]
        gen[0] = gf_multiply(gen[0], _exp(i))
    return gen


def rs_encode(data, ec_cnt):
    '''
    Error correction codewords of one block
    Long division by the generator run as a shift register
    '''
    gen = rs_generator(ec_cnt)
    remainder = [0] * ec_cnt

    for byte in data:
        coef = byte ^ remainder[0]
        remainder.pop(0)
        remainder.append(0)
        if coef != 0:
            for j in range(ec_cnt):
                remainder[j] ^= gf_multiply(gen[ec_cnt - 1 - j], coef)

    return remainder


# QRcode valid data type
class QRData:
    '''
    Byte mode data segment
    str payloads are taken one byte per character (ISO-8859-1)
    '''
    def __init__(self, data):
        if isinstance(data, (bytes, bytearray)):
            data = bytes(data)
        else:
            try:
                data = str(data).encode('latin-1')
            except UnicodeEncodeError as exc:
                raise UnsupportedCharacterError(
                    'Character {!r} at position {} cannot be encoded in byte mode'.format(
                        exc.object[exc.start], exc.start)) from exc
        self.data = data
        self.mode = constants.EIGHT_BIT_BYTE_MODE

    def __len__(self):
        return len(self.data)

    def write(self, buffer):
        for c in self.data:
            buffer.put(c, 8)

    def __repr__(self):
        return repr(self.data)


class BitBuffer:
    '''
    Library to store data by bit
    '''
    def __init__(self):
        self.buffer = []
        self.length = 0

    def __repr__(self):
        return '.'.join([str(n) for n in self.buffer])

    def __len__(self):
        return self.length

    def get(self, index):
        '''
        Gets the n-th elements of the bitarray
        '''
        buf_index = index // 8
        position = index % 8
        return ((self.buffer[buf_index] >> (7 - position)) & 1) == 1

    def set(self, bit = 1):
        '''
        Sets the back elements of the bitarray
        '''
        length = self.length
        buf_index = length // 8
        position = length % 8
        if len(self.buffer) <= buf_index:
            self.buffer.append(0)
        if bit:
            self.buffer[buf_index] = self.buffer[buf_index] | 1 << (7 - position)
        self.length += 1

    def put(self, data, length):
        '''
        put num by bit
        '''
        for i in range(length):
            self.set(((data >> (length-i-1)) & 1) == 1)


def bits_number_for_version(version):
    if version < 10:
        return constants.MODE_SIZE_SMALL
    else:
        return constants.MODE_SIZE_MEDIUM


def best_version(length, start = None):
    '''
    Smallest version whose capacity holds length bytes
    '''
    if start is None:
        start = constants.MIN_VERSION
    check_version(start)

    version = bisect_left(constants.CAPACITY_TABLE, length, start)
    if version > constants.MAX_VERSION:
        raise DataOverflowError(
            'Data overflow: {} bytes, version {} holds at most {}'.format(
                length, constants.MAX_VERSION, constants.CAPACITY_TABLE[constants.MAX_VERSION]))

    logger.debug('%d bytes fit version %d', length, version)
    return version


def copy_mat(x):
    return [row[:] for row in x]


def BCH_digit(data):
    '''
    Count Bits in binary representation of data for error correction
    '''
    digit = 0
    while data != 0:
        digit += 1
        data >>= 1
    return digit


def BCH_code_version_info(data):
    '''
    Error correction Version Information According to Annex D
    '''
    d = data << 12 # raise power to (18-6)-th
    while BCH_digit(d) - BCH_digit(constants.G18) >= 0:
        d ^= (constants.G18 << (BCH_digit(d) - BCH_digit(constants.G18)))
        # Divide by G18 and add
    return (data << 12) | d


def put_data(version, data):
    '''
    Data encodation process
    Returns the data codewords (mode, count, payload, terminator, padding)
    '''
    buffer = BitBuffer()
    buffer.put(data.mode, constants.MODE_INDICATOR_BITS)
    buffer.put(len(data), bits_number_for_version(version))
    data.write(buffer)

    # Calculate the maximum bits
    max_bit = BIT_LIMIT_TABLE[version]
    if len(buffer) > max_bit:
        raise DataOverflowError('Data overflow for version {}.'.format(version))

    # Terminate
    for _ in range(min(max_bit - len(buffer), 4)):
        buffer.set(False)

    # Rearrangement
    if len(buffer) % 8: # rearrange if there is remaining bit
        for _ in range(8-len(buffer) % 8):
            buffer.set(False)

    # Divide into 8-bit codewords, adding padding bits
    padding_bytes = (max_bit - len(buffer)) // 8

    for i in range(padding_bytes):
        if i % 2:
            buffer.put(constants.PAD1, 8)
        else:
            buffer.put(constants.PAD0, 8)

    return buffer.buffer


def split_blocks(codewords, blocks):
    '''
    Split the data codewords into blocks and compute each block's
    error correction codewords
    '''
    offset = 0
    data_encode = []
    err_encode = []

    for block in blocks:
        chunk = codewords[offset:offset + block.data_count]
        offset += block.data_count

        data_encode.append(chunk)
        err_encode.append(rs_encode(chunk, block.ec_count))

    return data_encode, err_encode


def interleave(data_encode, err_encode):
    '''
    Take codewords column by column across blocks, data first
    '''
    data = []

    max_data_cnt = max(len(block) for block in data_encode)
    for i in range(max_data_cnt):
        for block in data_encode:
            if i < len(block):
                data.append(block[i])

    max_err_cnt = max(len(block) for block in err_encode)
    for i in range(max_err_cnt):
        for block in err_encode:
            if i < len(block):
                data.append(block[i])

    return data


def pack(data, start = None):
    '''
    Pick a version for data and return (version, final codeword sequence)
    '''
    if not isinstance(data, QRData):
        data = QRData(data)

    version = best_version(len(data), start)
    codewords = put_data(version, data)
    data_encode, err_encode = split_blocks(codewords, rs_blocks(version))

    return version, interleave(data_encode, err_encode)


def mask_function(mask_pattern):
    '''
    Give the mask function for given pattern
    Only pattern 000 is supported; the format information is fixed to it
    '''
    if mask_pattern == 0:
        return lambda i, j: (i + j) % 2 == 0
    else:
        raise ValueError('Invalid mask pattern {}'.format(mask_pattern))


def zigzag(modules_cnt):
    '''
    Placement order of data modules
    Column pairs right to left, upward first, alternating direction;
    the vertical timing column 6 is skipped
    '''
    upward = True

    for c in range(modules_cnt - 1, 0, -2):
        if c <= 6:
            c -= 1

        if upward:
            rows = range(modules_cnt - 1, -1, -1)
        else:
            rows = range(modules_cnt)

        for r in rows:
            yield r, c
            yield r, c - 1

        upward = not upward
