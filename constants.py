# Byte mode is the only data mode
EIGHT_BIT_BYTE_MODE = 1 << 2
MODE_INDICATOR_BITS = 4

# Character count indicator width for byte mode
MODE_SIZE_SMALL = 8     # version 1-9
MODE_SIZE_MEDIUM = 16   # version 10

MIN_VERSION = 1
MAX_VERSION = 10

# Pad codewords, alternating
PAD0 = 0xEC
PAD1 = 0x11

# GF(256) reduction polynomial x^8 + x^4 + x^3 + x^2 + 1
GF_PRIMITIVE = 0x11D

# Max payload bytes per version at error correction level L, index 0 unused
CAPACITY_TABLE = [0, 17, 32, 53, 78, 106, 134, 154, 192, 230, 271]

# (count, total codewords, data codewords) per block group, level L
RS_BLOCK_TABLE = [
    # 1
    [1, 26, 19],
    # 2
    [1, 44, 34],
    # 3
    [1, 70, 55],
    # 4
    [1, 100, 80],
    # 5
    [1, 134, 108],
    # 6
    [2, 86, 68],
    # 7
    [2, 98, 78],
    # 8
    [2, 121, 97],
    # 9
    [2, 146, 116],
    # 10
    [2, 86, 68, 2, 87, 69],
]

# Error correction codewords per block, index 0 unused
EC_COUNT_TABLE = [0, 7, 10, 15, 20, 26, 18, 20, 24, 30, 18]

# Alignment pattern centre coordinates
PATTERN_POSITION = [
    [],
    [],
    [6, 18],
    [6, 22],
    [6, 26],
    [6, 30],
    [6, 34],
    [6, 22, 38],
    [6, 24, 42],
    [6, 26, 46],
    [6, 28, 50],
]

# Format information for error correction level L with mask pattern 000,
# BCH protected and XORed with 101010000010010
FORMAT_INFO_BITS = 0b111011111000100
MASK_PATTERN = 0

# Version information generator, x^12 + x^11 + x^10 + x^9 + x^8 + x^5 + x^2 + 1
G18 = (1 << 12) | (1 << 11) | (1 << 10) | (1 << 9) | (1 << 8) | (1 << 5) | (1 << 2) | (1 << 0)
VERSION_INFO_MIN = 7

# Rendering
QUIET_ZONE = 2
DEFAULT_MODULE_SIZE = 4
SVG_NAMESPACE = 'http://www.w3.org/2000/svg'
COLOR_DARK = 'black'
COLOR_LIGHT = 'white'

# Print label presets: module size per label size
LABEL_MODULE_SIZE = {
    'small': 2,
    'medium': 3,
    'large': 4,
}
