import io
import logging
import numbers
import os
import re
import sys

import matplotlib
matplotlib.use('Agg')
from matplotlib import pyplot as plt
import numpy as np

import constants
import util


logger = logging.getLogger(__name__)

# version -> (modules, reserved) skeleton, copied on every use
cache_qr_mat = {}

DEFAULT_IMAGE_NAME = 'qrcode'

class QRcode:
    def __init__(self, data = None, version = None,
                module_size = constants.DEFAULT_MODULE_SIZE,
                border = constants.QUIET_ZONE):
        if (isinstance(module_size, bool) or not isinstance(module_size, numbers.Integral)
                or module_size <= 0):
            raise ValueError('Expect module size to be a positive integer, got {!r}.'.format(module_size))
        if border < 0:
            raise ValueError('Expect border >= 0.')
        # smallest version the caller allows; self.version is the fitted one
        self.requested_version = version and int(version)
        if self.requested_version:
            util.check_version(self.requested_version)
        self.module_size = int(module_size)
        self.border = int(border)
        self.clear()
        if data is not None:
            self.add_data(data)

    def clear(self):
        '''
        Reset all data
        '''
        self.version = self.requested_version
        self.modules = None
        self.reserved = None
        self.is_function = None
        self.modules_cnt = 0 # No of modules/side
        self.data_cache = None
        self.data = None

    def add_data(self, data):
        '''
        Set the payload, replacing any previous one
        '''
        if isinstance(data, util.QRData):
            self.data = data
        else:
            self.data = util.QRData(data)
        self.version = self.requested_version
        self.data_cache = None
        self.modules = None

    def make(self, fit = True):
        '''
        A wrapper
        Data Encodation + Error Correction Coding + Structure final Message + Placement in Matrix
        :param fit: True -> use best_fit to find the smallest version from the requested one up
        '''
        if self.data is None:
            raise ValueError('No data to encode')
        if fit or (self.version == None):
            self.best_fit(start=self.requested_version)
        self.makeImpl()

    def best_fit(self, start = None):
        '''
        Finds an optimal size(version) for data
        '''
        self.version = util.best_version(len(self.data), start)
        return self.version

    def makeImpl(self):
        '''
        Make mat
        '''
        util.check_version(self.version)
        self.modules_cnt = self.version*4 + 17

        if self.version in cache_qr_mat:
            modules, reserved = cache_qr_mat[self.version]
            self.modules = util.copy_mat(modules)
            self.reserved = util.copy_mat(reserved)
        else:
            self.setup_skeleton()
            # save current modules
            cache_qr_mat[self.version] = (util.copy_mat(self.modules), util.copy_mat(self.reserved))
            logger.debug('cached skeleton for version %d', self.version)

        self.is_function = [
            [self.modules[r][c] is not None or self.reserved[r][c] for c in range(self.modules_cnt)]
            for r in range(self.modules_cnt)
        ]

        if self.data_cache == None:
            codewords = util.put_data(self.version, self.data)
            data_encode, err_encode = util.split_blocks(codewords, util.rs_blocks(self.version))
            self.data_cache = util.interleave(data_encode, err_encode)

        self.mapping(self.data_cache)
        self.apply_mask(constants.MASK_PATTERN)
        self.setup_type_info()

    def setup_skeleton(self):
        '''
        Function patterns and reserved areas of an empty symbol
        '''
        self.modules = [[None] * self.modules_cnt for _ in range(self.modules_cnt)]
        self.reserved = [[False] * self.modules_cnt for _ in range(self.modules_cnt)]

        self.setup_finder_pattern(0, 0)
        self.setup_finder_pattern(self.modules_cnt - 7, 0)
        self.setup_finder_pattern(0, self.modules_cnt - 7)
        self.setup_position_align_pattern()
        self.setup_timing_pattern()
        self.setup_dark_module()
        self.reserve_type_info()

        if self.version >= constants.VERSION_INFO_MIN:
            self.setup_version_info()

    def setup_finder_pattern(self, row, col):
        '''
        Set the finder pattern for localization
        Usually we need 3 finder pattern 1:1:3:1:1
        The light separator around it is part of the footprint
        '''
        for r in range(-1, 8):
            if row + r <= -1 or self.modules_cnt <= row + r:
                continue

            for c in range(-1, 8):

                if col + c <= -1 or self.modules_cnt <= col + c:
                    continue
                if (
                    (0 <= r <= 6 and c in {0, 6})
                    or (0 <= c <= 6 and r in {0, 6})
                    or (2 <= r <= 4 and 2 <= c <= 4)
                ):
                    self.modules[row + r][col + c] = True
                else:
                    self.modules[row + r][col + c] = False

    def setup_position_align_pattern(self):
        '''
        Align Pattern for version 2 and up
        Centres already claimed by a finder are skipped
        '''
        pos = constants.PATTERN_POSITION[self.version]
        for row in pos:

            for col in pos:

                if self.modules[row][col] is not None:
                    continue

                for r in range(-2, 3):

                    for c in range(-2, 3):

                        if (r == -2 or r == 2 or c == -2 or c == 2 or
                                (r == 0 and c == 0)):
                            self.modules[row + r][col + c] = True
                        else:
                            self.modules[row + r][col + c] = False

    def setup_timing_pattern(self):
        '''
        Set up Timing pattern
        Used as axis in QR code
        '''
        for r in range(8, self.modules_cnt - 8):
            if self.modules[r][6] is not None:
                continue
            self.modules[r][6] = (r % 2 == 0)

        for c in range(8, self.modules_cnt - 8):
            if self.modules[6][c] is not None:
                continue
            self.modules[6][c] = (c % 2 == 0)

    def setup_dark_module(self):
        self.modules[self.modules_cnt - 8][8] = True

    def type_info_cells(self):
        '''
        (bit index, row, col) for both copies of the format information
        bit 0 is the least significant bit
        '''
        # vertical
        for r in range(15):
            if r < 6:
                yield r, r, 8
            elif r < 8:
                yield r, r + 1, 8
            else:
                yield r, self.modules_cnt - 15 + r, 8

        # horizontal
        for c in range(15):
            if c < 8:
                yield c, 8, self.modules_cnt - c - 1
            elif c < 9:
                yield c, 8, 15 - c
            else:
                yield c, 8, 15 - c - 1

    def reserve_type_info(self):
        for _, r, c in self.type_info_cells():
            self.reserved[r][c] = True

    def setup_type_info(self):
        '''
        Write the fixed format information (level L, mask 000)
        '''
        for i, r, c in self.type_info_cells():
            self.modules[r][c] = ((constants.FORMAT_INFO_BITS >> i) & 1) == 1

    def setup_version_info(self):
        '''
        Setup the qr code about version info for high version
        '''
        data_BCH = util.BCH_code_version_info(self.version)

        for r in range(18):
            mod = ((data_BCH >> r) & 1) == 1
            self.modules[r // 3][r%3 + self.modules_cnt - 11] = mod

        for c in range(18):
            mod = ((data_BCH >> c) & 1) == 1
            self.modules[c%3 + self.modules_cnt - 11][c // 3] = mod

    def mapping(self, data):
        '''
        Module placement in matrix
        Bits of the interleaved codewords, most significant first, along the
        zig-zag path; cells left over after the last codeword get 0
        '''
        bits = (((byte >> i) & 1) == 1 for byte in data for i in range(7, -1, -1))

        for r, c in util.zigzag(self.modules_cnt):
            if self.is_function[r][c]:
                continue
            self.modules[r][c] = next(bits, False)

    def apply_mask(self, mask_pattern):
        '''
        XOR every data module with the mask; applying it twice restores the data
        '''
        mask_func = util.mask_function(mask_pattern)

        for r in range(self.modules_cnt):
            for c in range(self.modules_cnt):
                if self.is_function[r][c]:
                    continue
                if mask_func(r, c):
                    self.modules[r][c] = not self.modules[r][c]

    def get_mat(self):
        '''
        Return the Qrcode in mat with the quiet zone around it
        '''

        if self.modules is None:
            self.make()

        if not self.border:
            return util.copy_mat(self.modules)

        mat_size_with_border = self.modules_cnt + 2 * self.border
        mat = [[False] * mat_size_with_border for _ in range(self.border)]
        margin = [False] * self.border
        for module in self.modules:
            mat.append(margin + module + margin)
        mat.extend([False] * mat_size_with_border for _ in range(self.border))

        return mat

    def make_svg(self):
        '''
        Render as a standalone SVG document
        One black rect per dark module on a white background
        '''
        if self.modules is None:
            self.make()

        scale = self.module_size
        dim = (self.modules_cnt + 2 * self.border) * scale
        parts = [
            f'<svg xmlns="{constants.SVG_NAMESPACE}" width="{dim}" height="{dim}"'
            f' viewBox="0 0 {dim} {dim}">',
            f'<rect width="{dim}" height="{dim}" fill="{constants.COLOR_LIGHT}"/>',
        ]
        for r, row in enumerate(self.modules):
            for c, dark in enumerate(row):
                if dark:
                    parts.append(
                        f'<rect x="{(c + self.border) * scale}" y="{(r + self.border) * scale}"'
                        f' width="{scale}" height="{scale}" fill="{constants.COLOR_DARK}"/>'
                    )
        parts.append('</svg>')
        return ''.join(parts)

    def _figure(self):
        array = np.array(self.get_mat(), int)
        inches = array.shape[0] * self.module_size / 100

        fig = plt.figure(frameon=False)
        fig.set_size_inches(inches, inches)
        ax = plt.Axes(fig, [0., 0., 1., 1.])
        ax.set_axis_off()
        fig.add_axes(ax)
        ax.imshow(array, 'gray_r', interpolation='nearest', vmin=0, vmax=1)
        return fig

    def png_bytes(self):
        '''
        PNG preview in memory
        '''
        fig = self._figure()
        buf = io.BytesIO()
        try:
            fig.savefig(buf, format='png', dpi=100)
        finally:
            plt.close(fig)
        return buf.getvalue()

    def make_image(self, name = None, save_dir = None):
        '''
        Save a PNG preview, return its path
        param: name without suffix
        '''
        if save_dir == None:
            save_dir = 'MyQrCode'

        if not os.path.exists(save_dir):
            os.mkdir(save_dir)

        if name == None:
            name = re.sub(r'[^A-Za-z0-9_-]', '_', self.data.data.decode('latin-1'))[:15]
            if not name.strip('_'):
                name = DEFAULT_IMAGE_NAME

        path = os.path.join(save_dir, name + '.png')
        fig = self._figure()
        try:
            fig.savefig(path, dpi=100)
        finally:
            plt.close(fig)
        return path


def generate_svg(text, module_size = constants.DEFAULT_MODULE_SIZE):
    '''
    Encode text and render it as SVG markup
    '''
    return QRcode(text, module_size=module_size).make_svg()


if __name__ == '__main__':
    if len(sys.argv) < 2:
        print('Usage: QRcode.py TEXT [MODULE_SIZE]')
        sys.exit(1)
    size = int(sys.argv[2]) if len(sys.argv) > 2 else constants.DEFAULT_MODULE_SIZE
    print(generate_svg(sys.argv[1], size))
