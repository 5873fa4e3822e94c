"""Flask configuration; any key can be overridden with a LABELQR_ environment variable."""

import constants


class Config:
    QR_MODULE_SIZE = constants.DEFAULT_MODULE_SIZE
    QR_MAX_MODULE_SIZE = 32
    LABEL_SHOP_NAME = 'TOKO JITU MOTOR'
    LABEL_DEFAULT_SIZE = 'medium'
    LABEL_MAX_QTY = 100


class TestingConfig(Config):
    TESTING = True
