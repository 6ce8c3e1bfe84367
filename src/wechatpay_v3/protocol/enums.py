from enum import Enum


class ErrorCode(str, Enum):
    CONFIGURATION_ERROR = "configuration_error"
    SIGNING_ERROR = "signing_error"
    DECRYPTION_ERROR = "decryption_error"
    TRANSPORT_ERROR = "transport_error"
    GATEWAY_ERROR = "gateway_error"
    INTERNAL_ERROR = "internal_error"


class SignType(str, Enum):
    RSA = "RSA"


class AEADAlgorithm(str, Enum):
    AES_256_GCM = "AEAD_AES_256_GCM"
