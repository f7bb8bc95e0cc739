from .exceptions import CryptoError
from .common import AssetCrypto, StagedFile
from .keystream import Keystream, AESKeystream, KeyTableKeystream
from .ace7_crypt import Crypt_ACE7, TransformDirection
