from ace7crypt.data.crypto import CryptoError, AssetCrypto, Crypt_ACE7, TransformDirection
