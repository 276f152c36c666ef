from identity_service.infra.jwt.hmac_token_codec import ALGORITHM, MIN_KEY_BYTES, HmacTokenCodec

__all__ = ["ALGORITHM", "MIN_KEY_BYTES", "HmacTokenCodec"]
