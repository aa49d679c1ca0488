from channelhub.infra.jwt.pyjwt_token_provider import JWTTokenProvider

__all__ = ["JWTTokenProvider"]
