"""Protocolos (seams) entre os componentes do cliente."""

from fcm_push.protocols.auth import TokenFetcherProtocol, TokenProviderProtocol
from fcm_push.protocols.encoder import MessageEncoderProtocol

__all__ = [
    "MessageEncoderProtocol",
    "TokenFetcherProtocol",
    "TokenProviderProtocol",
]
