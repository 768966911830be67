from .client import NNTPClient, connect, default_host
from .errors import (
    NNTPDataError,
    NNTPError,
    NNTPPermanentError,
    NNTPProtocolError,
    NNTPReplyError,
    NNTPSyncError,
    NNTPTemporaryError,
    NNTPUnsupportedError,
    NNTPUsageError,
)
from .transport import SocketTransport, Transport
from .types import GroupState, Response

__all__ = [
    "GroupState",
    "NNTPClient",
    "NNTPDataError",
    "NNTPError",
    "NNTPPermanentError",
    "NNTPProtocolError",
    "NNTPReplyError",
    "NNTPSyncError",
    "NNTPTemporaryError",
    "NNTPUnsupportedError",
    "NNTPUsageError",
    "Response",
    "SocketTransport",
    "Transport",
    "connect",
    "default_host",
]
