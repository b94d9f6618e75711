from .http_client import HTTPClient as HTTPClient
from .models import (
    HTTPResponse as HTTPResponse,
    RemoteCallReply as RemoteCallReply,
    RemoteCallRequest as RemoteCallRequest,
)
from .remote_call import (
    HTTPRemoteCaller as HTTPRemoteCaller,
    RemoteCaller as RemoteCaller,
    multicall as multicall,
)
