"""AT Protocol (Bluesky) adapters: login, blob upload, handles, posts."""

from .repo import AtprotoBlobStore, AtprotoHandleResolver, PostAPI
from .session import login, save_session, xrpc_url

__all__ = [
    "AtprotoBlobStore",
    "AtprotoHandleResolver",
    "PostAPI",
    "login",
    "save_session",
    "xrpc_url",
]
