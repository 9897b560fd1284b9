from scrapecall.rpc.callback import CallbackRegistry, CallbackTransport, PendingCall
from scrapecall.rpc.client import RemoteCallClient
from scrapecall.rpc.direct import HttpDirectTransport
from scrapecall.rpc.injector import HttpScriptInjector
from scrapecall.rpc.protocol import CallTransport, InjectedScript, ScriptInjector
from scrapecall.rpc.request import CallRequest
from scrapecall.rpc.result import Failure, Link, Result, ScrapeData, Success

__all__ = [
    "CallbackRegistry",
    "CallbackTransport",
    "CallRequest",
    "CallTransport",
    "Failure",
    "HttpDirectTransport",
    "HttpScriptInjector",
    "InjectedScript",
    "Link",
    "PendingCall",
    "RemoteCallClient",
    "Result",
    "ScrapeData",
    "ScriptInjector",
    "Success",
]
