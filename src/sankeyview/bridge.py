"""Node-tap bridge between the page and the host.

The page posts one string per tap (the node's ``id``, else its ``name``) on a
single named channel. The host registers a ``TapMessageReceiver`` for that
channel; the receiver checks the message and calls the ``NodeTapHandler``.

Nothing here is created when no handler is registered: the view injects no
click script and opens no channel.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)

CHANNEL_NAME = "sankeyNodeTapped"
REBUILT_EVENT = "sankeyRebuilt"
HTTP_BRIDGE_PREFIX = "/bridge/"


class BridgeState(Enum):
    """Whether a view opened the tap channel."""

    UNREGISTERED = "unregistered"
    REGISTERED = "registered"


class NodeTapHandler:
    """Base class for tap consumers.

    Subclass and override ``on_node_tap``, or wrap a plain function with
    ``CallbackTapHandler``.
    """

    def on_node_tap(self, node_id: str) -> None:
        """Called once per tap with the tapped node's identifier."""


class CallbackTapHandler(NodeTapHandler):
    """Adapts a ``Callable[[str], None]`` to the handler interface."""

    def __init__(self, callback: Callable[[str], Any]) -> None:
        self.callback = callback

    def on_node_tap(self, node_id: str) -> None:
        self.callback(node_id)

    def __repr__(self) -> str:
        return f"CallbackTapHandler({self.callback!r})"


def as_tap_handler(handler: NodeTapHandler | Callable[[str], Any]) -> NodeTapHandler:
    if isinstance(handler, NodeTapHandler):
        return handler
    if callable(handler):
        return CallbackTapHandler(handler)
    raise TypeError(f"Expected a NodeTapHandler or callable, got {type(handler).__name__}")


@dataclass(frozen=True)
class ScriptMessage:
    """A message delivered by a surface: channel name and decoded body."""

    name: str
    body: Any


class TapMessageReceiver:
    """Host-side end of the tap channel.

    Messages for another channel, or whose body is not a string, are dropped
    without calling the handler.
    """

    def __init__(self, handler: NodeTapHandler, channel: str = CHANNEL_NAME) -> None:
        self.handler = handler
        self.channel = channel

    def did_receive(self, message: ScriptMessage) -> bool:
        """Deliver ``message`` to the handler. Returns True if it was delivered."""
        if message.name != self.channel:
            logger.debug("Dropping message for channel %r (expected %r)", message.name, self.channel)
            return False
        if not isinstance(message.body, str):
            logger.debug("Dropping %r message with %s body", message.name, type(message.body).__name__)
            return False
        self.handler.on_node_tap(message.body)
        return True

    def receive_json(self, name: str, raw: str | bytes) -> bool:
        """Decode a JSON-encoded body and deliver it. Undecodable bodies are dropped."""
        try:
            body = json.loads(raw)
        except (TypeError, ValueError):
            logger.debug("Dropping %r message with undecodable body", name)
            return False
        return self.did_receive(ScriptMessage(name, body))


class BridgeTransport(Enum):
    """How the page posts a tap to its host.

    ``WEBKIT`` targets WKWebView-style embedders and ``HTTP`` targets
    ``LocalWebSurface``. ``PARENT_FRAME`` is for custom surfaces that host the
    document in an iframe and relay ``{channel, body}`` window messages to
    ``TapMessageReceiver.did_receive``. ``SankeyWidget`` does not use it, since
    a notebook iframe has no receiver on the Python side.
    """

    WEBKIT = "webkit"
    HTTP = "http"
    PARENT_FRAME = "parent-frame"


def _post_statement(transport: BridgeTransport, channel: str) -> str:
    channel_js = json.dumps(channel)
    if transport is BridgeTransport.WEBKIT:
        return f"window.webkit.messageHandlers[{channel_js}].postMessage(body);"
    if transport is BridgeTransport.HTTP:
        url_js = json.dumps(HTTP_BRIDGE_PREFIX + channel)
        return (
            f"fetch({url_js}, {{method: 'POST', "
            "headers: {'Content-Type': 'application/json'}, "
            "body: JSON.stringify(body)});"
        )
    return f"window.parent.postMessage({{channel: {channel_js}, body: body}}, '*');"


def tap_listener_script(transport: BridgeTransport, channel: str = CHANNEL_NAME) -> str:
    """Script that posts a node's ``id`` (else ``name``) when its rect is clicked.

    Hooks once the DOM is loaded and again on every ``sankeyRebuilt`` event,
    since each redraw replaces the node rects.
    """
    post = _post_statement(BridgeTransport(transport), channel)
    return f"""document.addEventListener('DOMContentLoaded', () => {{
  function hook() {{
    d3.selectAll('.node rect').on('click', (event, d) => {{
      const body = d.id || d.name;
      {post}
    }});
  }}
  hook();
  document.querySelector('svg').addEventListener('{REBUILT_EVENT}', hook);
}});"""
