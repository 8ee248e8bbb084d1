# streamchat/api/deps.py
from fastapi import Request

from streamchat.services.relay import ChatRelay


def get_relay(request: Request) -> ChatRelay:
    return request.app.state.relay
