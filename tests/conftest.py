"""
Shared fixtures: hand-built ``requests.Response`` objects stand in for the network.
"""

import json

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from reclaim_cli.reclaim_api.http_client import ReclaimClient


def build_response(status=200, body="", headers=None, url="https://api.app.reclaim.ai/api/tasks"):
    if not isinstance(body, str):
        body = json.dumps(body)
    response = requests.Response()
    response.status_code = status
    response._content = body.encode("utf-8")
    response._content_consumed = True
    response.headers = CaseInsensitiveDict(headers or {})
    response.url = url
    response.encoding = "utf-8"
    return response


@pytest.fixture
def make_response():
    return build_response


@pytest.fixture
def client():
    return ReclaimClient("test-key")


@pytest.fixture
def send(client, mocker):
    """Patch the session so each request returns the response set on ``send.return_value``."""
    return mocker.patch.object(client.session, "send", return_value=build_response(body=[]))
