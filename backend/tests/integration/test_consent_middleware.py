"""
End-to-end tests for the consent middleware through the demo app
"""
import os
from unittest.mock import patch

import httpx
import pytest
from fastapi import FastAPI, Request
from fastapi.testclient import TestClient

from privacy_consent.core.middleware import ConsentHeaderMiddleware
from privacy_consent.core.vocabulary import Vocabulary
from privacy_consent.main import create_app
from privacy_consent.services.consent_service import (ask_for_consent, consent_given,
                                                      log_data_collection, preference_sent)

CONSENT = "Privacy-Consent"
ACK = "Privacy-Consent-Ack"


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["vocabulary"]["categories"] == ["coo", "equ", "sfw", "geo"]


def test_no_header_no_asks_is_bare_ack(client):
    response = client.get("/consent")

    assert response.status_code == 200
    assert response.json() == {"preference_communicated": False, "granted": [], "tracking": []}
    assert response.headers[ACK] == "ACK"
    assert CONSENT in response.headers["vary"]


def test_decoded_state_exposed(client):
    response = client.get("/consent", headers={CONSENT: "{coo equ ana per}"})

    body = response.json()
    assert body["preference_communicated"] is True
    assert sorted(map(tuple, body["granted"])) == [
        ("coo", "ana"), ("coo", "per"), ("equ", "ana"), ("equ", "per"),
    ]


def test_nothing_literal_is_a_preference(client):
    body = client.get("/consent", headers={CONSENT: "{NOT}"}).json()

    assert body == {"preference_communicated": True, "granted": [], "tracking": []}


def test_unparsable_header_degrades_to_absent(client):
    response = client.get("/consent", headers={CONSENT: "garbage"})

    assert response.status_code == 200
    assert response.json()["preference_communicated"] is False


@pytest.mark.parametrize("pairs,header,expected", [
    (["coo:ana"], "{coo equ ana per}", True),
    (["geo:ana"], "{coo equ ana per}", False),
    (["tracking:adv1"], "{global-tracking adv1,adv2}", True),
    (["tracking:adv3"], "{global-tracking adv1,adv2}", False),
    (["coo:ana", "tracking:adv1"], "{coo ana}{global-tracking adv1}", True),
])
def test_check_endpoint(client, pairs, header, expected):
    response = client.get("/consent/check", params={"pair": pairs}, headers={CONSENT: header})

    assert response.status_code == 200
    assert response.json() == {"granted": expected}


def test_check_without_preference_is_false(client):
    response = client.get("/consent/check", params={"pair": ["coo:ana"]})

    assert response.json() == {"granted": False}


def test_check_unknown_category_is_400(client):
    response = client.get("/consent/check", params={"pair": ["cookie:ana"]}, headers={CONSENT: "{coo ana}"})

    assert response.status_code == 400
    detail = response.json()["detail"]
    assert detail["kind"] == "invalid_vocabulary_reference"
    assert detail["metadata"]["expected_kind"] == "category"


def test_ask_is_encoded_in_response_header(client):
    response = client.post(
        "/consent/ask",
        json={"reason": "We need analytics", "id": "req1", "pairs": [["coo", "ana"]]},
    )

    assert response.status_code == 200
    assert response.headers[ACK] == "ACK {ASK {{coo ana}} ID{req1} TXT{We need analytics}}"
    assert CONSENT in response.headers["vary"]


def test_tracking_ask(client):
    response = client.post(
        "/consent/ask",
        json={"reason": "Ads", "id": "t", "pairs": [["tracking", "adv1"]]},
    )

    assert response.json() == {"queued": "t", "tracking": ["adv1"]}
    assert response.headers[ACK] == "ACK {ASK {{global-tracking adv1}} ID{t} TXT{Ads}}"


def test_invalid_ask_is_400_and_still_acknowledged(client):
    response = client.post(
        "/consent/ask",
        json={"reason": "x", "id": "bad", "pairs": [["coo", "nope"]]},
    )

    assert response.status_code == 400
    assert response.json()["detail"]["metadata"]["expected_kind"] == "purpose"
    assert response.headers[ACK] == "ACK"


def test_request_id_header(client):
    response = client.get("/health", headers={"X-Request-ID": "abc"})

    assert response.headers["X-Request-ID"] == "abc"


def test_no_ack_without_preference_when_disabled():
    with patch.dict(os.environ, {"PRIVACY_ALWAYS_ACKNOWLEDGE": "false"}):
        with TestClient(create_app()) as test_client:
            silent = test_client.get("/consent")
            acked = test_client.get("/consent", headers={CONSENT: "{NOT}"})
            asked = test_client.post(
                "/consent/ask",
                json={"reason": "Ads", "id": "q", "pairs": [["coo", "ana"]]},
            )

    assert ACK not in silent.headers
    assert CONSENT not in silent.headers.get("vary", "")
    assert acked.headers[ACK] == "ACK"
    assert asked.headers[ACK] == "ACK {ASK {{coo ana}} ID{q} TXT{Ads}}"


def _bare_app(vocabulary=None) -> FastAPI:
    app = FastAPI()
    app.add_middleware(ConsentHeaderMiddleware, vocabulary=vocabulary)

    @app.get("/multi")
    async def multi(request: Request):
        ask_for_consent(request, "first", "a1", ["aa", "xx"], ["bb", "xx"])
        ask_for_consent(request, "second", "a2", ["tracking", "t1"])
        log_data_collection(request, "aa", "xx", "page view")
        return {"sent": preference_sent(request), "granted": consent_given(request, ["aa", "yy"])}

    return app


def test_custom_vocabulary_and_multiple_asks():
    vocabulary = Vocabulary(categories=("aa", "bb"), purposes=("xx", "yy"))

    with TestClient(_bare_app(vocabulary)) as test_client:
        response = test_client.get("/multi", headers={CONSENT: "{aa bb yy}"})

    assert response.json() == {"sent": True, "granted": True}
    assert response.headers[ACK] == (
        "ACK {ASK {{aa bb xx}} ID{a1} TXT{first}{{global-tracking t1}} ID{a2} TXT{second}}"
    )


def test_helpers_without_middleware_state():
    app = FastAPI()

    @app.get("/plain")
    async def plain(request: Request):
        return {"sent": preference_sent(request), "granted": consent_given(request, ["coo", "ana"])}

    with TestClient(app) as test_client:
        assert test_client.get("/plain").json() == {"sent": False, "granted": False}


@pytest.mark.asyncio
async def test_async_client_round_trip():
    transport = httpx.ASGITransport(app=create_app())
    async with httpx.AsyncClient(transport=transport, base_url="http://test") as ac:
        response = await ac.get("/consent", headers={CONSENT: "{global-tracking adv1,adv2}"})

    assert response.json()["tracking"] == ["adv1", "adv2"]
    assert response.headers[ACK] == "ACK"
