"""
Tests for retry, image encoding and lenient reply parsing shared by all providers
"""
import base64
import json

import pytest
import requests

from ticket.errors import ImageReadError, ResponseParseError, TransientProviderError
from ticket.models import ProviderDescriptor
from ticket.vision import provider_support
from ticket.vision.provider_support import (
    ProviderSupport,
    backoff_delay,
    first_json_object,
    is_transient,
)


class FakeResponse:
    def __init__(self, payload=None, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error", response=self)

    def json(self):
        return self.payload


class FakeSession:
    """Plays back responses (or raises errors) in order, one per post."""

    def __init__(self, *outcomes):
        self.outcomes = list(outcomes)
        self.posts = []

    def post(self, url, json=None, headers=None, params=None, timeout=None):
        self.posts.append({'url': url, 'json': json, 'headers': headers, 'params': params, 'timeout': timeout})
        outcome = self.outcomes.pop(0) if len(self.outcomes) > 1 else self.outcomes[0]
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


def make_support(max_retries=3, sleeps=None):
    descriptor = ProviderDescriptor(name="Test Provider", api_key="key", max_retries=max_retries, timeout=5)
    return ProviderSupport(descriptor, descriptor.name, sleep=sleeps.append if sleeps is not None else lambda s: None)


def simple_request(image_b64, mime_type):
    return "https://vision.test/extract", {'image': image_b64, 'mime': mime_type}, {}, None


def reply_text(data):
    return data['text']


@pytest.fixture
def ticket_image(tmp_path):
    path = tmp_path / "ticket.jpg"
    path.write_bytes(b"\xff\xd8\xff fake jpeg")
    return path


def test_backoff_doubles_and_caps():
    assert [backoff_delay(n) for n in (1, 2, 3, 4, 5)] == [2.0, 4.0, 8.0, 10.0, 10.0]


def test_transient_classification():
    assert is_transient(requests.ConnectionError())
    assert is_transient(requests.Timeout())
    assert is_transient(TransientProviderError("busy", status_code=503))
    assert is_transient(requests.HTTPError(response=FakeResponse(status_code=429)))
    assert is_transient(requests.HTTPError(response=FakeResponse(status_code=502)))
    assert not is_transient(requests.HTTPError(response=FakeResponse(status_code=401)))
    assert not is_transient(ValueError("bad"))


def test_retry_bound_on_persistent_transient_failure(ticket_image):
    sleeps = []
    support = make_support(max_retries=3, sleeps=sleeps)
    session = FakeSession(requests.ConnectionError("offline"))

    result = support.extract(str(ticket_image), session, simple_request, reply_text, "Extraction failed")

    assert result.success is False
    assert len(session.posts) == 3
    assert result.attempts == 3
    assert sleeps == [2.0, 4.0]
    assert "Extraction failed" in result.error


def test_non_transient_failure_is_not_retried(ticket_image):
    sleeps = []
    support = make_support(sleeps=sleeps)
    session = FakeSession(FakeResponse(status_code=401))

    result = support.extract(str(ticket_image), session, simple_request, reply_text, "Extraction failed")

    assert result.success is False
    assert len(session.posts) == 1
    assert sleeps == []


def test_recovers_after_transient_failure(ticket_image):
    sleeps = []
    support = make_support(sleeps=sleeps)
    reply = {'text': json.dumps({'movieTitle': 'Wonka', 'price': '$14.99'})}
    session = FakeSession(FakeResponse(status_code=503), FakeResponse(reply))

    result = support.extract(str(ticket_image), session, simple_request, reply_text, "Extraction failed")

    assert result.success is True
    assert result.attempts == 2
    assert result.fields.movie_title == 'Wonka'
    assert sleeps == [2.0]


def test_request_carries_base64_image_and_timeout(ticket_image):
    support = make_support()
    session = FakeSession(FakeResponse({'text': '{"movieTitle": "Wonka"}'}))

    support.extract(str(ticket_image), session, simple_request, reply_text, "Extraction failed")

    post = session.posts[0]
    assert base64.b64decode(post['json']['image']) == b"\xff\xd8\xff fake jpeg"
    assert post['json']['mime'] == "image/jpeg"
    assert post['timeout'] == 5


def test_missing_reply_content_is_a_failure(ticket_image):
    support = make_support()
    session = FakeSession(FakeResponse({'unexpected': True}))

    result = support.extract(str(ticket_image), session, simple_request, reply_text, "Extraction failed")

    assert result.success is False
    assert result.raw_response == {'unexpected': True}
    assert "No content found" in result.error


def test_malformed_reply_is_not_retried(ticket_image):
    sleeps = []
    support = make_support(max_retries=3, sleeps=sleeps)
    session = FakeSession(FakeResponse({'text': "not json at all"}),
                          FakeResponse({'text': '{"movieTitle": "Wonka"}'}))

    result = support.extract(str(ticket_image), session, simple_request, reply_text, "Extraction failed")

    assert result.success is False
    assert len(session.posts) == 1
    assert result.attempts == 1
    assert sleeps == []
    assert result.raw_response == {'text': "not json at all"}


def test_unreadable_image_fails_without_network(tmp_path):
    support = make_support()
    session = FakeSession(FakeResponse({}))

    result = support.extract(str(tmp_path / "missing.jpg"), session, simple_request, reply_text, "x")

    assert result.success is False
    assert session.posts == []


def test_oversized_image_is_rejected(ticket_image, monkeypatch):
    monkeypatch.setattr(provider_support, "MAX_IMAGE_BYTES", 4)
    with pytest.raises(ImageReadError):
        make_support().encode_image(str(ticket_image))


def test_parse_reply_plain_json():
    fields = make_support().parse_reply('{"movieTitle": "Wonka", "seatNumber": "L6"}')
    assert fields.movie_title == 'Wonka'
    assert fields.seat_number == 'L6'


def test_parse_reply_prose_wrapped_json():
    text = 'Here is the data:\n```json\n{"movieTitle": "Wonka", "note": "{braces} in text"}\n```\nHope it helps!'
    fields = make_support().parse_reply(text)
    assert fields.movie_title == 'Wonka'


def test_parse_reply_repairs_broken_json():
    text = "Result: {'movieTitle': 'Wonka', 'price': '$14.99',}"
    fields = make_support().parse_reply(text)
    assert fields.movie_title == 'Wonka'
    assert fields.price == '$14.99'


def test_parse_reply_shape_is_total():
    fields = make_support().parse_reply('{"movieTitle": "Wonka", "director": "Paul King"}')
    data = fields.to_dict()
    assert len(data) == 11
    assert data['showTime'] is None
    assert 'director' not in data


@pytest.mark.parametrize("text", [None, "", "   ", "I could not read this ticket.", "[1, 2, 3]"])
def test_parse_reply_rejects_non_objects(text):
    with pytest.raises(ResponseParseError):
        make_support().parse_reply(text)


def test_first_json_object_respects_strings():
    text = 'prefix {"a": "}", "b": {"c": 1}} suffix'
    assert first_json_object(text) == '{"a": "}", "b": {"c": 1}}'
    assert first_json_object("no braces") is None


def test_probe_reports_connectivity():
    support = make_support()
    assert support.probe(lambda: FakeResponse(status_code=200)) is True
    assert support.probe(lambda: FakeResponse(status_code=401)) is False

    def offline():
        raise requests.ConnectionError("offline")

    assert support.probe(offline) is False
