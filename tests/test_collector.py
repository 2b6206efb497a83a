import base64
import json
import urllib.error
import urllib.parse
import uuid
from unittest import mock

import pytest

from reviewpad.collector import Collector, CollectorError


class RecordingClient:
    def __init__(self):
        self.tracked = []
        self.updates = []

    def track(self, distinct_id, event, properties):
        self.tracked.append((distinct_id, event, dict(properties)))

    def update_user(self, distinct_id, operation, properties):
        self.updates.append((distinct_id, operation, properties))


def test_without_token_nothing_is_sent():
    client = RecordingClient()
    collector = Collector("", "", client=client)
    properties = {"pullRequestUrl": "https://foo.bar"}
    collector.collect("Error", properties)
    assert client.tracked == []
    assert client.updates == []
    assert properties == {"pullRequestUrl": "https://foo.bar"}


def test_without_token_no_endpoint_needed():
    collector = Collector("", "")
    collector.collect("Error", {})
    assert collector.order == 0


def test_token_without_client_or_endpoint_is_rejected():
    with pytest.raises(ValueError):
        Collector("token", "someone")


def test_token_sets_user_name():
    client = RecordingClient()
    Collector("token", "someone", client=client)
    assert client.updates == [("someone", "$set", {"name": "someone"})]


def test_collect_tags_runner_and_order():
    client = RecordingClient()
    collector = Collector("token", "someone", client=client)
    collector.collect("Trigger Analysis", {"project": "a"})
    collector.collect("Ran Builtin", {"builtin": "addLabel"})

    assert [event for _, event, _ in client.tracked] == ["Trigger Analysis", "Ran Builtin"]
    assert [props["order"] for _, _, props in client.tracked] == [0, 1]
    assert all(props["runnerId"] == collector.runner_id for _, _, props in client.tracked)
    assert all(distinct_id == "someone" for distinct_id, _, _ in client.tracked)
    assert collector.order == 2


def test_runner_ids_are_unique_uuids():
    first = Collector("", "")
    second = Collector("", "")
    assert str(uuid.UUID(first.runner_id)) == first.runner_id
    assert first.runner_id != second.runner_id


def _response(body):
    response = mock.MagicMock()
    response.__enter__.return_value.read.return_value = body
    return response


def _decode(request):
    fields = urllib.parse.parse_qs(request.data.decode("ascii"))
    return json.loads(base64.b64decode(fields["data"][0]))


def test_http_client_posts_encoded_events():
    with mock.patch("urllib.request.urlopen", return_value=_response(b"1")) as urlopen:
        collector = Collector("token", "someone", endpoint="http://localhost:8080")
        collector.collect("Error", {"details": "boom"})

    assert collector.order == 1
    engage_request = urlopen.call_args_list[0].args[0]
    track_request = urlopen.call_args_list[1].args[0]
    assert engage_request.full_url == "http://localhost:8080/engage"
    assert _decode(engage_request)["$set"] == {"name": "someone"}
    assert track_request.full_url == "http://localhost:8080/track"
    payload = _decode(track_request)
    assert payload["event"] == "Error"
    assert payload["properties"]["details"] == "boom"
    assert payload["properties"]["distinct_id"] == "someone"
    assert payload["properties"]["order"] == 0
    assert payload["properties"]["runnerId"] == collector.runner_id


def test_http_client_rejected_event_raises():
    with mock.patch("urllib.request.urlopen", return_value=_response(b"0")):
        collector = Collector("token", "someone", endpoint="http://localhost:8080")
        with pytest.raises(CollectorError):
            collector.collect("Error", {})


def test_http_client_network_failure_raises():
    with mock.patch(
        "urllib.request.urlopen", side_effect=urllib.error.URLError("down")
    ):
        collector = Collector("token", "someone", endpoint="http://localhost:8080")
        with pytest.raises(CollectorError):
            collector.collect("Error", {})