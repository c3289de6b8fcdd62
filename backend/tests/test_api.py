"""End-to-end tests for the FastAPI application."""

from unittest.mock import Mock

import pytest
from fastapi.testclient import TestClient

from officejam.database import Base, engine, init_db
from officejam.errors import MetadataError, NotFoundError
from officejam.main import app
from officejam.schemas import PlaylistVideo, VideoMetadata
from officejam.services.metadata_resolver import MetadataResolver

RICK = "dQw4w9WgXcQ"
PSY = "9bZkp7q19f0"


def add(ws, entry_id, video_id=RICK, title=None):
    data = {"id": entry_id, "url": f"https://www.youtube.com/watch?v={video_id}"}
    if title:
        data["title"] = title
    ws.send_json({"type": "add_video", "data": data})


@pytest.fixture(autouse=True)
def clean_database():
    init_db()
    with engine.begin() as conn:
        for table in reversed(Base.metadata.sorted_tables):
            conn.execute(table.delete())
    yield


@pytest.fixture
def client():
    with TestClient(app) as client:
        yield client


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_root_points_at_websocket(client):
    assert client.get("/").json()["websocket"] == "/ws"


def test_join_receives_empty_queue(client):
    with client.websocket_connect("/ws") as ws:
        assert ws.receive_json() == {"type": "queue_update", "data": []}


def test_add_video_reaches_every_client(client):
    with client.websocket_connect("/ws") as alice, client.websocket_connect("/ws") as bob:
        alice.receive_json()
        bob.receive_json()

        add(alice, 1, title="Never Gonna Give You Up")

        expected = {
            "type": "queue_update",
            "data": [{
                "id": 1,
                "url": f"https://www.youtube.com/watch?v={RICK}",
                "videoId": RICK,
                "title": "Never Gonna Give You Up",
                "duration": "Unknown",
            }],
        }
        assert alice.receive_json() == expected
        assert bob.receive_json() == expected


def test_invalid_url_only_errors_the_sender(client):
    with client.websocket_connect("/ws") as alice, client.websocket_connect("/ws") as bob:
        alice.receive_json()
        bob.receive_json()

        alice.send_json({"type": "add_video", "data": {"id": 1, "url": "https://example.com/clip"}})
        error = alice.receive_json()
        assert error["type"] == "error"
        assert "Invalid YouTube URL" in error["data"]["message"]

        # Bob's next message is the one caused by his own add, not Alice's error
        add(bob, 2)
        assert [entry["id"] for entry in bob.receive_json()["data"]] == [2]

    assert [entry["id"] for entry in client.get("/api/queue").json()["queue"]] == [2]


def test_malformed_frame_is_reported(client):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        ws.send_text("{not json")
        assert ws.receive_json()["type"] == "error"


def test_play_and_finish_scenario(client):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        add(ws, 1, title="A")
        ws.receive_json()
        add(ws, 2, video_id=PSY, title="B")
        ws.receive_json()

        ws.send_json({"type": "play_next"})
        assert [entry["id"] for entry in ws.receive_json()["data"]] == [2]
        playing = ws.receive_json()
        assert playing["type"] == "play_video"
        assert playing["data"]["id"] == 1

        ws.send_json({"type": "video_finished"})
        assert ws.receive_json() == {"type": "queue_update", "data": []}
        assert ws.receive_json()["data"]["id"] == 2

        ws.send_json({"type": "video_finished"})
        assert ws.receive_json() == {"type": "stop_video", "data": None}

    client.app.state.writer.flush()
    history = client.get("/api/history").json()
    assert [record["id"] for record in history] == [2, 1]
    assert {record["videoId"] for record in history} == {RICK, PSY}
    assert all("playedAt" in record for record in history)


def test_late_joiner_gets_queue_and_current_item(client):
    with client.websocket_connect("/ws") as first:
        first.receive_json()
        for entry_id in range(1, 6):
            add(first, entry_id)
            first.receive_json()
        first.send_json({"type": "delete_video", "data": 2})
        first.receive_json()
        first.send_json({"type": "delete_multiple_videos", "data": [4, 99]})
        first.receive_json()
        first.send_json({"type": "play_next"})
        first.receive_json()
        first.receive_json()

        with client.websocket_connect("/ws") as late:
            snapshot = client.get("/api/queue").json()
            queue_update = late.receive_json()
            video_playing = late.receive_json()

    assert queue_update == {"type": "queue_update", "data": snapshot["queue"]}
    assert [entry["id"] for entry in snapshot["queue"]] == [3, 5]
    assert video_playing == {"type": "video_playing", "data": snapshot["current"]}
    assert snapshot["state"] == "playing"


def test_queue_survives_restart():
    with TestClient(app) as first_run:
        with first_run.websocket_connect("/ws") as ws:
            ws.receive_json()
            for entry_id, video_id in ((10, RICK), (20, PSY), (30, "kJQP7kiw5Fk")):
                add(ws, entry_id, video_id=video_id)
                ws.receive_json()
        before = first_run.get("/api/queue").json()["queue"]

    with TestClient(app) as second_run:
        after = second_run.get("/api/queue").json()
        with second_run.websocket_connect("/ws") as ws:
            replay = ws.receive_json()

    assert [entry["id"] for entry in after["queue"]] == [10, 20, 30]
    assert after["queue"] == before
    assert after["current"] is None
    assert replay["data"] == before


def test_delete_history_record(client):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        add(ws, 7)
        ws.receive_json()
        ws.send_json({"type": "play_next"})
        ws.receive_json()
        ws.receive_json()
        ws.send_json({"type": "video_finished"})
        ws.receive_json()
    client.app.state.writer.flush()

    assert client.delete("/api/history/7").status_code == 200
    assert client.get("/api/history").json() == []
    assert client.delete("/api/history/7").status_code == 404


def test_id_from_history_cannot_be_queued_again(client):
    with client.websocket_connect("/ws") as ws:
        ws.receive_json()
        add(ws, 7, title="First")
        ws.receive_json()
        ws.send_json({"type": "play_next"})
        ws.receive_json()
        ws.receive_json()
        ws.send_json({"type": "video_finished"})
        ws.receive_json()

        add(ws, 7, title="Second")
        error = ws.receive_json()
        assert error["type"] == "error"
        assert "already played" in error["data"]["message"]
    client.app.state.writer.flush()

    history = client.get("/api/history").json()
    assert [(record["id"], record["title"]) for record in history] == [(7, "First")]


def test_queue_order_survives_restart_with_unordered_ids():
    ids = [1700000000900, 1700000000150, 1700000000400]
    with TestClient(app) as first_run:
        with first_run.websocket_connect("/ws") as ws:
            ws.receive_json()
            for entry_id in ids:
                add(ws, entry_id)
                ws.receive_json()

    with TestClient(app) as second_run:
        after = second_run.get("/api/queue").json()

    assert [entry["id"] for entry in after["queue"]] == ids


def test_video_metadata_endpoint(client):
    resolver = Mock(spec=MetadataResolver)
    resolver.resolve_video.return_value = VideoMetadata(title="Never Gonna Give You Up", duration="3:33")
    client.app.state.resolver = resolver

    response = client.get(f"/api/video/{RICK}")

    assert response.status_code == 200
    assert response.json() == {"title": "Never Gonna Give You Up", "duration": "3:33"}
    resolver.resolve_video.assert_called_once_with(RICK)


def test_video_metadata_errors_map_to_status_codes(client):
    resolver = Mock(spec=MetadataResolver)
    client.app.state.resolver = resolver

    resolver.resolve_video.side_effect = NotFoundError("Video not found")
    assert client.get(f"/api/video/{RICK}").status_code == 404

    resolver.resolve_video.side_effect = MetadataError("upstream down")
    assert client.get(f"/api/video/{RICK}").status_code == 502


def test_playlist_endpoint(client):
    resolver = Mock(spec=MetadataResolver)
    resolver.api_key = "k"
    resolver.resolve_playlist.return_value = [
        PlaylistVideo(videoId=RICK, url=f"https://www.youtube.com/watch?v={RICK}", title="One"),
    ]
    client.app.state.resolver = resolver

    response = client.get("/api/playlist/PLrAXtmErZgOe")

    assert response.status_code == 200
    body = response.json()
    assert body["playlistId"] == "PLrAXtmErZgOe"
    assert body["videos"][0]["videoId"] == RICK


def test_playlist_endpoint_without_api_key(client):
    resolver = Mock(spec=MetadataResolver)
    resolver.api_key = ""
    client.app.state.resolver = resolver

    assert client.get("/api/playlist/PLrAXtmErZgOe").status_code == 503
