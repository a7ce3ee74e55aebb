"""Tests for the HTTP API."""

import json
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from conftest import FakeGateway
from brandbible.api.chat import MessageRequest, stream_message
from brandbible.core import ChatSessionController
from brandbible.core.prompts import CHAT_APOLOGY, CHAT_GREETING
from brandbible.main import create_app
from brandbible.models.schemas import CRITICAL_FAILURE_MESSAGE
from brandbible.utils.config import PipelineConfig
from brandbible.utils.sessions import SessionStore


def make_client(gateway=None, **pipeline):
    app = create_app(gateway=gateway or FakeGateway(), pipeline=PipelineConfig(**pipeline))
    return TestClient(app)


@pytest.fixture
def client():
    return make_client(include_social_posts=False)


def parse_events(body):
    events = []
    for block in body.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in block.splitlines())
        events.append((lines["event"], json.loads(lines["data"])))
    return events


def test_health(client):
    response = client.get("/health/")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"
    assert response.json()["service"] == "brand-bible"


def test_generate_returns_run(client, sample_mission):
    response = client.post("/generate", json={"mission": sample_mission})

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "completed"
    assert data["brand_bible"]["brandName"] == "Threadleaf"
    assert len(data["mood_board"]) == 4
    assert data["error_report"] == ""


def test_generate_rejects_blank_mission():
    gateway = FakeGateway()
    client = make_client(gateway)

    response = client.post("/generate", json={"mission": "   "})

    assert response.status_code == 422
    assert gateway.calls == []


def test_generate_reports_critical_failure():
    client = make_client(FakeGateway(fail_bible=True))

    data = client.post("/generate", json={"mission": "Sell socks"}).json()

    assert data["status"] == "failed"
    assert data["error_report"] == CRITICAL_FAILURE_MESSAGE


def test_shared_link_replays_mission(client):
    link = client.post("/generate/share-link", json={"mission": "Socks & more"}).json()["url"]
    assert link.endswith("/generate/shared?mission=Socks%20%26%20more")

    response = client.get(link)

    assert response.status_code == 200
    assert response.json()["mission"] == "Socks & more"


def test_shared_link_without_mission():
    gateway = FakeGateway()
    client = make_client(gateway)

    assert client.get("/generate/shared").status_code == 422
    assert gateway.calls == []


def test_palette_download(client, sample_bible):
    palette = [c.model_dump() for c in sample_bible.palette]

    response = client.post("/export/palette", json=palette)

    assert response.status_code == 200
    assert response.headers["content-disposition"] == 'attachment; filename="color-palette.json"'
    assert response.json() == palette


def test_social_posts_download(client):
    response = client.post("/export/social-posts", json={"posts": ["One", "Two"]})

    assert "social-media-posts.txt" in response.headers["content-disposition"]
    assert response.text == "Post Idea 1:\nOne\n\n---\n\nPost Idea 2:\nTwo"


def test_image_downloads_for_run(client, sample_mission):
    run = client.post("/generate", json={"mission": sample_mission}).json()

    downloads = client.post("/export/images", json=run).json()

    filenames = [d["filename"] for d in downloads]
    assert filenames[0] == "primary-logo.png"
    assert "moodboard-image-4.png" in filenames
    assert all(d["href"].startswith("data:image/jpeg;base64,") for d in downloads)


def test_chat_turn(sample_mission):
    client = make_client(chat_mode="turn_based")

    session = client.post("/chat/sessions").json()
    assert [m["content"] for m in session["transcript"]] == [CHAT_GREETING]

    response = client.post(
        f"/chat/sessions/{session['session_id']}/messages", json={"message": "Hi"}
    )

    assert response.status_code == 200
    assert [m["content"] for m in response.json()["transcript"]] == [CHAT_GREETING, "Hi", "Hello!"]


def test_chat_stream(client):
    session_id = client.post("/chat/sessions").json()["session_id"]

    response = client.post(f"/chat/sessions/{session_id}/stream", json={"message": "Hi"})

    assert response.headers["content-type"].startswith("text/event-stream")
    events = parse_events(response.text)
    assert events == [
        ("chunk", {"text": "Hel"}),
        ("chunk", {"text": "lo!"}),
        ("done", {"message": {"role": "model", "content": "Hello!"}}),
    ]
    transcript = client.get(f"/chat/sessions/{session_id}").json()["transcript"]
    assert transcript[-1]["content"] == "Hello!"


def test_chat_stream_failure_ends_with_apology(chat_failure):
    client = make_client(FakeGateway(chat_error=chat_failure))
    session_id = client.post("/chat/sessions").json()["session_id"]

    events = parse_events(
        client.post(f"/chat/sessions/{session_id}/stream", json={"message": "Hi"}).text
    )

    assert events[-1] == ("done", {"message": {"role": "model", "content": CHAT_APOLOGY}})


def test_chat_blank_message_and_unknown_session(client):
    session_id = client.post("/chat/sessions").json()["session_id"]

    assert client.post(f"/chat/sessions/{session_id}/messages", json={"message": " "}).status_code == 422
    assert client.post("/chat/sessions/missing/messages", json={"message": "Hi"}).status_code == 404


def test_chat_session_can_be_closed(client):
    session_id = client.post("/chat/sessions").json()["session_id"]

    assert client.delete(f"/chat/sessions/{session_id}").status_code == 204
    assert client.get(f"/chat/sessions/{session_id}").status_code == 404


def open_controller(app, gateway):
    controller = ChatSessionController(gateway)
    controller.open()
    return controller, app.state.chat_sessions.add(controller)


@pytest.mark.asyncio
async def test_unread_stream_leaves_session_usable():
    gateway = FakeGateway()
    app = create_app(gateway=gateway)
    controller, session_id = open_controller(app, gateway)

    # the response is built but its body is never read (client went away)
    await stream_message(session_id, MessageRequest(message="Hi"), SimpleNamespace(app=app))

    assert controller.in_flight is False
    assert [m.content for m in controller.transcript] == [CHAT_GREETING]
    assert gateway.calls == []
    assert await controller.submit_turn("Hi again")


@pytest.mark.asyncio
async def test_stream_closed_mid_reply_settles_turn():
    gateway = FakeGateway()
    app = create_app(gateway=gateway)
    controller, session_id = open_controller(app, gateway)

    response = await stream_message(
        session_id, MessageRequest(message="Hi"), SimpleNamespace(app=app)
    )
    body = response.body_iterator
    first = await body.__anext__()
    await body.aclose()

    assert first.startswith("event: chunk")
    assert controller.in_flight is False
    assert [m.content for m in controller.transcript] == [CHAT_GREETING, "Hi", CHAT_APOLOGY]


def test_chat_stream_while_in_flight_is_conflict():
    gateway = FakeGateway()
    app = create_app(gateway=gateway)
    controller, session_id = open_controller(app, gateway)
    assert controller.begin_turn("First")

    response = TestClient(app).post(f"/chat/sessions/{session_id}/stream", json={"message": "Hi"})

    assert response.status_code == 409


def test_oldest_chat_session_is_evicted():
    app = create_app(gateway=FakeGateway(), sessions=SessionStore(max_sessions=2))
    client = TestClient(app)

    first, second, third = (client.post("/chat/sessions").json()["session_id"] for _ in range(3))

    assert client.get(f"/chat/sessions/{first}").status_code == 404
    assert client.get(f"/chat/sessions/{second}").status_code == 200
    assert client.get(f"/chat/sessions/{third}").status_code == 200
