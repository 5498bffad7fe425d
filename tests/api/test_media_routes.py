"""File analysis, image generation and video generation against mocked upstreams."""
import json

import httpx
import pytest

from conftest import CONVERSATION_ID, make_message
from tvog.config.settings import settings
from tvog.modules.analysis.routes import get_analysis_service
from tvog.modules.analysis.service import AnalysisService
from tvog.modules.chat.gateway import AIGatewayClient, get_gateway_client
from tvog.modules.video.replicate_client import ReplicateClient, get_replicate_client

FILE_HOST = "files.test"
GATEWAY_HOST = "gateway.test"
REPLICATE_HOST = "replicate.test"


class Upstream:
    """Routes requests by host and records them"""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, httpx.Response | type[httpx.TransportError]] = {}

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.responses[request.url.host]
        if isinstance(response, type) and issubclass(response, httpx.TransportError):
            raise response("upstream unreachable", request=request)
        return response

    def sent_to(self, host: str) -> list[dict]:
        return [json.loads(r.content) for r in self.requests if r.url.host == host and r.content]


def completion(content=None, images=None) -> httpx.Response:
    message = {"role": "assistant", "content": content}
    if images is not None:
        message["images"] = [{"type": "image_url", "image_url": {"url": url}} for url in images]
    return httpx.Response(200, json={"choices": [{"message": message}]})


@pytest.fixture
def upstream(app, monkeypatch) -> Upstream:
    monkeypatch.setattr(settings, "supabase_url", f"https://{FILE_HOST}")
    upstream = Upstream()
    transport = httpx.MockTransport(upstream.handler)
    gateway = AIGatewayClient(api_key="key", base_url=f"https://{GATEWAY_HOST}/v1", transport=transport)
    app.dependency_overrides[get_gateway_client] = lambda: gateway
    app.dependency_overrides[get_analysis_service] = lambda: AnalysisService(gateway, transport)
    app.dependency_overrides[get_replicate_client] = lambda: ReplicateClient(
        api_key="r8-key", base_url=f"https://{REPLICATE_HOST}/v1", transport=transport
    )
    return upstream


class TestAnalysis:
    def test_image_is_sent_as_image_url_part(self, client, upstream) -> None:
        upstream.responses[GATEWAY_HOST] = completion("A cat on a sofa.")

        response = client.post(
            "/api/v1/analysis/file",
            json={"file_url": "https://files.test/cat.png", "file_type": "image/png", "file_name": "cat.png"},
        )

        assert response.status_code == 200
        assert response.json() == {"analysis": "A cat on a sofa."}
        sent = upstream.sent_to(GATEWAY_HOST)[0]
        parts = sent["messages"][1]["content"]
        assert parts[1] == {"type": "image_url", "image_url": {"url": "https://files.test/cat.png"}}
        assert "cat.png" in parts[0]["text"]

    def test_document_content_is_inlined(self, client, upstream) -> None:
        upstream.responses[FILE_HOST] = httpx.Response(200, text="print('hi')")
        upstream.responses[GATEWAY_HOST] = completion("Prints hi.")

        response = client.post(
            "/api/v1/analysis/file",
            json={"file_url": "https://files.test/a.py", "file_type": "text/x-python", "file_name": "a.py", "prompt": "Explain"},
        )

        assert response.status_code == 200
        user_content = upstream.sent_to(GATEWAY_HOST)[0]["messages"][1]["content"]
        assert "```\nprint('hi')\n```" in user_content
        assert user_content.endswith("Explain")

    def test_unreachable_document_is_500(self, client, upstream) -> None:
        upstream.responses[FILE_HOST] = httpx.Response(404)

        response = client.post("/api/v1/analysis/file", json={"file_url": "https://files.test/gone.txt"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Could not fetch file content"

    def test_document_outside_storage_is_not_fetched(self, client, upstream) -> None:
        response = client.post(
            "/api/v1/analysis/file",
            json={"file_url": "http://169.254.169.254/latest/meta-data/", "file_name": "meta"},
        )

        assert response.status_code == 400
        assert upstream.requests == []

    def test_oversized_document_is_413(self, client, upstream, monkeypatch) -> None:
        monkeypatch.setattr(settings, "max_file_size", 10)
        upstream.responses[FILE_HOST] = httpx.Response(200, content=b"x" * 11)

        response = client.post("/api/v1/analysis/file", json={"file_url": "https://files.test/big.txt"})

        assert response.status_code == 413
        assert upstream.sent_to(GATEWAY_HOST) == []

    def test_gateway_timeout_is_502(self, client, upstream) -> None:
        upstream.responses[GATEWAY_HOST] = httpx.ReadTimeout

        response = client.post(
            "/api/v1/analysis/file",
            json={"file_url": "https://files.test/x.png", "file_type": "image/png"},
        )

        assert response.status_code == 502
        assert response.json()["detail"] == "AI gateway error"

    def test_empty_answer_falls_back(self, client, upstream) -> None:
        upstream.responses[GATEWAY_HOST] = completion(None)

        response = client.post(
            "/api/v1/analysis/file",
            json={"file_url": "https://files.test/x.png", "file_type": "image/png"},
        )

        assert response.json() == {"analysis": "Unable to analyze the file."}

    def test_gateway_rate_limit_is_429(self, client, upstream) -> None:
        upstream.responses[GATEWAY_HOST] = httpx.Response(429)

        response = client.post(
            "/api/v1/analysis/file",
            json={"file_url": "https://files.test/x.png", "file_type": "image/png"},
        )

        assert response.status_code == 429

    def test_message_analysis_is_posted_to_conversation(self, client, fake_db, upstream) -> None:
        fake_db.queue(
            "messages",
            make_message(file_url=f"{CONVERSATION_ID}/cat.png", file_name="cat.png", file_type="image/png"),
            [make_message(id="m-2", role="assistant", content="**File Analysis: cat.png**\n\nA cat.")],
        )
        fake_db.bucket.create_signed_url.return_value = {"signedURL": "https://files.test/signed-cat"}
        upstream.responses[GATEWAY_HOST] = completion("A cat.")

        response = client.post("/api/v1/analysis/messages/m-1")

        assert response.status_code == 200
        assert response.json()["analysis"] == "A cat."
        saved = fake_db.queries_for("messages", "insert")[0].payload()
        assert saved == {
            "conversation_id": CONVERSATION_ID,
            "role": "assistant",
            "content": "**File Analysis: cat.png**\n\nA cat.",
        }
        parts = upstream.sent_to(GATEWAY_HOST)[0]["messages"][1]["content"]
        assert parts[1]["image_url"]["url"] == "https://files.test/signed-cat"

    def test_message_without_attachment_is_400(self, client, fake_db, upstream) -> None:
        fake_db.queue("messages", make_message())

        response = client.post("/api/v1/analysis/messages/m-1")

        assert response.status_code == 400
        assert upstream.requests == []


class TestImages:
    def test_generate_returns_first_image(self, client, upstream) -> None:
        upstream.responses[GATEWAY_HOST] = completion("Here you go", images=["data:image/png;base64,AAA"])

        response = client.post("/api/v1/images/generate", json={"prompt": "a red fox"})

        assert response.status_code == 200
        body = response.json()
        assert body["image_url"] == "data:image/png;base64,AAA"
        assert body["text"] == "Here you go"
        assert body["message"] is None
        assert upstream.sent_to(GATEWAY_HOST)[0]["modalities"] == ["image", "text"]

    def test_generate_into_conversation_saves_markdown(self, client, fake_db, upstream) -> None:
        upstream.responses[GATEWAY_HOST] = completion(None, images=["https://img.test/fox.png"])
        fake_db.queue("messages", [make_message(id="m-3", role="assistant", content="![a fox](https://img.test/fox.png)")])

        response = client.post(
            "/api/v1/images/generate",
            json={"prompt": "a [fox]", "conversation_id": CONVERSATION_ID},
        )

        assert response.status_code == 200
        assert fake_db.queries_for("messages", "insert")[0].payload()["content"] == "![a fox](https://img.test/fox.png)"
        assert response.json()["message"]["segments"][0] == {
            "type": "image", "content": None, "language": None, "url": "https://img.test/fox.png", "alt": "a fox",
        }

    def test_no_image_is_500(self, client, upstream) -> None:
        upstream.responses[GATEWAY_HOST] = completion("Sorry, I can't draw that.")

        response = client.post("/api/v1/images/generate", json={"prompt": "something"})

        assert response.status_code == 500
        assert response.json()["detail"] == "No image was generated"

    def test_blank_prompt_is_400(self, client, upstream) -> None:
        response = client.post("/api/v1/images/generate", json={"prompt": "   "})

        assert response.status_code == 400
        assert upstream.requests == []


class TestVideos:
    def test_start_creates_prediction(self, client, upstream) -> None:
        upstream.responses[REPLICATE_HOST] = httpx.Response(201, json={"id": "p-1", "status": "starting"})

        response = client.post("/api/v1/videos", json={"prompt": "waves at sunset"})

        assert response.status_code == 200
        assert response.json() == {"prediction_id": "p-1", "status": "starting"}
        request = upstream.requests[0]
        assert request.url.path == "/v1/models/minimax/video-01/predictions"
        assert request.headers["Authorization"] == "Bearer r8-key"
        assert json.loads(request.content) == {"input": {"prompt": "waves at sunset", "prompt_optimizer": True}}

    def test_missing_prompt_is_400(self, client, upstream) -> None:
        response = client.post("/api/v1/videos", json={})

        assert response.status_code == 400
        assert response.json()["detail"] == "Missing required field: prompt is required"

    def test_long_prompt_is_400(self, client, upstream) -> None:
        response = client.post("/api/v1/videos", json={"prompt": "x" * 501})

        assert response.status_code == 400
        assert response.json()["detail"] == "Prompt too long. Maximum 500 characters allowed."
        assert upstream.requests == []

    def test_status_passes_prediction_through(self, client, upstream) -> None:
        prediction = {"id": "p-1", "status": "succeeded", "output": "https://replicate.test/video.mp4"}
        upstream.responses[REPLICATE_HOST] = httpx.Response(200, json=prediction)

        response = client.get("/api/v1/videos/p-1")

        assert response.status_code == 200
        assert response.json() == prediction
        assert upstream.requests[0].url.path == "/v1/predictions/p-1"

    def test_replicate_error_is_forwarded(self, client, upstream) -> None:
        upstream.responses[REPLICATE_HOST] = httpx.Response(422, json={"detail": "Invalid input"})

        response = client.post("/api/v1/videos", json={"prompt": "waves"})

        assert response.status_code == 422
        assert response.json()["detail"] == "Invalid input"

    def test_unreachable_replicate_is_502(self, client, upstream) -> None:
        upstream.responses[REPLICATE_HOST] = httpx.ConnectError

        response = client.post("/api/v1/videos", json={"prompt": "waves"})

        assert response.status_code == 502
        assert response.json()["detail"] == "Replicate request failed"

    def test_non_json_success_is_502(self, client, upstream) -> None:
        upstream.responses[REPLICATE_HOST] = httpx.Response(200, text="<html>maintenance</html>")

        response = client.get("/api/v1/videos/p-1")

        assert response.status_code == 502

    def test_non_dict_error_body_keeps_status(self, client, upstream) -> None:
        upstream.responses[REPLICATE_HOST] = httpx.Response(503, json=["overloaded"])

        response = client.post("/api/v1/videos", json={"prompt": "waves"})

        assert response.status_code == 503

    def test_without_api_key_is_500(self, app, client) -> None:
        app.dependency_overrides[get_replicate_client] = lambda: ReplicateClient(api_key="")

        response = client.post("/api/v1/videos", json={"prompt": "waves"})

        assert response.status_code == 500
        assert response.json()["detail"] == "Video generation is not configured. Please add your Replicate API key."
