"""Integration tests for POST /api/writing/chat."""

import pytest

from academic_writer.llm.errors import TimeoutError
from academic_writer.services.chat_service import FALLBACK_MESSAGE

pytestmark = pytest.mark.integration


class TestChatEndpoint:
    def test_step_one_question(self, client, fake_provider):
        fake_provider.queue("Pick a topic you can cover in depth.")

        response = client.post(
            "/api/writing/chat",
            json={
                "message": "How do I choose a topic?",
                "context": {"currentStep": 1},
                "chatHistory": [],
            },
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == "Pick a topic you can cover in depth."
        assert data["suggestions"] == [
            "Help me choose a research topic",
            "What makes a good academic title?",
            "How specific should my topic be?",
        ]

    def test_provider_failure_still_200(self, client, fake_provider):
        fake_provider.queue(TimeoutError("timed out", provider="gemini"))

        response = client.post(
            "/api/writing/chat",
            json={"message": "Citation help?", "context": {"currentStep": 2}},
        )

        assert response.status_code == 200
        data = response.json()
        assert data["message"] == FALLBACK_MESSAGE
        assert data["suggestions"][0] == "What citation style should I use?"

    def test_history_window_sent_to_model(self, client, fake_provider):
        fake_provider.queue("Sure.")
        history = [{"role": "user", "content": f"question {i}"} for i in range(7)]

        client.post("/api/writing/chat", json={"message": "And now?", "chatHistory": history})

        prompt = fake_provider.requests[0].messages[0].content
        assert "question 1" not in prompt
        assert "question 2" in prompt
        assert "question 6" in prompt

    def test_empty_message_rejected(self, client):
        response = client.post("/api/writing/chat", json={"message": ""})

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"
