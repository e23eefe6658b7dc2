"""
Unit tests for ai_book.core.ai_services with fake Groq/OpenAI clients.
"""

import pytest

from ai_book.core.ai_services import AIService, Attachment
from ai_book.core.config import config
from ai_book.core.exceptions import GenerationFailure


class TestAttachment:

    def test_kinds(self):
        assert Attachment(b"x", "image/png").is_image
        assert Attachment(b"x", "text/plain").is_text
        assert not Attachment(b"x", "application/pdf").is_supported

    def test_to_data_url(self):
        assert Attachment(b"hi", "text/plain").to_data_url() == "data:text/plain;base64,aGk="


class TestDummyMode:

    def test_dummy_mode_without_clients(self, dummy_ai):
        assert dummy_ai.use_dummy is True
        assert dummy_ai.health_check()["status"] == "healthy"

    def test_incomplete_dummy_data_reports_error(self, dummy_ai, monkeypatch):
        monkeypatch.setattr(dummy_ai.dummy_data, "chat_replies", [])

        health = dummy_ai.health_check()

        assert health["status"] == "error"
        assert health["message"] == "Dummy data is incomplete"

    def test_dummy_chat_greets_then_answers(self, dummy_ai):
        greeting = dummy_ai.chat("system", [], "Hello")
        reply = dummy_ai.chat("system", [{"role": "user", "text": "Hello"}, {"role": "model", "text": greeting}], "Hi")

        assert config.SITE_NAME in greeting
        assert reply in dummy_ai.dummy_data.chat_replies[1:]

    def test_dummy_image_is_base64(self, dummy_ai):
        assert dummy_ai.generate_image("a cat") == dummy_ai.dummy_data.get_image_base64()

    def test_dummy_free_text_is_a_generation_failure(self, dummy_ai):
        with pytest.raises(GenerationFailure):
            dummy_ai.generate_text("anything")


class TestTextGeneration:

    def test_generate_text_sends_single_user_message(self, fake_groq):
        client, completions = fake_groq("  # Plan  ")
        service = AIService(client=client)

        result = service.generate_text("Write a plan")

        assert result == "# Plan"
        call = completions.calls[0]
        assert call["model"] == config.GROQ_MODEL
        assert call["messages"] == [{"role": "user", "content": "Write a plan"}]
        assert "response_format" not in call

    def test_generate_json_requests_json_object(self, fake_groq):
        client, completions = fake_groq('{"title": "T"}')
        service = AIService(client=client)

        assert service.generate_json("exam") == '{"title": "T"}'
        assert completions.calls[0]["response_format"] == {"type": "json_object"}

    def test_image_attachment_uses_vision_model(self, fake_groq):
        client, completions = fake_groq("ok")
        service = AIService(client=client)

        service.generate_text("Explain", Attachment(b"\x89PNG", "image/png"))

        call = completions.calls[0]
        assert call["model"] == config.GROQ_VISION_MODEL
        content = call["messages"][0]["content"]
        assert content[0] == {"type": "text", "text": "Explain"}
        assert content[1]["image_url"]["url"].startswith("data:image/png;base64,")

    def test_text_attachment_is_appended_to_prompt(self, fake_groq):
        client, completions = fake_groq("ok")
        service = AIService(client=client)

        service.generate_text("Explain", Attachment("Photosynthesis".encode("utf-8"), "text/plain"))

        content = completions.calls[0]["messages"][0]["content"]
        assert content.startswith("Explain")
        assert content.endswith("Photosynthesis")

    def test_unsupported_attachment_rejected(self, fake_groq):
        client, _ = fake_groq("ok")
        service = AIService(client=client)

        with pytest.raises(ValueError):
            service.generate_text("Explain", Attachment(b"%PDF", "application/pdf"))

    def test_client_error_becomes_generation_failure_without_retry(self, fake_groq, groq_error):
        client, completions = fake_groq(groq_error, "never used")
        service = AIService(client=client)

        with pytest.raises(GenerationFailure):
            service.generate_text("Write")

        assert len(completions.calls) == 1

    def test_programming_error_is_not_wrapped(self, fake_groq):
        client, _ = fake_groq(TypeError("unexpected keyword argument"))
        service = AIService(client=client)

        with pytest.raises(TypeError):
            service.generate_text("Write")


class TestImageGeneration:

    def test_generate_image_returns_b64(self, fake_groq, fake_images):
        client, _ = fake_groq()
        service = AIService(client=client, image_client=fake_images)

        assert service.generate_image("a robot") == "aW1hZ2U="
        call = fake_images.images.calls[0]
        assert call["model"] == config.OPENAI_IMAGE_MODEL
        assert call["prompt"] == "a robot"
        assert call["size"] == config.OPENAI_IMAGE_SIZE
        assert call["n"] == 1

    def test_dall_e_models_request_base64(self, fake_groq, fake_images, monkeypatch):
        monkeypatch.setattr(config, "OPENAI_IMAGE_MODEL", "dall-e-3")
        client, _ = fake_groq()
        AIService(client=client, image_client=fake_images).generate_image("a robot")

        assert fake_images.images.calls[0]["response_format"] == "b64_json"

    def test_gpt_image_models_omit_response_format(self, fake_groq, fake_images, monkeypatch):
        monkeypatch.setattr(config, "OPENAI_IMAGE_MODEL", "gpt-image-1")
        client, _ = fake_groq()
        AIService(client=client, image_client=fake_images).generate_image("a robot")

        assert "response_format" not in fake_images.images.calls[0]

    def test_generate_image_without_client_fails(self, fake_groq):
        client, _ = fake_groq()
        service = AIService(client=client)

        with pytest.raises(GenerationFailure):
            service.generate_image("a robot")

    def test_generate_image_error_becomes_generation_failure(self, fake_groq, fake_images, openai_error):
        client, _ = fake_groq()
        fake_images.images.b64_json = openai_error
        service = AIService(client=client, image_client=fake_images)

        with pytest.raises(GenerationFailure):
            service.generate_image("a robot")

        assert len(fake_images.images.calls) == 1

    def test_generate_image_without_data_fails(self, fake_groq, fake_images):
        client, _ = fake_groq()
        fake_images.images.b64_json = None
        service = AIService(client=client, image_client=fake_images)

        with pytest.raises(GenerationFailure):
            service.generate_image("a robot")

        assert len(fake_images.images.calls) == 1

    def test_image_client_without_images_api_is_a_defect(self, fake_groq):
        client, _ = fake_groq()
        service = AIService(client=client, image_client=object())

        with pytest.raises(AttributeError):
            service.generate_image("a robot")
