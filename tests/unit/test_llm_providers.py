"""Tests for the LLM provider registry, media handling and each provider."""

from unittest.mock import MagicMock, patch

import pytest

from recruitflow.core.schemas import ResumePayload
from recruitflow.llm import LLMProvider, available_providers, get_provider, parse_json_response
from recruitflow.llm.base import SYSTEM_PROMPT, media_kind, normalized_media_type
from recruitflow.llm.openai import build_messages

_PDF = ResumePayload(content_type="application/pdf", data=b"%PDF-1.4 fake")
_PNG = ResumePayload(content_type="image/png", data=b"\x89PNG")


def _mock_anthropic(text: str = "ok") -> tuple[MagicMock, MagicMock]:
    mock_client = MagicMock()
    mock_message = MagicMock()
    mock_message.content = [MagicMock(text=text)]
    mock_client.messages.create.return_value = mock_message
    mock_anthropic = MagicMock()
    mock_anthropic.Anthropic.return_value = mock_client
    return mock_anthropic, mock_client


def _mock_openai(text: str = "ok") -> MagicMock:
    mock_openai = MagicMock()
    mock_resp = MagicMock()
    mock_resp.choices[0].message.content = text
    mock_openai.OpenAI.return_value.chat.completions.create.return_value = mock_resp
    return mock_openai


def _mock_genai(text: str = "ok") -> tuple[dict[str, MagicMock], MagicMock]:
    mock_genai = MagicMock()
    mock_genai.Client.return_value.models.generate_content.return_value.text = text
    mock_google = MagicMock()
    mock_google.genai = mock_genai
    modules = {"google": mock_google, "google.genai": mock_genai}
    return modules, mock_genai


# ---------------------------------------------------------------------------
# Registry
# ---------------------------------------------------------------------------
class TestRegistry:
    def test_available_providers(self) -> None:
        assert available_providers() == ["anthropic", "gemini", "ollama", "openai"]

    @pytest.mark.parametrize("name", ["anthropic", "openai", "gemini", "ollama"])
    def test_get_provider(self, name: str) -> None:
        provider = get_provider(name)
        assert isinstance(provider, LLMProvider)
        assert provider.provider_id == name
        assert provider.default_model

    def test_unknown_provider(self) -> None:
        with pytest.raises(ValueError, match="Unknown LLM provider 'nope'"):
            get_provider("nope")

    def test_env_vars(self) -> None:
        assert get_provider("anthropic").env_var == "ANTHROPIC_API_KEY"
        assert get_provider("openai").env_var == "OPENAI_API_KEY"
        assert get_provider("gemini").env_var == "GOOGLE_API_KEY"
        assert get_provider("ollama").env_var is None


# ---------------------------------------------------------------------------
# Shared helpers
# ---------------------------------------------------------------------------
class TestParseJsonResponse:
    def test_plain_json(self) -> None:
        assert parse_json_response('{"a": 1}') == {"a": 1}

    def test_markdown_fenced(self) -> None:
        assert parse_json_response('```json\n[{"a": 1}]\n```') == [{"a": 1}]

    def test_bare_fence(self) -> None:
        assert parse_json_response('```\n{"a": 1}\n```') == {"a": 1}

    def test_null(self) -> None:
        assert parse_json_response("null") is None

    def test_malformed(self) -> None:
        with pytest.raises(ValueError, match="Failed to parse LLM response"):
            parse_json_response("not json {{{")


class TestMediaKind:
    def test_image(self) -> None:
        assert media_kind(_PNG) == "image"

    def test_pdf(self) -> None:
        assert media_kind(_PDF) == "document"

    def test_unsupported(self) -> None:
        media = ResumePayload(content_type="application/zip", data=b"")
        with pytest.raises(ValueError, match="Unsupported attachment type"):
            media_kind(media)

    def test_jpg_alias_normalized(self) -> None:
        media = ResumePayload(content_type="image/jpg", data=b"")
        assert normalized_media_type(media) == "image/jpeg"


class TestBuildMessages:
    def test_text_only(self) -> None:
        messages = build_messages("hello", "sys", None)
        assert messages == [
            {"role": "system", "content": "sys"},
            {"role": "user", "content": "hello"},
        ]

    def test_image_part(self) -> None:
        content = build_messages("hello", "sys", _PNG)[1]["content"]
        assert content[0]["type"] == "image_url"
        assert content[0]["image_url"]["url"].startswith("data:image/png;base64,")
        assert content[1] == {"type": "text", "text": "hello"}

    def test_pdf_file_part(self) -> None:
        content = build_messages("hello", "sys", _PDF)[1]["content"]
        assert content[0]["type"] == "file"
        assert content[0]["file"]["file_data"].startswith("data:application/pdf;base64,")


# ---------------------------------------------------------------------------
# Missing key / SDK
# ---------------------------------------------------------------------------
class TestAnthropicProvider:
    def test_missing_api_key(self) -> None:
        provider = get_provider("anthropic")
        with (
            patch.dict("os.environ", {}, clear=True),
            pytest.raises(ValueError, match="ANTHROPIC_API_KEY"),
        ):
            provider.complete("resume text")

    def test_missing_sdk(self) -> None:
        provider = get_provider("anthropic")
        with (
            patch.dict("os.environ", {"ANTHROPIC_API_KEY": "test-key"}),
            patch.dict("sys.modules", {"anthropic": None}),
            pytest.raises(ImportError, match="anthropic is required"),
        ):
            provider.complete("resume text")

    def test_custom_system_and_model(self) -> None:
        provider = get_provider("anthropic")
        mock_anthropic, mock_client = _mock_anthropic('{"ok": true}')

        with (
            patch.dict("os.environ", {"ANTHROPIC_API_KEY": "key"}),
            patch.dict("sys.modules", {"anthropic": mock_anthropic}),
        ):
            result = provider.complete("text", "claude-x", system="custom system prompt")

        assert result == '{"ok": true}'
        call_kwargs = mock_client.messages.create.call_args.kwargs
        assert call_kwargs["system"] == "custom system prompt"
        assert call_kwargs["model"] == "claude-x"
        assert call_kwargs["messages"] == [{"role": "user", "content": "text"}]

    def test_falls_back_to_system_prompt(self) -> None:
        provider = get_provider("anthropic")
        mock_anthropic, mock_client = _mock_anthropic()

        with (
            patch.dict("os.environ", {"ANTHROPIC_API_KEY": "key"}),
            patch.dict("sys.modules", {"anthropic": mock_anthropic}),
        ):
            provider.complete("text")

        call_kwargs = mock_client.messages.create.call_args.kwargs
        assert call_kwargs["system"] == SYSTEM_PROMPT
        assert call_kwargs["model"] == provider.default_model

    def test_pdf_sent_as_document_block(self) -> None:
        provider = get_provider("anthropic")
        mock_anthropic, mock_client = _mock_anthropic()

        with (
            patch.dict("os.environ", {"ANTHROPIC_API_KEY": "key"}),
            patch.dict("sys.modules", {"anthropic": mock_anthropic}),
        ):
            provider.complete("extract", media=_PDF)

        content = mock_client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert content[0]["type"] == "document"
        assert content[0]["source"]["media_type"] == "application/pdf"
        assert content[0]["source"]["type"] == "base64"
        assert content[1] == {"type": "text", "text": "extract"}

    def test_image_sent_as_image_block(self) -> None:
        provider = get_provider("anthropic")
        mock_anthropic, mock_client = _mock_anthropic()

        with (
            patch.dict("os.environ", {"ANTHROPIC_API_KEY": "key"}),
            patch.dict("sys.modules", {"anthropic": mock_anthropic}),
        ):
            provider.complete("extract", media=_PNG)

        content = mock_client.messages.create.call_args.kwargs["messages"][0]["content"]
        assert content[0]["type"] == "image"


class TestOpenAIProvider:
    def test_missing_api_key(self) -> None:
        provider = get_provider("openai")
        with (
            patch.dict("os.environ", {}, clear=True),
            pytest.raises(ValueError, match="OPENAI_API_KEY"),
        ):
            provider.complete("resume text")

    def test_missing_sdk(self) -> None:
        provider = get_provider("openai")
        with (
            patch.dict("os.environ", {"OPENAI_API_KEY": "test-key"}),
            patch.dict("sys.modules", {"openai": None}),
            pytest.raises(ImportError, match="openai is required"),
        ):
            provider.complete("resume text")

    def test_uses_custom_system(self) -> None:
        provider = get_provider("openai")
        mock_openai = _mock_openai()

        with (
            patch.dict("os.environ", {"OPENAI_API_KEY": "key"}),
            patch.dict("sys.modules", {"openai": mock_openai}),
        ):
            assert provider.complete("text", system="custom system prompt") == "ok"

        messages = mock_openai.OpenAI.return_value.chat.completions.create.call_args.kwargs[
            "messages"
        ]
        system_msg = next(m for m in messages if m["role"] == "system")
        assert system_msg["content"] == "custom system prompt"


class TestGeminiProvider:
    def test_missing_api_key(self) -> None:
        provider = get_provider("gemini")
        with (
            patch.dict("os.environ", {}, clear=True),
            pytest.raises(ValueError, match="GOOGLE_API_KEY"),
        ):
            provider.complete("resume text")

    def test_missing_sdk(self) -> None:
        provider = get_provider("gemini")
        with (
            patch.dict("os.environ", {"GOOGLE_API_KEY": "test-key"}),
            patch.dict("sys.modules", {"google": None, "google.genai": None}),
            pytest.raises(ImportError, match="google-genai is required"),
        ):
            provider.complete("resume text")

    def test_uses_custom_system(self) -> None:
        provider = get_provider("gemini")
        modules, mock_genai = _mock_genai('{"ok": true}')

        with (
            patch.dict("os.environ", {"GOOGLE_API_KEY": "key"}),
            patch.dict("sys.modules", modules),
        ):
            result = provider.complete("text", system="custom system prompt")

        assert result == '{"ok": true}'
        mock_genai.Client.assert_called_once_with(api_key="key")
        config_kwargs = mock_genai.types.GenerateContentConfig.call_args.kwargs
        assert config_kwargs["system_instruction"] == "custom system prompt"
        assert config_kwargs["response_mime_type"] == "application/json"

    def test_media_prepended_as_part(self) -> None:
        provider = get_provider("gemini")
        modules, mock_genai = _mock_genai()

        with (
            patch.dict("os.environ", {"GOOGLE_API_KEY": "key"}),
            patch.dict("sys.modules", modules),
        ):
            provider.complete("extract", media=_PDF)

        mock_genai.types.Part.from_bytes.assert_called_once_with(
            data=_PDF.data, mime_type="application/pdf"
        )
        contents = mock_genai.Client.return_value.models.generate_content.call_args.kwargs[
            "contents"
        ]
        assert contents[-1] == "extract"
        assert len(contents) == 2


class TestOllamaProvider:
    def test_missing_sdk(self) -> None:
        provider = get_provider("ollama")
        with (
            patch.dict("sys.modules", {"openai": None}),
            pytest.raises(ImportError, match="openai is required"),
        ):
            provider.complete("resume text")

    def test_uses_base_url(self) -> None:
        provider = get_provider("ollama")
        mock_openai = _mock_openai()

        with (
            patch.dict("os.environ", {"OLLAMA_BASE_URL": "http://gpu-box:11434/v1"}),
            patch.dict("sys.modules", {"openai": mock_openai}),
        ):
            provider.complete("text", system="custom system prompt")

        assert mock_openai.OpenAI.call_args.kwargs["base_url"] == "http://gpu-box:11434/v1"
        messages = mock_openai.OpenAI.return_value.chat.completions.create.call_args.kwargs[
            "messages"
        ]
        assert messages[0] == {"role": "system", "content": "custom system prompt"}

    def test_rejects_pdf_attachment(self) -> None:
        provider = get_provider("ollama")
        with pytest.raises(ValueError, match="image attachments only"):
            provider.complete("extract", media=_PDF)

    def test_accepts_image_attachment(self) -> None:
        provider = get_provider("ollama")
        mock_openai = _mock_openai()

        with patch.dict("sys.modules", {"openai": mock_openai}):
            provider.complete("extract", media=_PNG)

        messages = mock_openai.OpenAI.return_value.chat.completions.create.call_args.kwargs[
            "messages"
        ]
        assert messages[1]["content"][0]["type"] == "image_url"
