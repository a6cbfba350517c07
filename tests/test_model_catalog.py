"""Unit tests for ModelCatalogResolver endpoint, header, decoding and filtering."""

import json
import unittest

import httpx

from core.credentials import EnvCredential
from core.errors import TransportError
from core.model_catalog import ModelCatalogResolver, ModelFetchError
from core.service_role import ServiceRole
from core.transport import HttpResponse, HttpxTransport

BASE = "https://speaches.serveur.au"

SPEACHES_PAYLOAD = {"data": [{"id": "Systran/whisper-small"}, {"id": "speaches-ai/piper-en"}]}
OLLAMA_PAYLOAD = {"models": [{"name": "llama2"}, {"name": "mistral"}]}


class _FakeTransport:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls: list[tuple[str, str, dict]] = []

    def request(self, method, url, headers=None):
        self.calls.append((method, url, dict(headers or {})))
        if self.error is not None:
            raise self.error
        return self.response


def _json_response(payload, status=200, status_text="OK"):
    return HttpResponse(status=status, status_text=status_text, body=json.dumps(payload).encode("utf-8"))


class ModelCatalogResolverTests(unittest.TestCase):
    def test_stt_keeps_only_whisper_models(self):
        transport = _FakeTransport(_json_response(SPEACHES_PAYLOAD))
        result = ModelCatalogResolver(transport).list_models(BASE, ServiceRole.STT, "")

        self.assertEqual(result, ("Systran/whisper-small",))
        self.assertEqual(transport.calls, [("GET", BASE + "/v1/models", {})])

    def test_tts_drops_whisper_models(self):
        transport = _FakeTransport(_json_response(SPEACHES_PAYLOAD))
        result = ModelCatalogResolver(transport).list_models(BASE, ServiceRole.TTS, "")

        self.assertEqual(result, ("speaches-ai/piper-en",))

    def test_whisper_filter_is_case_insensitive(self):
        payload = {"data": [{"id": "openai/Whisper-Large-v3"}, {"id": "kokoro"}]}
        transport = _FakeTransport(_json_response(payload))
        result = ModelCatalogResolver(transport).list_models(BASE, ServiceRole.STT)

        self.assertEqual(result, ("openai/Whisper-Large-v3",))

    def test_chat_reads_ollama_tags_without_filtering(self):
        transport = _FakeTransport(_json_response(OLLAMA_PAYLOAD))
        result = ModelCatalogResolver(transport).list_models("https://ollama.serveur.au/", ServiceRole.CHAT, "")

        self.assertEqual(result, ("llama2", "mistral"))
        self.assertEqual(transport.calls[0][1], "https://ollama.serveur.au/api/tags")

    def test_literal_credential_sends_bearer_header(self):
        transport = _FakeTransport(_json_response(OLLAMA_PAYLOAD))
        ModelCatalogResolver(transport).list_models(BASE, ServiceRole.CHAT, "sk-test")

        self.assertEqual(transport.calls[0][2], {"Authorization": "Bearer sk-test"})

    def test_env_credential_is_never_sent(self):
        transport = _FakeTransport(_json_response(SPEACHES_PAYLOAD))
        resolver = ModelCatalogResolver(transport)
        resolver.list_models(BASE, ServiceRole.STT, "env:OPENAI_API_KEY")
        resolver.list_models(BASE, ServiceRole.TTS, EnvCredential("OPENAI_API_KEY"))

        for _, _, headers in transport.calls:
            self.assertEqual(headers, {})
            self.assertNotIn("OPENAI_API_KEY", " ".join(headers.values()))

    def test_missing_top_level_key_is_empty_catalog(self):
        transport = _FakeTransport(_json_response({"object": "list"}))
        result = ModelCatalogResolver(transport).list_models(BASE, ServiceRole.STT)

        self.assertEqual(result, ())

    def test_malformed_entries_are_skipped(self):
        payload = {"models": [{"name": "llama2"}, "phi", {"model": "x"}, {"name": 7}, {"name": "mistral"}]}
        transport = _FakeTransport(_json_response(payload))
        result = ModelCatalogResolver(transport).list_models(BASE, ServiceRole.CHAT)

        self.assertEqual(result, ("llama2", "mistral"))

    def test_duplicates_are_kept_in_upstream_order(self):
        payload = {"models": [{"name": "b"}, {"name": "a"}, {"name": "b"}]}
        transport = _FakeTransport(_json_response(payload))
        result = ModelCatalogResolver(transport).list_models(BASE, ServiceRole.CHAT)

        self.assertEqual(result, ("b", "a", "b"))

    def test_http_error_status_is_reported(self):
        transport = _FakeTransport(_json_response({}, status=401, status_text="Unauthorized"))
        result = ModelCatalogResolver(transport).list_models(BASE, ServiceRole.STT)

        self.assertIsInstance(result, ModelFetchError)
        self.assertEqual(result.status, 401)
        self.assertEqual(result.message, "HTTP 401: Unauthorized")
        self.assertEqual(len(transport.calls), 1)

    def test_invalid_json_is_reported(self):
        transport = _FakeTransport(HttpResponse(status=200, status_text="OK", body=b"<html>hi</html>"))
        result = ModelCatalogResolver(transport).list_models(BASE, ServiceRole.STT)

        self.assertIsInstance(result, ModelFetchError)
        self.assertIn("not valid JSON", result.message)
        self.assertIsNone(result.status)

    def test_wrong_shape_is_reported(self):
        transport = _FakeTransport(_json_response({"data": "nope"}))
        result = ModelCatalogResolver(transport).list_models(BASE, ServiceRole.TTS)

        self.assertIsInstance(result, ModelFetchError)

    def test_transport_error_is_reported(self):
        transport = _FakeTransport(error=TransportError("Name or service not known"))
        result = ModelCatalogResolver(transport).list_models(BASE, ServiceRole.CHAT)

        self.assertEqual(result, ModelFetchError("Name or service not known"))

    def test_unencodable_literal_credential_is_reported(self):
        client = httpx.Client(transport=httpx.MockTransport(lambda request: httpx.Response(200, json=OLLAMA_PAYLOAD)))
        resolver = ModelCatalogResolver(HttpxTransport(client=client))
        result = resolver.list_models("http://svc.local", ServiceRole.CHAT, "cl\u00e9-secr\u00e8te")

        self.assertIsInstance(result, ModelFetchError)
        self.assertIsNone(result.status)

    def test_empty_base_url_is_reported_without_request(self):
        transport = _FakeTransport(_json_response(OLLAMA_PAYLOAD))
        result = ModelCatalogResolver(transport).list_models("", ServiceRole.CHAT)

        self.assertIsInstance(result, ModelFetchError)
        self.assertEqual(transport.calls, [])

    def test_repeated_calls_refetch_and_match(self):
        transport = _FakeTransport(_json_response(OLLAMA_PAYLOAD))
        resolver = ModelCatalogResolver(transport)

        first = resolver.list_models(BASE, ServiceRole.CHAT)
        second = resolver.list_models(BASE, ServiceRole.CHAT)

        self.assertEqual(first, second)
        self.assertEqual(len(transport.calls), 2)


if __name__ == "__main__":
    unittest.main()
