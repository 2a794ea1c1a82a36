from types import SimpleNamespace

import pytest

from receipt_records import gemini_client
from receipt_records.config import Settings


class FakeFiles:
    def __init__(self):
        self.uploads = []

    def upload(self, file, config=None):
        self.uploads.append((file, config))
        return SimpleNamespace(uri="files/abc", mime_type=config.mime_type)


class FakeModels:
    def __init__(self, text):
        self.text = text
        self.calls = []

    def generate_content(self, model, contents):
        self.calls.append((model, contents))
        return SimpleNamespace(text=self.text)


def _fake_client(text):
    return SimpleNamespace(files=FakeFiles(), models=FakeModels(text))


def test_text_from_document_uploads_and_prompts(tmp_path):
    doc = tmp_path / "invoice.pdf"
    doc.write_bytes(b"%PDF-1.4")
    client = _fake_client('{"invoice_number": "INV1"}')
    settings = Settings(api_key="test-key", model_name="gemini-test")

    text = gemini_client.text_from_document(str(doc), client=client, settings=settings)

    assert text == '{"invoice_number": "INV1"}'
    (uploaded_path, config), = client.files.uploads
    assert uploaded_path == str(doc)
    assert config.mime_type == "application/pdf"
    assert config.display_name == "invoice.pdf"

    (model, contents), = client.models.calls
    assert model == "gemini-test"
    assert contents[0].uri == "files/abc"
    assert contents[1] == gemini_client.EXTRACTION_PROMPT


def test_text_from_document_uses_given_mime_type(tmp_path):
    doc = tmp_path / "upload"
    doc.write_bytes(b"data")
    client = _fake_client(None)

    text = gemini_client.text_from_document(
        str(doc), "image/jpeg", display_name="receipt.jpg",
        client=client, settings=Settings(api_key="k"),
    )

    assert text == ""
    (_, config), = client.files.uploads
    assert config.mime_type == "image/jpeg"
    assert config.display_name == "receipt.jpg"


def test_build_client_requires_api_key():
    with pytest.raises(gemini_client.GeminiConfigError):
        gemini_client.build_client(Settings(api_key=None))


def test_prompt_names_projected_fields():
    for key in ("invoice_number", "invoice_date", "customer", "total", "items",
                "description", "quantity", "rate", "gst", "amount"):
        assert key in gemini_client.EXTRACTION_PROMPT
