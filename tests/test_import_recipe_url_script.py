import json

from recipe_importer.app.services.url_parsing.models import (
    CanonicalRecipe,
    Confidence,
    ExtractionMethod,
    ImportErrorCode,
    ImportResult,
)
from scripts import import_recipe_url


def _stub_import(monkeypatch, result):
    calls = []

    async def fake_import(url: str):
        calls.append(url)
        return result

    monkeypatch.setattr(import_recipe_url, "import_recipe_from_url", fake_import)
    return calls


def test_success_prints_payload_and_exits_zero(monkeypatch, capsys):
    result = ImportResult(
        success=True,
        recipe=CanonicalRecipe(title="Soup"),
        confidence=Confidence.HIGH,
        method=ExtractionMethod.JSON_LD,
    )
    calls = _stub_import(monkeypatch, result)

    assert import_recipe_url.main(["import_recipe_url.py", "https://example.com/soup"]) == 0
    assert calls == ["https://example.com/soup"]
    payload = json.loads(capsys.readouterr().out)
    assert payload["recipe"]["title"] == "Soup"


def test_failed_import_exits_one(monkeypatch, capsys):
    result = ImportResult(
        success=False,
        error_code=ImportErrorCode.HTTP_ERROR,
        error_message="Site returned status 404.",
        status_code=404,
    )
    _stub_import(monkeypatch, result)

    assert import_recipe_url.main(["import_recipe_url.py", "https://example.com/gone"]) == 1
    payload = json.loads(capsys.readouterr().out)
    assert payload["error_code"] == "http_error"


def test_missing_url_is_a_usage_error(monkeypatch, capsys):
    calls = _stub_import(monkeypatch, None)

    assert import_recipe_url.main(["import_recipe_url.py"]) == 2
    assert calls == []
    assert "usage" in capsys.readouterr().err
