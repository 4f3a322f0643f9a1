"""
Unit Tests for the sandcraft CLI
"""
import json
from unittest.mock import AsyncMock, patch

import pytest

from sandcraft import cli
from sandcraft.core.exceptions import AllProvidersFailedError, ProviderUnavailableError, SandcraftError
from sandcraft.models.generated_file import GeneratedFile, Language, ProviderResponse
from mocks.llm_responses import ANNOTATED_COUNTER_RESPONSE, FULL_PROJECT_RESPONSE


def run_cli(monkeypatch, *argv) -> int:
    monkeypatch.setattr("sys.argv", ["sandcraft", *argv])
    with pytest.raises(SystemExit) as exc_info:
        cli.main()
    return exc_info.value.code


class TestProcess:
    """Test `sandcraft process`"""

    def test_process_writes_project(self, monkeypatch, tmp_path):
        response_file = tmp_path / "response.md"
        response_file.write_text(ANNOTATED_COUNTER_RESPONSE, encoding="utf-8")
        out_dir = tmp_path / "app"

        code = run_cli(monkeypatch, "process", str(response_file), "--out", str(out_dir))

        assert code == 0
        assert (out_dir / "package.json").exists()
        assert (out_dir / "public" / "index.html").exists()
        assert "useState" in (out_dir / "src" / "App.js").read_text(encoding="utf-8")

    def test_process_json_output(self, monkeypatch, tmp_path, capsys):
        response_file = tmp_path / "response.md"
        response_file.write_text(FULL_PROJECT_RESPONSE, encoding="utf-8")

        code = run_cli(monkeypatch, "--json", "process", str(response_file))
        data = json.loads(capsys.readouterr().out)

        assert code == 0
        assert data["report"]["score"] == 100
        assert len(data["files"]) == 5


    def test_process_missing_file(self, monkeypatch, tmp_path, capsys):
        code = run_cli(monkeypatch, "process", str(tmp_path / "missing.md"))
        out = capsys.readouterr().out

        assert code == 1
        assert "✗" in out
        assert "No such file or directory" in out

    def test_process_never_writes_outside_out_dir(self, monkeypatch, tmp_path):
        response_file = tmp_path / "response.md"
        response_file.write_text("// src/../../escaped.js\n```js\nexport const x = 1;\n```", encoding="utf-8")
        out_dir = tmp_path / "work" / "app"

        run_cli(monkeypatch, "process", str(response_file), "--out", str(out_dir))

        assert not (tmp_path / "escaped.js").exists()
        assert not (tmp_path / "work" / "escaped.js").exists()
        assert (out_dir / "src" / "components" / "Component1.jsx").exists()


class TestWriteProject:
    """Test write_project"""

    def test_rejects_paths_outside_out_dir(self, tmp_path):
        out_dir = tmp_path / "out"
        files = [GeneratedFile("/src/../../escaped.js", "export const x = 1;", Language.JAVASCRIPT)]

        with pytest.raises(SandcraftError) as exc_info:
            cli.write_project(files, out_dir)

        assert exc_info.value.code == "UNSAFE_PATH"
        assert not (tmp_path / "escaped.js").exists()

    def test_writes_nested_paths(self, tmp_path):
        cli.write_project([GeneratedFile("/src/components/Card.jsx", "x", Language.JAVASCRIPT)], tmp_path)
        assert (tmp_path / "src" / "components" / "Card.jsx").read_text(encoding="utf-8") == "x"


class TestValidate:
    """Test `sandcraft validate`"""

    def test_round_trip_through_disk(self, monkeypatch, tmp_path):
        """Test a project written by `process` validates cleanly"""
        response_file = tmp_path / "response.md"
        response_file.write_text(FULL_PROJECT_RESPONSE, encoding="utf-8")
        out_dir = tmp_path / "app"
        run_cli(monkeypatch, "process", str(response_file), "--out", str(out_dir))
        (out_dir / "node_modules" / "react").mkdir(parents=True)
        (out_dir / "node_modules" / "react" / "index.js").write_text("module.exports = {};", encoding="utf-8")

        files = cli.read_project(out_dir)

        assert sorted(f.path for f in files) == [
            "/package.json", "/public/index.html", "/src/App.js", "/src/index.css", "/src/index.js",
        ]
        assert run_cli(monkeypatch, "validate", str(out_dir)) == 0

    def test_incomplete_directory(self, monkeypatch, tmp_path, capsys):
        (tmp_path / "src").mkdir()
        (tmp_path / "src" / "App.js").write_text("function App() {\n  return <div>", encoding="utf-8")

        code = run_cli(monkeypatch, "--json", "validate", str(tmp_path))
        data = json.loads(capsys.readouterr().out)

        assert code == 1
        assert data["status"] == "INVALID"
        assert data["summary"]["filesChecked"] == 1

    def test_missing_directory(self, monkeypatch, tmp_path):
        assert run_cli(monkeypatch, "validate", str(tmp_path / "nope")) == 2


class TestGenerate:
    """Test `sandcraft generate` with a patched gateway"""

    def test_generate(self, monkeypatch, capsys):
        gateway = AsyncMock()
        gateway.generate.return_value = ProviderResponse(content=FULL_PROJECT_RESPONSE, provider="groq", model="llama")

        with patch("sandcraft.providers.registry.build_gateway", return_value=gateway):
            code = run_cli(monkeypatch, "--json", "generate", "a counter app")

        data = json.loads(capsys.readouterr().out)
        assert code == 0
        assert data["provider"] == "groq"
        gateway.generate.assert_awaited_once()

    def test_all_providers_failed(self, monkeypatch, capsys):
        gateway = AsyncMock()
        gateway.generate.side_effect = AllProvidersFailedError([ProviderUnavailableError("groq", "down")])

        with patch("sandcraft.providers.registry.build_gateway", return_value=gateway):
            code = run_cli(monkeypatch, "generate", "a counter app")

        assert code == 1
        assert "All AI providers failed" in capsys.readouterr().out


def test_no_command(monkeypatch):
    assert run_cli(monkeypatch) == 2
