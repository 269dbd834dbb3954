import os
from pathlib import Path
from unittest.mock import patch

import pytest

from fauna_typegen import generate_fauna_types
from fauna_typegen.shared import FaunaQueryError, MissingSecretError, RecordSchema
from fauna_typegen.shared.fauna_client import DEFAULT_ENDPOINT


class TestBuildParser:
    def test_defaults(self):
        args = generate_fauna_types.build_parser().parse_args([])
        assert args.secret is None
        assert args.dir == Path("src/fauna-typed")
        assert args.file == "types.ts"
        assert args.endpoint is None

    def test_short_options(self):
        args = generate_fauna_types.build_parser().parse_args(["-s", "k", "-d", "types", "-f", "custom.ts"])
        assert args.secret == "k"
        assert args.dir == Path("types")
        assert args.file == "custom.ts"


class TestResolveSecret:
    def test_cli_secret_wins(self, monkeypatch):
        monkeypatch.setenv("FAUNA_ADMIN_KEY", "from-env")
        assert generate_fauna_types.resolve_secret("from-cli") == "from-cli"

    def test_env_fallback(self, monkeypatch):
        monkeypatch.setenv("FAUNA_ADMIN_KEY", "from-env")
        assert generate_fauna_types.resolve_secret(None) == "from-env"

    def test_missing(self, monkeypatch):
        monkeypatch.delenv("FAUNA_ADMIN_KEY", raising=False)
        with pytest.raises(MissingSecretError):
            generate_fauna_types.resolve_secret(None)


class TestMain:
    @patch("fauna_typegen.generate_fauna_types.fetch_collections")
    def test_writes_types(self, mock_fetch, tmp_path, monkeypatch, capsys):
        monkeypatch.delenv("FAUNA_ENDPOINT", raising=False)
        mock_fetch.return_value = [
            RecordSchema(name="User", fields={"bestFriend": "Ref<User>?"}),
        ]

        generate_fauna_types.main(["--secret", "k", "--dir", str(tmp_path), "--file", "custom.ts"])

        mock_fetch.assert_called_once_with("k", endpoint=DEFAULT_ENDPOINT)
        text = (tmp_path / "custom.ts").read_text(encoding="utf-8")
        assert "\tbestFriend?: User;" in text
        assert "\tbestFriend?: DocumentReference;" in text
        out = capsys.readouterr().out
        assert "Found collections: User" in out
        assert "Type definitions generated at" in out

    @patch("fauna_typegen.generate_fauna_types.fetch_collections")
    def test_endpoint_from_env(self, mock_fetch, tmp_path, monkeypatch):
        monkeypatch.setenv("FAUNA_ENDPOINT", "http://localhost:8443")
        mock_fetch.return_value = []

        generate_fauna_types.main(["-s", "k", "-d", str(tmp_path)])

        mock_fetch.assert_called_once_with("k", endpoint="http://localhost:8443")

    @patch("fauna_typegen.generate_fauna_types.fetch_collections")
    def test_no_collections(self, mock_fetch, tmp_path, capsys):
        mock_fetch.return_value = []

        generate_fauna_types.main(["-s", "k", "-d", str(tmp_path / "out")])

        assert not (tmp_path / "out").exists()
        assert "No collections found" in capsys.readouterr().err

    def test_missing_secret(self, tmp_path, monkeypatch):
        monkeypatch.delenv("FAUNA_ADMIN_KEY", raising=False)
        monkeypatch.chdir(tmp_path)
        with pytest.raises(SystemExit) as exc_info:
            generate_fauna_types.main([])
        assert "No Fauna admin key provided" in str(exc_info.value)

    @patch("fauna_typegen.generate_fauna_types.fetch_collections")
    def test_query_error(self, mock_fetch):
        mock_fetch.side_effect = FaunaQueryError("denied", status=401)
        with pytest.raises(SystemExit) as exc_info:
            generate_fauna_types.main(["-s", "k"])
        assert "Error generating Fauna types" in str(exc_info.value)
        assert "denied" in str(exc_info.value)

    @patch("fauna_typegen.generate_fauna_types.fetch_collections")
    def test_unwritable_output_dir(self, mock_fetch, tmp_path):
        blocker = tmp_path / "file.txt"
        blocker.write_text("not a directory", encoding="utf-8")
        mock_fetch.return_value = [RecordSchema(name="User", fields={"name": "String"})]

        with pytest.raises(SystemExit) as exc_info:
            generate_fauna_types.main(["-s", "k", "-d", str(blocker / "out")])
        assert str(exc_info.value).startswith("Error generating Fauna types:")


class TestDotenv:
    @patch("fauna_typegen.generate_fauna_types.fetch_collections")
    def test_secret_and_endpoint_from_dotenv(self, mock_fetch, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text(
            "FAUNA_ADMIN_KEY=from-dotenv\nFAUNA_ENDPOINT=http://localhost:8443\n",
            encoding="utf-8",
        )
        monkeypatch.chdir(tmp_path)
        mock_fetch.return_value = []

        with patch.dict(os.environ):
            os.environ.pop("FAUNA_ADMIN_KEY", None)
            os.environ.pop("FAUNA_ENDPOINT", None)
            generate_fauna_types.main(["-d", str(tmp_path / "out")])

        mock_fetch.assert_called_once_with("from-dotenv", endpoint="http://localhost:8443")

    @patch("fauna_typegen.generate_fauna_types.fetch_collections")
    def test_environment_wins_over_dotenv(self, mock_fetch, tmp_path, monkeypatch):
        (tmp_path / ".env").write_text("FAUNA_ADMIN_KEY=from-dotenv\n", encoding="utf-8")
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("FAUNA_ADMIN_KEY", "from-env")
        monkeypatch.delenv("FAUNA_ENDPOINT", raising=False)
        mock_fetch.return_value = []

        generate_fauna_types.main(["-d", str(tmp_path / "out")])

        mock_fetch.assert_called_once_with("from-env", endpoint=DEFAULT_ENDPOINT)
