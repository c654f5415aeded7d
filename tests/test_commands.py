"""Tests for the CLI commands, end to end against a fake API server."""

import json
import logging
import re

import pytest

from ccboc.core.config import Credential, load_credential
from ccboc.core.logging import setup_logging
from ccboc.main import CCBOCCLI, main
from ccboc.ui.phase_watch import WatchKey

from conftest import plain


def wrapped(payload) -> dict:
    return {"data": payload}


@pytest.fixture
def cli(cli_config, api):
    return CCBOCCLI(cli_config, api=api, read_key=lambda: WatchKey.QUIT)


@pytest.fixture
def log_info(caplog):
    caplog.set_level(logging.INFO, logger="ccboc")
    return caplog


class TestLogin:
    """Test the login command."""

    def test_writes_config(self, cli, cli_config, capsys):
        code = cli.run("login", ["--url", "https://api.example.org", "--token", "abc"])

        assert code == 0
        assert load_credential(cli_config.config_path) == Credential(api_url="https://api.example.org", token="abc")
        assert "Configuration file generated" in plain(capsys.readouterr().out)

    def test_short_flags_and_alias(self, cli, cli_config):
        assert cli.run("l", ["-u", "http://10.0.0.1:8080", "-t", "abc"]) == 0
        assert load_credential(cli_config.config_path).api_url == "http://10.0.0.1:8080"

    def test_requires_both_flags(self, cli, cli_config, capsys):
        code = cli.run("login", ["--url", "https://api.example.org"])

        assert code == 1
        assert "--token and --url must be specified together" in plain(capsys.readouterr().err)
        assert not cli_config.config_path.exists()

    def test_rejects_invalid_url(self, cli, cli_config, capsys):
        code = cli.run("login", ["--url", "not-a-url", "--token", "abc"])

        assert code == 1
        assert "non valid URL" in plain(capsys.readouterr().err)
        assert not cli_config.config_path.exists()


class TestGet:
    """Test the get command."""

    def test_calculations(self, cli, server, calculation_list_payload, capsys):
        server.add("GET", "/calculations", body=wrapped(calculation_list_payload))

        assert cli.run("get", ["calculations"]) == 0

        out = plain(capsys.readouterr().out)
        assert "calc-2" in out
        assert re.search(r"Total\s+3", out)

    def test_calculation_by_alias(self, cli, server, calculation_payload, capsys):
        server.add("GET", "/calculation/calc-1", body=wrapped(calculation_payload))

        assert cli.run("g", ["calc", "calc-1"]) == 0
        assert "worker-1" in plain(capsys.readouterr().out)

    def test_bulk(self, cli, server, bulk_payload, capsys):
        server.add("GET", "/bulk/bulk-vega", body=wrapped(bulk_payload))

        assert cli.run("get", ["bulk", "bulk-vega"]) == 0
        assert "10432.6" in plain(capsys.readouterr().out)

    def test_workerpools(self, cli, server, workerpool_list_payload, capsys):
        server.add("GET", "/workerpools", body=wrapped(workerpool_list_payload))

        assert cli.run("get", ["workerpools"]) == 0
        assert "workerpool-vega" in plain(capsys.readouterr().out)

    def test_server_error(self, cli, server, capsys):
        """An error envelope is printed with its status code and exits 1."""
        server.add("GET", "/calculation/nope", status=404, body={"message": "calculation not found", "status_code": 404})

        assert cli.run("get", ["calculation", "nope"]) == 1

        captured = capsys.readouterr()
        err = plain(captured.err)
        assert "calculation not found" in err
        assert "status_code=404" in err
        assert "Total" not in plain(captured.out)

    def test_undecodable_body(self, cli, server, capsys):
        server.add("GET", "/bulks", body={"items": []})

        assert cli.run("get", ["bulks"]) == 1
        assert "DecodeError" in plain(capsys.readouterr().err)

    def test_unknown_noun(self, cli, server):
        assert cli.run("get", ["planets"]) == 1
        assert server.requests == []

    def test_missing_id(self, cli, server):
        assert cli.run("get", ["bulk"]) == 1
        assert server.requests == []

    def test_without_login(self, cli_config, capsys):
        """Without a config file nothing is sent."""
        cli = CCBOCCLI(cli_config)

        assert cli.run("get", ["calculations"]) == 1
        assert "ConfigNotFoundError" in plain(capsys.readouterr().err)


class TestGetResults:
    """Test downloading result archives."""

    ARCHIVE = b"\x1f\x8b\x08\x00results"

    def add_results(self, server, path):
        server.add("GET", path, content=self.ARCHIVE, headers={"Content-Disposition": "attachment; filename=vega.tar.gz"})

    def test_by_params(self, cli, server, temp_directory, log_info):
        self.add_results(server, "/calculations/results")

        code = cli.run(
            "get",
            ["results", "--teff=10000", "--logG=4.0", f"--results-download-path={temp_directory}"],
        )

        assert code == 0
        assert (temp_directory / "vega.tar.gz").read_bytes() == self.ARCHIVE
        assert server.requests[0].url.params["teff"] == "10000.0"
        assert server.requests[0].url.params["logg"] == "4.00"
        assert "The calculations were downloaded into" in log_info.text

    def test_by_id_next_to_config(self, cli, cli_config, server):
        self.add_results(server, "/calculations/results/calc-1")

        assert cli.run("get", ["res", "calc-1"]) == 0
        assert (cli_config.config_path.parent / "vega.tar.gz").read_bytes() == self.ARCHIVE

    def test_teff_without_logg(self, cli, server, capsys):
        assert cli.run("get", ["results", "--teff=10000"]) == 1
        assert server.requests == []
        assert "--teff and --logG must be specified together" in plain(capsys.readouterr().err)

    def test_missing_download_dir(self, cli, server, temp_directory):
        """The directory is checked before anything is requested."""
        missing = temp_directory / "missing"

        code = cli.run("get", ["results", "calc-1", f"--results-download-path={missing}"])

        assert code == 1
        assert server.requests == []

    def test_missing_content_disposition(self, cli, server, temp_directory, capsys):
        server.add("GET", "/calculations/results/calc-1", content=self.ARCHIVE)

        code = cli.run("get", ["results", "calc-1", f"--results-download-path={temp_directory}"])

        assert code == 1
        assert "Content-Disposition" in plain(capsys.readouterr().err)
        assert list(temp_directory.iterdir()) == []


class TestGetPhase:
    """Test the phase watch command."""

    def test_escape_after_first_draw(self, cli, server, bulk_payload, capsys):
        server.add("GET", "/bulk/bulk-vega", body=wrapped(bulk_payload))

        assert cli.run("get", ["phase", "bulk-vega"]) == 0

        assert len(server.requests) == 1
        out = plain(capsys.readouterr().out)
        assert "1/3 completed" in out

    def test_refreshes(self, cli_config, api, server, bulk_payload):
        server.add("GET", "/bulk/bulk-vega", body=wrapped(bulk_payload))
        keys = iter([WatchKey.REFRESH, WatchKey.REFRESH, WatchKey.QUIT])
        cli = CCBOCCLI(cli_config, api=api, read_key=lambda: next(keys))

        assert cli.run("get", ["phase", "bulk-vega"]) == 0
        assert len(server.requests) == 3

    def test_missing_bulk(self, cli, server):
        server.add("GET", "/bulk/nope", status=404, body={"message": "bulk not found", "status_code": 404})

        assert cli.run("get", ["phase", "nope"]) == 1


class TestCreate:
    """Test the create command."""

    def test_calculation(self, cli, server, calculation_payload, capsys):
        """Creation replies carry the calculation without a data envelope."""
        server.add("POST", "/calculations/create", body=calculation_payload)

        assert cli.run("create", ["calculation", "--teff=10000", "--logG=4.0"]) == 0

        assert json.loads(server.requests[0].content) == {"teff": "10000.0", "logG": "4.00"}
        assert "Calculation created: calc-1" in plain(capsys.readouterr().out)

    def test_calculation_without_noun(self, cli, server, calculation_payload):
        server.add("POST", "/calculations/create", body=calculation_payload)

        assert cli.run("c", ["--teff", "10000", "--logG", "4.0"]) == 0

    def test_calculation_requires_both_values(self, cli, server):
        assert cli.run("create", ["calculation", "--logG=4.0"]) == 1
        assert server.requests == []

    def test_calculation_non_numeric(self, cli, server):
        assert cli.run("create", ["calculation", "--teff=hot", "--logG=4.0"]) == 1
        assert server.requests == []

    def test_bulk(self, cli, server, bulk_payload, temp_directory, capsys):
        bulk_file = temp_directory / "bulk.json"
        bulk_file.write_text(json.dumps(bulk_payload))
        server.add("POST", "/bulk/create", body=wrapped(bulk_payload))

        assert cli.run("create", ["bulk", f"--bulk-file={bulk_file}"]) == 0

        assert server.requests[0].content == bulk_file.read_bytes()
        out = plain(capsys.readouterr().out)
        assert "bulk-vega" in out
        assert "3 calculations" in out

    def test_bulk_invalid_file(self, cli, server, temp_directory, capsys):
        """A file that is not a bulk is rejected locally."""
        bulk_file = temp_directory / "bulk.json"
        bulk_file.write_text('{"calculations": "nope"}')

        assert cli.run("create", ["bulk", f"--bulk-file={bulk_file}"]) == 1
        assert server.requests == []
        assert "Couldn't unmarshal" in plain(capsys.readouterr().err)

    def test_bulk_without_name(self, cli, server, bulk_payload, temp_directory, capsys):
        """The server names the bulk; the file does not have to."""
        bulk_file = temp_directory / "bulk.json"
        bulk_file.write_text(json.dumps({"calculations": {"calc-a": {"params": {"teff": 10000, "logG": 4.0}}}}))
        server.add("POST", "/bulk/create", body=wrapped(bulk_payload))

        assert cli.run("create", ["bulk", f"--bulk-file={bulk_file}"]) == 0

        assert server.requests[0].content == bulk_file.read_bytes()
        assert "bulk-vega" in plain(capsys.readouterr().out)

    def test_bulk_member_without_teff(self, cli, server, temp_directory):
        bulk_file = temp_directory / "bulk.json"
        bulk_file.write_text(json.dumps({"calculations": [{"logG": 4.0}]}))

        assert cli.run("create", ["bulk", f"--bulk-file={bulk_file}"]) == 1
        assert server.requests == []

    def test_bulk_missing_file(self, cli, server, temp_directory):
        assert cli.run("create", ["bulk", f"--bulk-file={temp_directory / 'nope.json'}"]) == 1
        assert server.requests == []

    def test_workerpool(self, cli, server, log_info):
        server.add("POST", "/workerpool/create", body=wrapped({"metadata": {"name": "workerpool-vega"}, "spec": {}}))

        assert cli.run("create", ["workerpool", "--name=vega"]) == 0

        assert server.requests[0].url.params["name"] == "vega"
        assert "Created workerpool workerpool-vega successfully" in log_info.text

    def test_workerpool_requires_name(self, cli, server):
        assert cli.run("create", ["workerpool"]) == 1
        assert server.requests == []


class TestDelete:
    """Test the delete command."""

    def test_bulk(self, cli, server, log_info):
        server.add("DELETE", "/bulks/delete/bulk-vega", body={"status_code": 200, "message": "deleted"})

        assert cli.run("delete", ["bulk", "bulk-vega"]) == 0
        assert "Deleted calculation bulk bulk-vega successfully" in log_info.text

    def test_workerpool(self, cli, server, log_info):
        server.add("DELETE", "/workerpools/delete/vega", body={"status_code": 200})

        assert cli.run("del", ["workerpool", "vega"]) == 0
        assert "Deleted workerpool vega successfully" in log_info.text

    def test_status_in_body_not_ok(self, cli, server, capsys):
        """A 200 whose body reports a failure still fails the command."""
        server.add("DELETE", "/bulks/delete/bulk-vega", body={"status_code": 409, "message": "bulk in use"})

        assert cli.run("delete", ["bulk", "bulk-vega"]) == 1
        assert "status_code=409" in plain(capsys.readouterr().err)

    def test_not_found(self, cli, server):
        server.add("DELETE", "/bulks/delete/nope", status=404, body={"message": "not found", "status_code": 404})

        assert cli.run("delete", ["bulk", "nope"]) == 1

    def test_requires_name(self, cli, server):
        assert cli.run("delete", ["workerpool"]) == 1
        assert server.requests == []


class TestHelpAndDispatch:
    """Test help output and command dispatch."""

    def test_general_help(self, cli, capsys):
        assert cli.run("help", []) == 0

        out = plain(capsys.readouterr().out)
        for name in ("login", "get", "create", "delete"):
            assert name in out
        assert "phase" in out

    def test_command_help(self, cli, capsys):
        assert cli.run("h", ["delete"]) == 0
        assert "delete <bulk NAME | workerpool NAME>" in plain(capsys.readouterr().out)

    def test_help_unknown_command(self, cli):
        assert cli.run("help", ["launch"]) == 1

    def test_unknown_command(self, cli, capsys):
        assert cli.run("launch", []) == 1
        assert "Unknown command: launch" in plain(capsys.readouterr().err)


class TestMain:
    """Test the process entry point."""

    @pytest.fixture(autouse=True)
    def clean_env(self, monkeypatch):
        for name in ("CCBOC_CONFIG", "CCBOC_VERIFY_TLS", "CCBOC_TIMEOUT", "CCBOC_LOG_LEVEL", "CCBOC_RESULTS_DIR"):
            monkeypatch.delenv(name, raising=False)

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main(["--version"])

        assert exc_info.value.code == 0
        assert "ccboc 0.1.0" in capsys.readouterr().out

    def test_login_with_config_flag(self, temp_directory):
        config_path = temp_directory / "ccboc.json"

        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(config_path), "login", "--url=https://api.example.org", "--token=abc"])

        assert exc_info.value.code == 0
        assert load_credential(config_path).token == "abc"

    def test_no_command_shows_help(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            main([])

        assert exc_info.value.code == 0
        assert "Available Commands" in plain(capsys.readouterr().out)

    def test_failure_exit_code(self, temp_directory):
        """A command that fails exits with status 1."""
        with pytest.raises(SystemExit) as exc_info:
            main(["--config", str(temp_directory / "missing"), "get", "calculations"])

        assert exc_info.value.code == 1

    def test_bad_environment(self, monkeypatch):
        monkeypatch.setenv("CCBOC_TIMEOUT", "later")

        with pytest.raises(SystemExit) as exc_info:
            main(["help"])

        assert exc_info.value.code == 1

    def test_debug_flag(self):
        with pytest.raises(SystemExit):
            main(["--debug", "help"])

        assert logging.getLogger("ccboc").level == logging.DEBUG
        setup_logging("INFO")
