from __future__ import annotations

from pathlib import Path
from unittest.mock import MagicMock, patch

from bulkupload.api.client import ApiClient
from bulkupload.cli import main as cli_main
from bulkupload.errors import TransportError
from bulkupload.models.upload_state import UploadState

"""Exit code contract: 0 ok, 1 fatal, 2 partial server failure, 3 validation failed, 4 declined."""

GOOD_CSV = "fullName,phone,state,lga\nJane Doe,08012345678,Lagos,Lagos Island\n"


def _client(submit_result=None, submit_error=None) -> MagicMock:
    client = MagicMock(spec=ApiClient)
    if submit_error is not None:
        client.submit_batch.side_effect = submit_error
    else:
        client.submit_batch.return_value = submit_result
    return client


def test_exit_code_fatal_without_config(temp_workdir: Path, write_csv, capsys):
    path = write_csv("customers.csv", GOOD_CSV)
    code = cli_main(["validate", "customers", str(path)])
    assert code == 1
    assert "ERROR config:" in capsys.readouterr().out


def test_exit_code_validate_ok(write_config, write_csv):
    path = write_csv("customers.csv", GOOD_CSV)
    assert cli_main(["validate", "customers", str(path)]) == 0


def test_exit_code_validation_failed(write_config, write_csv):
    path = write_csv("customers.csv", "fullName,phone\n,08012345678\n")
    assert cli_main(["validate", "customers", str(path)]) == 3


def test_exit_code_parse_failure(write_config, write_csv):
    path = write_csv("customers.csv", "fullName,phone\n")
    assert cli_main(["validate", "customers", str(path)]) == 1


def test_exit_code_all_success(write_config, write_csv):
    path = write_csv("customers.csv", GOOD_CSV)
    client = _client({"successCount": 1, "failedCount": 0, "errors": []})
    with patch("bulkupload.cli.__main__._build_client", return_value=client):
        assert cli_main(["submit", "customers", str(path), "--yes"]) == 0


def test_exit_code_partial_failure(write_config, write_csv):
    path = write_csv("customers.csv", GOOD_CSV)
    client = _client({"successCount": 0, "failedCount": 1, "errors": [{"row": 2, "error": "dup"}]})
    with patch("bulkupload.cli.__main__._build_client", return_value=client):
        assert cli_main(["submit", "customers", str(path), "--yes"]) == 2


def test_exit_code_transport_failure(write_config, write_csv):
    path = write_csv("customers.csv", GOOD_CSV)
    client = _client(submit_error=TransportError("Network error"))
    with patch("bulkupload.cli.__main__._build_client", return_value=client):
        assert cli_main(["submit", "customers", str(path), "--yes"]) == 1


def test_exit_code_declined(write_config, write_csv, monkeypatch):
    path = write_csv("customers.csv", GOOD_CSV)
    client = _client()
    monkeypatch.setattr("builtins.input", lambda _prompt: "n")
    with patch("bulkupload.cli.__main__._build_client", return_value=client):
        assert cli_main(["submit", "customers", str(path)]) == 4
    client.submit_batch.assert_not_called()


def test_exit_code_streets_without_ward(write_config, write_csv):
    path = write_csv("streets.csv", "name\nMain Street\n")
    assert cli_main(["submit", "streets", str(path), "--yes"]) == 1


def test_exit_code_fatal_when_submit_leaves_no_result(write_config, write_csv, capsys):
    path = write_csv("customers.csv", GOOD_CSV)
    client = _client()
    with patch("bulkupload.cli.__main__._build_client", return_value=client), \
         patch(
             "bulkupload.cli.__main__.UploadController.confirm",
             return_value=UploadState.SUBMIT_SUCCEEDED,
         ):
        assert cli_main(["submit", "customers", str(path), "--yes"]) == 1
    assert "ERROR submit: no result recorded" in capsys.readouterr().out
