"""
CLI Unit Tests
Tests for distributor_cli (main, config and commands)

Exit codes:
    0 success, 1 runtime error, 2 verification failed
"""
import json

import pytest

from distributor.io import load_distribution
from distributor_cli.config import CLIConfig, load_config
from distributor_cli.main import (
    EXIT_RUNTIME_ERROR,
    EXIT_SUCCESS,
    EXIT_VERIFICATION_FAILED,
    create_parser,
    main,
)

from fixtures.common import (
    SCENARIO_TOTAL,
    make_pubkey,
    make_records,
    tamper_artifact,
    write_entitlements_json,
)


@pytest.fixture
def input_path(tmp_path):
    return write_entitlements_json(tmp_path / "airdrop.json", make_records())


class TestParser:
    """Tests for argument parsing."""

    def test_no_command_is_error(self, capsys):
        assert main([]) == EXIT_RUNTIME_ERROR

    def test_generate_args(self):
        args = create_parser().parse_args(["generate", "in.json", "--out", "o.json", "--policy", "reject", "--workers", "4"])
        assert args.input == "in.json"
        assert args.out == "o.json"
        assert args.policy == "reject"
        assert args.workers == 4

    def test_invalid_policy_rejected(self):
        with pytest.raises(SystemExit):
            create_parser().parse_args(["generate", "in.json", "--policy", "average"])


class TestGenerate:
    """Tests for the generate command."""

    def test_writes_artifact(self, tmp_path, input_path, capsys):
        out = tmp_path / "distributor-info.json"

        code = main(["generate", str(input_path), "--out", str(out), "--json"])

        assert code == EXIT_SUCCESS
        descriptor = load_distribution(out)
        assert descriptor.token_total == SCENARIO_TOTAL
        summary = json.loads(capsys.readouterr().out)
        assert summary["merkle_root"] == descriptor.hex_root
        assert summary["num_claims"] == 3

    def test_stdout_when_no_out(self, input_path, capsys):
        code = main(["generate", str(input_path)])

        assert code == EXIT_SUCCESS
        data = json.loads(capsys.readouterr().out)
        assert data["tokenTotal"] == str(SCENARIO_TOTAL)

    def test_sum_is_default_for_lists(self, tmp_path, capsys):
        path = write_entitlements_json(tmp_path / "dup.json", make_records((5, 3), seeds=(1, 1)))
        out = tmp_path / "out.json"

        assert main(["generate", str(path), "--out", str(out)]) == EXIT_SUCCESS
        assert load_distribution(out).claim_for(make_pubkey(1)).amount == 8

    def test_reject_policy(self, tmp_path, capsys):
        path = write_entitlements_json(tmp_path / "dup.json", make_records((5, 3), seeds=(1, 1)))

        code = main(["generate", str(path), "--policy", "reject", "--json"])

        assert code == EXIT_RUNTIME_ERROR
        assert json.loads(capsys.readouterr().out)["code"] == "DUPLICATE_RECIPIENT"

    def test_config_policy_used(self, tmp_path, capsys):
        path = write_entitlements_json(tmp_path / "dup.json", make_records((5, 3), seeds=(1, 1)))
        (tmp_path / "distributor.json").write_text(json.dumps({"duplicate_policy": "reject"}))

        assert main(["generate", str(path)]) == EXIT_RUNTIME_ERROR

    def test_missing_input(self, tmp_path, capsys):
        code = main(["generate", str(tmp_path / "absent.json")])

        assert code == EXIT_RUNTIME_ERROR
        assert "not found" in capsys.readouterr().err

    def test_deterministic_output(self, tmp_path, input_path, capsys):
        a, b = tmp_path / "a.json", tmp_path / "b.json"
        main(["generate", str(input_path), "--out", str(a)])
        main(["generate", str(input_path), "--out", str(b), "--workers", "4"])

        assert a.read_text() == b.read_text()


class TestVerify:
    """Tests for the verify command."""

    def test_valid_artifact(self, artifact_path, capsys):
        code = main(["verify", str(artifact_path), "--json"])

        assert code == EXIT_SUCCESS
        summary = json.loads(capsys.readouterr().out)
        assert summary["ok"] is True
        assert summary["num_claims"] == 3

    def test_tampered_artifact(self, artifact_path, capsys):
        def bump(data):
            data["claims"][str(make_pubkey(1))]["amount"] = "999"

        tamper_artifact(artifact_path, bump)

        code = main(["verify", str(artifact_path), "--json", "--debug"])

        assert code == EXIT_VERIFICATION_FAILED
        summary = json.loads(capsys.readouterr().out)
        assert summary["ok"] is False
        failed = {c["check_id"] for c in summary["checks"] if not c["ok"]}
        assert "claim_proofs" in failed

    def test_single_recipient(self, artifact_path, capsys):
        code = main(["verify", str(artifact_path), "--recipient", str(make_pubkey(2))])

        assert code == EXIT_SUCCESS
        assert "ok: true" in capsys.readouterr().out

    def test_unknown_recipient(self, artifact_path, capsys):
        code = main(["verify", str(artifact_path), "--recipient", str(make_pubkey(9))])
        assert code == EXIT_VERIFICATION_FAILED

    def test_malformed_recipient(self, artifact_path, capsys):
        code = main(["verify", str(artifact_path), "--recipient", "0OIl"])
        assert code == EXIT_VERIFICATION_FAILED

    def test_missing_artifact(self, tmp_path, capsys):
        assert main(["verify", str(tmp_path / "absent.json")]) == EXIT_RUNTIME_ERROR


class TestProof:
    """Tests for the proof command."""

    def test_prints_claim(self, artifact_path, descriptor, capsys):
        recipient = str(make_pubkey(3))

        code = main(["proof", str(artifact_path), recipient, "--json"])

        assert code == EXIT_SUCCESS
        payload = json.loads(capsys.readouterr().out)
        claim = descriptor.claims[recipient]
        assert payload["index"] == claim.index
        assert payload["amount"] == "3000000"
        assert payload["proof"] == [node.hex() for node in claim.proof]
        assert payload["merkleRoot"] == descriptor.hex_root

    def test_unknown_recipient(self, artifact_path, capsys):
        assert main(["proof", str(artifact_path), str(make_pubkey(9))]) == EXIT_RUNTIME_ERROR


class TestConfig:
    """Tests for configuration loading and the config command."""

    def test_defaults(self):
        config = load_config()
        assert config == CLIConfig()

    def test_file_then_env(self, tmp_path, monkeypatch):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"proof_workers": 3, "indent": 4}))
        monkeypatch.setenv("MERKLE_DISTRIBUTOR_INDENT", "0")

        config = load_config(path)

        assert config.proof_workers == 3
        assert config.indent == 0

    def test_bad_policy_rejected(self, monkeypatch, capsys):
        monkeypatch.setenv("MERKLE_DISTRIBUTOR_DUPLICATE_POLICY", "average")
        assert main(["config", "--show"]) == EXIT_RUNTIME_ERROR

    def test_init_and_show(self, tmp_path, capsys):
        assert main(["config", "--init"]) == EXIT_SUCCESS
        assert (tmp_path / "distributor.json").exists()
        assert main(["config", "--init"]) == EXIT_RUNTIME_ERROR

        capsys.readouterr()
        assert main(["config", "--show"]) == EXIT_SUCCESS
        shown = json.loads(capsys.readouterr().out)
        assert shown["duplicate_policy"] == "sum"
