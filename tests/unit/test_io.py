"""
Distribution IO Unit Tests
Tests for distributor/io.py

Tests:
- Entitlement inputs: JSON list, JSON object, CSV
- Duplicate JSON keys are rejected
- Artifact save/load round trip and malformed artifacts
"""
import json

import pytest

from distributor.io import (
    dump_distribution,
    load_distribution,
    load_entitlements,
    save_distribution,
)
from distributor.schemas.errors import DistributionIOException, DuplicateRecipientException

from fixtures.common import make_pubkey, make_records, tamper_artifact, write_entitlements_json


class TestLoadEntitlements:
    """Tests for entitlement input formats."""

    def test_json_list(self, tmp_path):
        records = make_records()
        path = write_entitlements_json(tmp_path / "airdrop.json", records)

        source = load_entitlements(path)

        assert not source.map_style
        assert source.records == [(address, str(amount)) for address, amount in records]
        assert len(source) == 3

    def test_json_list_authority_amount_keys(self, tmp_path):
        address = str(make_pubkey(1))
        path = tmp_path / "airdrop.json"
        path.write_text(json.dumps([{"authority": address, "amount": 10}]))

        assert load_entitlements(path).records == [(address, 10)]

    def test_json_object_is_map_style(self, tmp_path):
        address = str(make_pubkey(1))
        path = tmp_path / "airdrop.json"
        path.write_text(json.dumps({address: "100"}))

        source = load_entitlements(path)

        assert source.map_style
        assert source.records == [(address, "100")]

    def test_json_object_duplicate_keys_rejected(self, tmp_path):
        address = str(make_pubkey(1))
        path = tmp_path / "airdrop.json"
        path.write_text('{"%s": "1", "%s": "2"}' % (address, address))

        with pytest.raises(DuplicateRecipientException):
            load_entitlements(path)

    def test_csv(self, tmp_path):
        a, b = str(make_pubkey(1)), str(make_pubkey(2))
        path = tmp_path / "airdrop.csv"
        path.write_text(f"address,earnings\n{a},100\n{b},200\n\n")

        source = load_entitlements(path)

        assert source.records == [(a, "100"), (b, "200")]
        assert not source.map_style

    def test_csv_amount_column(self, tmp_path):
        a = str(make_pubkey(1))
        path = tmp_path / "airdrop.csv"
        path.write_text(f"address,amount\n{a},5\n")

        assert load_entitlements(path).records == [(a, "5")]

    def test_csv_extra_columns_rejected(self, tmp_path):
        path = tmp_path / "airdrop.csv"
        path.write_text("address,earnings\n,,7\n")

        with pytest.raises(DistributionIOException, match="more fields than the header"):
            load_entitlements(path)

    def test_csv_blank_trailing_cells_ignored(self, tmp_path):
        a = str(make_pubkey(1))
        path = tmp_path / "airdrop.csv"
        path.write_text(f"address,earnings\n{a},5,\n,,\n")

        assert load_entitlements(path).records == [(a, "5")]

    def test_missing_fields(self, tmp_path):
        path = tmp_path / "airdrop.json"
        path.write_text(json.dumps([{"wallet": "x", "tokens": 1}]))

        with pytest.raises(DistributionIOException, match="no recognised"):
            load_entitlements(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(DistributionIOException, match="not found"):
            load_entitlements(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "airdrop.json"
        path.write_text("{not json")

        with pytest.raises(DistributionIOException, match="Invalid JSON"):
            load_entitlements(path)

    def test_scalar_json(self, tmp_path):
        path = tmp_path / "airdrop.json"
        path.write_text("42")

        with pytest.raises(DistributionIOException):
            load_entitlements(path)


class TestArtifactIO:
    """Tests for saving and loading the distribution artifact."""

    def test_round_trip(self, tmp_path, descriptor):
        path = save_distribution(descriptor, tmp_path / "out" / "distributor-info.json")

        assert path.exists()
        assert load_distribution(path) == descriptor

    def test_file_content_deterministic(self, tmp_path, descriptor):
        first = save_distribution(descriptor, tmp_path / "a.json").read_text()
        second = save_distribution(descriptor, tmp_path / "b.json").read_text()

        assert first == second == dump_distribution(descriptor)

    def test_no_temp_files_left(self, tmp_path, descriptor):
        save_distribution(descriptor, tmp_path / "distributor-info.json")
        assert [p.name for p in tmp_path.iterdir()] == ["distributor-info.json"]

    def test_load_missing(self, tmp_path):
        with pytest.raises(DistributionIOException):
            load_distribution(tmp_path / "missing.json")

    def test_load_schema_mismatch(self, artifact_path):
        tamper_artifact(artifact_path, lambda data: data.pop("merkleRoot"))

        with pytest.raises(DistributionIOException, match="does not match schema"):
            load_distribution(artifact_path)

    def test_load_bad_root_length(self, artifact_path):
        def shorten(data):
            data["merkleRoot"] = data["merkleRoot"][:10]

        tamper_artifact(artifact_path, shorten)

        with pytest.raises(DistributionIOException):
            load_distribution(artifact_path)

    def test_load_float_amount_rejected(self, artifact_path):
        def floatify(data):
            for claim in data["claims"].values():
                claim["amount"] = 1.0

        tamper_artifact(artifact_path, floatify)

        with pytest.raises(DistributionIOException):
            load_distribution(artifact_path)

    def test_load_not_an_object(self, tmp_path):
        path = tmp_path / "distributor-info.json"
        path.write_text("[]")

        with pytest.raises(DistributionIOException, match="JSON object"):
            load_distribution(path)
