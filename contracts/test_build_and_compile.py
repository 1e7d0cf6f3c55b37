import json

import pytest
import requests

from build_contract import build, sha256_hex

def test_artifacts_written(tmp_path):
    manifest = build(tmp_path)
    approval = tmp_path / "approval.teal"
    clear = tmp_path / "clear.teal"
    assert approval.exists(), f"Missing {approval}"
    assert clear.exists(), f"Missing {clear}"
    j = json.loads((tmp_path / "contract.manifest.json").read_text())
    assert j == manifest
    assert j["teal_version"] == 8
    assert j["artifacts"]["approval"]["sha256"] == sha256_hex(approval.read_text())
    assert j["artifacts"]["clear"]["sha256"] == sha256_hex(clear.read_text())

@pytest.mark.localnet
def test_algod_compile_endpoint_localnet(network, tmp_path):
    build(tmp_path)
    approval = (tmp_path / "approval.teal").read_text()

    headers = {"Content-Type": "text/plain", "X-Algo-API-Token": network.algod_token}

    r = requests.post(
        f"{network.algod_address}/v2/teal/compile",
        data=approval,
        headers=headers,
        timeout=15,
    )
    assert r.status_code == 200, f"compile failed: {r.status_code} {r.text}"
    assert "result" in r.json()
