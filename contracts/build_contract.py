# contracts/build_contract.py
import json, hashlib
from pathlib import Path
from pyteal import compileTeal, Mode
from odd_even_contract import approval_program, clear_state_program

TEAL_VERSION = 8
ARTIFACTS = Path(__file__).resolve().parent.parent / "artifacts"

def sha256_hex(s: str) -> str:
    return hashlib.sha256(s.encode("utf-8")).hexdigest()

def compile_programs() -> tuple[str, str]:
    approval_teal = compileTeal(approval_program(), mode=Mode.Application, version=TEAL_VERSION)
    clear_teal = compileTeal(clear_state_program(), mode=Mode.Application, version=TEAL_VERSION)
    return approval_teal, clear_teal

def build(out_dir: Path = ARTIFACTS) -> dict:
    out_dir.mkdir(parents=True, exist_ok=True)
    approval_teal, clear_teal = compile_programs()

    (out_dir / "approval.teal").write_text(approval_teal, encoding="utf-8")
    (out_dir / "clear.teal").write_text(clear_teal, encoding="utf-8")

    manifest = {
        "contract": "Odd/Even Game",
        "teal_version": TEAL_VERSION,
        "artifacts": {
            "approval": {"file": "approval.teal", "sha256": sha256_hex(approval_teal)},
            "clear": {"file": "clear.teal", "sha256": sha256_hex(clear_teal)},
        },
    }
    (out_dir / "contract.manifest.json").write_text(json.dumps(manifest, indent=2), encoding="utf-8")
    return manifest

def main():
    build()
    print("Wrote artifacts to", ARTIFACTS)

if __name__ == "__main__":
    main()
