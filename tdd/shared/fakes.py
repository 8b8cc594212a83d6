"""
Fake signing infrastructure.

Stand-ins for GPGSigner / GPGVerifier so tests never need a gpg binary or a
keyring. A FakeVerifier only accepts signatures its FakeSigner produced over
the exact same payload.
"""
import hashlib
import sys
from dataclasses import dataclass, field
from pathlib import Path

# Add backend to path for imports
backend_path = Path(__file__).parent.parent.parent / "backend"
sys.path.insert(0, str(backend_path))

from treesmith.services.errors import SigningError
from treesmith.services.gpg import SignatureStatus

# Key id the test settings configure as the server signing key
SERVER_KEY_ID = "0123456789ABCDEF"


@dataclass
class FakeSigner:
    """Records every sign() call and returns a deterministic armored blob."""
    fail: bool = False
    calls: list[tuple[bytes, str]] = field(default_factory=list)
    signed: dict[bytes, tuple[bytes, str]] = field(default_factory=dict)

    def sign(self, payload: bytes, key_id: str) -> bytes:
        self.calls.append((payload, key_id))
        if self.fail:
            raise SigningError("gpg failed to sign the data: fake failure")
        digest = hashlib.sha1(payload + key_id.encode()).hexdigest()
        signature = (
            "-----BEGIN PGP SIGNATURE-----\n"
            "\n"
            f"{key_id}:{digest}\n"
            "-----END PGP SIGNATURE-----\n"
        ).encode()
        self.signed[signature] = (payload, key_id)
        return signature


@dataclass
class FakeVerifier:
    """Verifies signatures made by the paired FakeSigner."""
    signer: FakeSigner
    calls: int = 0

    def verify(self, payload: bytes, signature: bytes) -> SignatureStatus:
        self.calls += 1
        known = self.signer.signed.get(signature)
        if known is None:
            return SignatureStatus(valid=False, reason="gpg.error.no_gpg_keys_found")
        signed_payload, key_id = known
        if signed_payload != payload:
            return SignatureStatus(valid=False, key_id=key_id, reason="gpg.error.invalid_signature")
        return SignatureStatus(valid=True, key_id=key_id)
