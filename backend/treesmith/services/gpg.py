"""
GPG signing and signature checking for commit payloads.

Both helpers shell out to the gpg program the same way git itself does
(detached, armored signatures; machine-readable status lines).
"""
import logging
import os
import subprocess
import tempfile
from dataclasses import dataclass

from treesmith.services.errors import SigningError

logger = logging.getLogger(__name__)

GPG_TIMEOUT = 30


@dataclass(frozen=True)
class SignatureStatus:
    valid: bool
    key_id: str | None = None
    reason: str = ""


def _run_gpg(program: str, args: list[str], payload: bytes) -> subprocess.CompletedProcess:
    """Run gpg with payload on stdin; output stays as bytes."""
    return subprocess.run(
        [program, "--batch", *args],
        input=payload,
        capture_output=True,
        timeout=GPG_TIMEOUT,
        check=False,
    )


def parse_status_lines(output: bytes) -> SignatureStatus:
    """Interpret the [GNUPG:] status lines printed by gpg --verify."""
    key_id = None
    for raw_line in output.splitlines():
        line = raw_line.decode("utf-8", errors="replace")
        if not line.startswith("[GNUPG:] "):
            continue
        parts = line.split()
        keyword = parts[1] if len(parts) > 1 else ""
        if keyword == "GOODSIG" and len(parts) > 2:
            key_id = parts[2]
        elif keyword == "BADSIG":
            return SignatureStatus(valid=False, key_id=parts[2] if len(parts) > 2 else None,
                                   reason="gpg.error.invalid_signature")
        elif keyword in ("ERRSIG", "NO_PUBKEY"):
            return SignatureStatus(valid=False, key_id=parts[2] if len(parts) > 2 else None,
                                   reason="gpg.error.no_gpg_keys_found")
    if key_id is None:
        return SignatureStatus(valid=False, reason="gpg.error.invalid_signature")
    return SignatureStatus(valid=True, key_id=key_id)


class GPGSigner:
    """Produces detached armored signatures with a given key."""

    def __init__(self, program: str = "gpg"):
        self.program = program

    def sign(self, payload: bytes, key_id: str) -> bytes:
        try:
            result = _run_gpg(self.program, ["--status-fd=2", "-bsau", key_id], payload)
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.error(f"Unable to run {self.program} to sign with key {key_id}: {e}")
            raise SigningError(f"gpg failed to sign the data: {e}") from e

        if result.returncode != 0 or b"[GNUPG:] SIG_CREATED" not in result.stderr:
            stderr = result.stderr.decode("utf-8", errors="replace").strip()
            logger.error(f"gpg failed to sign with key {key_id}: {stderr}")
            raise SigningError(f"gpg failed to sign the data: {stderr}")
        return result.stdout


class GPGVerifier:
    """Checks detached signatures against the local keyring."""

    def __init__(self, program: str = "gpg"):
        self.program = program

    def verify(self, payload: bytes, signature: bytes) -> SignatureStatus:
        # gpg wants the detached signature in a file and the data on stdin
        fd, sig_path = tempfile.mkstemp(suffix=".sig")
        try:
            with os.fdopen(fd, "wb") as sig_file:
                sig_file.write(signature)
            result = _run_gpg(
                self.program,
                ["--status-fd=1", "--keyid-format=long", "--verify", sig_path, "-"],
                payload,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            logger.warning(f"Unable to run {self.program} to verify signature: {e}")
            return SignatureStatus(valid=False, reason="gpg.error.extract_sign")
        finally:
            if os.path.exists(sig_path):
                os.unlink(sig_path)
        return parse_status_lines(result.stdout)
