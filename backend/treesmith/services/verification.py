"""
Commit signature verification.

check_signature runs against the object store only; resolve_verification
then attributes a valid signature to the server signer or to the owner of
a registered GPG key, which needs the database.
"""
from dataclasses import dataclass

from dulwich.objects import Commit
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from treesmith.models import GPGKey, User
from treesmith.services.signing import ServerSigner

NOT_SIGNED = "gpg.error.not_signed_commit"
NO_KEYS_FOUND = "gpg.error.no_gpg_keys_found"
NO_VERIFIER = "gpg.error.extract_sign"


@dataclass(frozen=True)
class SignatureCheck:
    signed: bool
    valid: bool = False
    key_id: str | None = None
    reason: str = ""
    signature: str = ""
    payload: str = ""


def unsigned_payload(commit: Commit) -> bytes:
    """The bytes a commit signature covers: the commit without its gpgsig header."""
    unsigned = commit.copy()
    unsigned.gpgsig = None
    return unsigned.as_raw_string()


def check_signature(commit: Commit, verifier) -> SignatureCheck:
    if not commit.gpgsig:
        return SignatureCheck(signed=False, reason=NOT_SIGNED)

    payload = unsigned_payload(commit)
    signature = commit.gpgsig
    fields = {
        "signature": signature.decode("utf-8", errors="replace"),
        "payload": payload.decode("utf-8", errors="replace"),
    }
    if verifier is None:
        return SignatureCheck(signed=True, reason=NO_VERIFIER, **fields)

    status = verifier.verify(payload, signature)
    return SignatureCheck(
        signed=True,
        valid=status.valid,
        key_id=status.key_id,
        reason=status.reason,
        **fields,
    )


# Shortest key id form trusted for suffix matching (the 64-bit long id)
LONG_KEY_ID_LENGTH = 16


def key_ids_match(a: str, b: str) -> bool:
    """Long ids and fingerprints match on their common suffix; shorter ids never match."""
    a, b = a.upper(), b.upper()
    if min(len(a), len(b)) < LONG_KEY_ID_LENGTH:
        return False
    return a.endswith(b) or b.endswith(a)


async def resolve_verification(
    db: AsyncSession,
    check: SignatureCheck,
    server_signer: ServerSigner | None,
) -> dict:
    """Build the verification payload returned with commits."""
    result = {
        "verified": False,
        "reason": check.reason,
        "signature": check.signature,
        "signer": None,
        "payload": check.payload,
    }
    if not check.signed or not check.valid or not check.key_id:
        return result

    if server_signer is not None and key_ids_match(server_signer.key_id, check.key_id):
        identity = server_signer.identity
        result.update(
            verified=True,
            reason=f"{identity.name} / {check.key_id}",
            signer={"name": identity.name, "email": identity.email, "username": ""},
        )
        return result

    keys = await db.execute(
        select(GPGKey, User)
        .join(User, GPGKey.owner_id == User.id)
        .where(GPGKey.verified.is_(True))
    )
    for key, owner in keys.all():
        if key_ids_match(key.key_id, check.key_id):
            result.update(
                verified=True,
                reason=f"{owner.name} / {key.key_id}",
                signer={"name": owner.full_name or owner.name, "email": owner.email, "username": owner.name},
            )
            return result

    result["reason"] = NO_KEYS_FOUND
    return result
