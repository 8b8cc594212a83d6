"""
Signing policy for commits created through the API.

Two small closed sets drive the decision:
- SigningRule: configured list deciding *whether* the server signs
- TrustModel: per-repo setting deciding *who* the committer of a signed commit is
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable

from treesmith.services.identity import Identity

logger = logging.getLogger(__name__)


class SigningRule(str, Enum):
    NEVER = "never"
    ALWAYS = "always"
    PUBKEY = "pubkey"
    PARENT_SIGNED = "parentsigned"


class TrustModel(str, Enum):
    DEFAULT = "default"
    COLLABORATOR = "collaborator"
    COMMITTER = "committer"
    COLLABORATOR_COMMITTER = "collaboratorcommitter"


def _keep_committer(committer: Identity, signer: Identity) -> Identity:
    return committer


def _signer_commits(committer: Identity, signer: Identity) -> Identity:
    return signer


# Committer of a signed commit under each trust model
SIGNED_COMMITTER: dict[TrustModel, Callable[[Identity, Identity], Identity]] = {
    TrustModel.COLLABORATOR: _keep_committer,
    TrustModel.COMMITTER: _signer_commits,
    TrustModel.COLLABORATOR_COMMITTER: _signer_commits,
}


def resolve_trust_model(value: str | None, default: str = TrustModel.COLLABORATOR.value) -> TrustModel:
    """Map a repo's trust model field to a concrete model ('default' defers to config)."""
    model = TrustModel(value or TrustModel.DEFAULT.value)
    if model is TrustModel.DEFAULT:
        model = TrustModel(default)
    if model is TrustModel.DEFAULT:
        model = TrustModel.COLLABORATOR
    return model


def parse_signing_rules(values: list[str]) -> list[SigningRule]:
    """
    Parse configured rule names.

    'never' anywhere wins outright; unknown names are skipped; an empty
    result means never sign.
    """
    rules = []
    for value in values:
        try:
            rule = SigningRule(value.strip().lower())
        except ValueError:
            logger.warning(f"Ignoring unknown signing rule {value!r}")
            continue
        if rule is SigningRule.NEVER:
            return [SigningRule.NEVER]
        rules.append(rule)
    return rules or [SigningRule.NEVER]


@dataclass(frozen=True)
class ServerSigner:
    key_id: str
    identity: Identity


@dataclass(frozen=True)
class SigningDecision:
    sign: bool
    key_id: str | None = None
    signer: Identity | None = None
    reason: str = ""


def server_signer_from_settings(settings) -> ServerSigner | None:
    key = (settings.signing_key or "").strip()
    if not key or key.lower() == "none":
        return None
    return ServerSigner(
        key_id=key,
        identity=Identity(name=settings.signing_name, email=settings.signing_email),
    )


def evaluate_signing(
    rules: list[SigningRule],
    server_signer: ServerSigner | None,
    author: Identity,
    parents: list[str],
    parent_is_signed: Callable[[str], bool],
) -> SigningDecision:
    """Decide whether a commit by author on top of parents gets the server signature."""
    if server_signer is None:
        return SigningDecision(sign=False, reason="no_key")

    for rule in rules:
        if rule is SigningRule.NEVER:
            return SigningDecision(sign=False, reason=rule.value)
        if rule is SigningRule.ALWAYS:
            break
        if rule is SigningRule.PUBKEY:
            if author.account is None or not author.account.gpg_key_ids:
                return SigningDecision(sign=False, reason=rule.value)
        elif rule is SigningRule.PARENT_SIGNED:
            if not parents or not all(parent_is_signed(p) for p in parents):
                return SigningDecision(sign=False, reason=rule.value)

    return SigningDecision(
        sign=True,
        key_id=server_signer.key_id,
        signer=server_signer.identity,
    )


@dataclass(frozen=True)
class SigningPolicy:
    """Everything commit_tree needs to evaluate signing for one repository."""
    rules: list[SigningRule]
    server_signer: ServerSigner | None
    trust_model: TrustModel = TrustModel.COLLABORATOR

    def signed_committer(self, committer: Identity, signer: Identity) -> Identity:
        return SIGNED_COMMITTER[self.trust_model](committer, signer)

    @classmethod
    def from_settings(cls, settings, repo_trust_model: str | None = None) -> "SigningPolicy":
        return cls(
            rules=parse_signing_rules(settings.signing_rules),
            server_signer=server_signer_from_settings(settings),
            trust_model=resolve_trust_model(repo_trust_model, settings.default_trust_model),
        )
