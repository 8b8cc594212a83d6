from pydantic import BaseModel
from functools import lru_cache
from pathlib import Path
import os


# Storage directory for bare repos
GIT_REPOS_DIR = Path(__file__).parent.parent / "git_repos"


class Settings(BaseModel):
    app_name: str = "treesmith"
    database_url: str = "sqlite+aiosqlite:///./treesmith.db"
    repos_dir: Path = GIT_REPOS_DIR
    log_level: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000
    # Server signing key; empty or "none" disables signing
    signing_key: str | None = None
    signing_name: str = "treesmith"
    signing_email: str = "noreply@treesmith.local"
    signing_rules: list[str] = ["always"]  # never, always, pubkey, parentsigned
    default_trust_model: str = "collaborator"
    gpg_program: str = "gpg"
    account_cache_size: int = 256
    trees_per_page: int = 1000


def _split_list(value: str | None, default: list[str]) -> list[str]:
    if not value:
        return default
    return [item.strip() for item in value.split(",") if item.strip()]


@lru_cache
def get_settings() -> Settings:
    defaults = Settings()
    return Settings(
        database_url=os.getenv("TREESMITH_DATABASE_URL", defaults.database_url),
        repos_dir=Path(os.getenv("TREESMITH_REPOS_DIR", str(defaults.repos_dir))),
        log_level=os.getenv("TREESMITH_LOG_LEVEL", defaults.log_level),
        host=os.getenv("TREESMITH_HOST", defaults.host),
        port=int(os.getenv("TREESMITH_PORT", defaults.port)),
        signing_key=os.getenv("TREESMITH_SIGNING_KEY"),
        signing_name=os.getenv("TREESMITH_SIGNING_NAME", defaults.signing_name),
        signing_email=os.getenv("TREESMITH_SIGNING_EMAIL", defaults.signing_email),
        signing_rules=_split_list(os.getenv("TREESMITH_SIGNING_RULES"), defaults.signing_rules),
        default_trust_model=os.getenv("TREESMITH_DEFAULT_TRUST_MODEL", defaults.default_trust_model),
        gpg_program=os.getenv("TREESMITH_GPG_PROGRAM", defaults.gpg_program),
        account_cache_size=int(os.getenv("TREESMITH_ACCOUNT_CACHE_SIZE", defaults.account_cache_size)),
        trees_per_page=int(os.getenv("TREESMITH_TREES_PER_PAGE", defaults.trees_per_page)),
    )
