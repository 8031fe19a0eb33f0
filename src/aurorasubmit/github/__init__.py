from aurorasubmit.github.client import GitHubClient
from aurorasubmit.github.oauth import TokenStore, build_authorize_url, exchange_code

__all__ = ["GitHubClient", "TokenStore", "build_authorize_url", "exchange_code"]
