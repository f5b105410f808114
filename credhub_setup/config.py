"""
Connection settings, read from the environment of the running job.

Required:

- `CF_API_URL`: base URL of the Cloud Controller API
- `CF_CLIENT_ID` and `CF_CLIENT_SECRET`: UAA client credentials with admin scopes

Optional:

- `CF_CA_CERT`: path to a CA bundle used to verify TLS certificates
- `CF_SKIP_SSL_VALIDATION`: set to `true` to disable certificate verification altogether
- `CF_REQUEST_TIMEOUT`: seconds to wait for each HTTP response (default 30)
"""

import os
from typing import Mapping, NamedTuple, Optional, Union

from requests import Session as RequestsSession

from .plumbing import uaa
from .plumbing.cc import CloudController


DEFAULT_TIMEOUT = 30.0

TRUTHY = ("1", "true", "yes", "on")


class Config(NamedTuple):
    api_url: str
    client_id: str
    client_secret: str
    verify: Union[bool, str] = True
    timeout: float = DEFAULT_TIMEOUT


def _require(env: Mapping[str, str], key: str) -> str:
    value = env.get(key)
    if not value:
        raise RuntimeError("Missing environment variable {}".format(key))
    return value


def load(env: Optional[Mapping[str, str]] = None) -> Config:
    """
    Build a `Config` from environment variables, raising `RuntimeError` if any are missing or
    invalid.
    """
    if env is None:
        env = os.environ
    verify: Union[bool, str] = True
    if env.get("CF_SKIP_SSL_VALIDATION", "").lower() in TRUTHY:
        verify = False
    elif env.get("CF_CA_CERT"):
        verify = env["CF_CA_CERT"]
    try:
        timeout = float(env.get("CF_REQUEST_TIMEOUT") or DEFAULT_TIMEOUT)
    except ValueError:
        raise RuntimeError("Invalid CF_REQUEST_TIMEOUT {!r}".format(env["CF_REQUEST_TIMEOUT"]))
    return Config(api_url=_require(env, "CF_API_URL"),
                  client_id=_require(env, "CF_CLIENT_ID"),
                  client_secret=_require(env, "CF_CLIENT_SECRET"),
                  verify=verify,
                  timeout=timeout)


def connect(config: Config, sess: Optional[RequestsSession] = None) -> CloudController:
    """
    Authenticate with UAA and return a client for the configured Cloud Controller.
    """
    sess = sess or RequestsSession()
    token_endpoint = uaa.get_token_endpoint(sess, config.api_url, config.timeout, config.verify)
    uaa.authenticate(sess, token_endpoint, config.client_id, config.client_secret, config.timeout,
                     config.verify)
    return CloudController(config.api_url, sess, config.timeout, config.verify)
