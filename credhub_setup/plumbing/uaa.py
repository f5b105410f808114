"""
UAA client-credentials authentication for Cloud Controller sessions.
"""

import logging
from typing import Optional, Union

from requests import Session as RequestsSession


LOG = logging.getLogger(__name__)


def get_token_endpoint(sess: RequestsSession, endpoint: str, timeout: Optional[float] = None,
                       verify: Union[bool, str] = True) -> str:
    """
    Discover the UAA server advertised by a Cloud Controller.
    """
    resp = sess.get("{}/v2/info".format(endpoint.rstrip("/")), timeout=timeout,
                    verify=verify)
    resp.raise_for_status()
    try:
        return resp.json()["token_endpoint"]
    except KeyError:
        raise ValueError("No token endpoint advertised by {}".format(endpoint))


def authenticate(sess: RequestsSession, token_endpoint: str, client: str, secret: str,
                 timeout: Optional[float] = None, verify: Union[bool, str] = True) -> None:
    """
    Request an access token for a UAA client, and attach it to all further requests made by the
    session.
    """
    resp = sess.post("{}/oauth/token".format(token_endpoint.rstrip("/")),
                     data={"grant_type": "client_credentials"}, auth=(client, secret),
                     headers={"Accept": "application/json"}, timeout=timeout, verify=verify)
    resp.raise_for_status()
    data = resp.json()
    token_type = data.get("token_type") or "bearer"
    sess.headers["Authorization"] = "{} {}".format(token_type.capitalize(), data["access_token"])
    LOG.debug("Authenticated as UAA client: %r", client)
