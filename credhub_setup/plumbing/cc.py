"""
Cloud Controller (v2 API) security group management.
"""

from enum import Enum
import logging
from typing import (Any, Collection, Dict, Iterator, List, Mapping, NamedTuple, NewType, Optional,
                    Union)
from urllib.parse import urljoin

from requests import HTTPError, Response, Session as RequestsSession

from .common import Result, State


LOG = logging.getLogger(__name__)

# GUID of an existing group, as returned by a lookup or creation.  Tasks pass this along instead of
# repeating the lookup.
SecurityGroup = NewType("SecurityGroup", str)


class Lifecycle(Enum):
    """
    Application phases that a security group can be bound to by default.
    """

    staging = "staging"
    running = "running"

    @property
    def path(self) -> str:
        return "/v2/config/{}_security_groups".format(self.value)


class Rule(NamedTuple):
    """
    Single egress rule of a security group.
    """

    destination: str
    ports: str
    protocol: str = "tcp"
    description: Optional[str] = None

    def to_json(self) -> Dict[str, str]:
        data = {"protocol": self.protocol, "destination": self.destination, "ports": self.ports}
        if self.description:
            data["description"] = self.description
        return data


class CloudControllerError(HTTPError):
    """
    Non-successful response returned by the Cloud Controller API.
    """

    def __init__(self, resp: Response):
        detail = None
        try:
            data = resp.json()
        except ValueError:
            pass
        else:
            if isinstance(data, dict):
                detail = data.get("description")
        msg = "{} {} returned {}".format(resp.request.method if resp.request else "?", resp.url,
                                         resp.status_code)
        if detail:
            msg = "{}: {}".format(msg, detail)
        super().__init__(msg, response=resp)


class CloudController:
    """
    Thin wrapper binding an API endpoint to an authenticated `requests` session.

    TLS verification is passed with each request, as `requests` lets `REQUESTS_CA_BUNDLE` and
    `CURL_CA_BUNDLE` take precedence over a session-level setting.
    """

    def __init__(self, endpoint: str, sess: Optional[RequestsSession] = None,
                 timeout: Optional[float] = None, verify: Union[bool, str] = True):
        self.endpoint = endpoint.rstrip("/")
        self.sess = sess or RequestsSession()
        self.timeout = timeout
        self.verify = verify

    def __repr__(self):
        return "<{}: {}>".format(self.__class__.__name__, self.endpoint)

    def url(self, path: str) -> str:
        return urljoin(self.endpoint + "/", path.lstrip("/"))

    def request(self, method: str, path: str, params: Optional[Mapping[str, str]] = None,
                json: Optional[Any] = None, allow: Collection[int] = ()) -> Response:
        """
        Make an API call, raising `CloudControllerError` on any unsuccessful status code other than
        those listed in `allow`.
        """
        LOG.debug("Request: %s %s %r", method, path, params or {})
        resp = self.sess.request(method, self.url(path), params=params, json=json,
                                 timeout=self.timeout, verify=self.verify)
        LOG.debug("Response: %s %s %d", method, path, resp.status_code)
        if not resp.ok and resp.status_code not in allow:
            raise CloudControllerError(resp)
        return resp


def _guid(data: Mapping[str, Any]) -> SecurityGroup:
    try:
        return SecurityGroup(data["metadata"]["guid"])
    except (KeyError, TypeError):
        raise ValueError("Missing resource GUID in {!r}".format(data))


def _body(name: str, rules: List[Rule]) -> Dict[str, Any]:
    return {"name": name, "rules": [rule.to_json() for rule in rules]}


def _pages(cc: CloudController, path: str,
           params: Mapping[str, str]) -> Iterator[Mapping[str, Any]]:
    # Follow `next_url` until exhausted; later pages carry their own query string.
    data = cc.request("GET", path, params).json()
    while True:
        yield from data.get("resources") or ()
        next_url = data.get("next_url")
        if not next_url:
            break
        data = cc.request("GET", next_url).json()


def get_security_group(cc: CloudController, name: str) -> SecurityGroup:
    """
    Look up the GUID of a security group by its exact name.
    """
    for resource in _pages(cc, "/v2/security_groups", {"q": "name:{}".format(name)}):
        if resource.get("entity", {}).get("name") == name:
            return _guid(resource)
    raise KeyError(name)


def create_security_group(cc: CloudController, name: str,
                          rules: List[Rule]) -> Result[SecurityGroup]:
    """
    Create a new security group with the given rules.
    """
    resp = cc.request("POST", "/v2/security_groups", json=_body(name, rules))
    group = _guid(resp.json())
    LOG.debug("Created security group: %r %r", name, group)
    return Result(State.created, group)


def update_security_group(cc: CloudController, group: SecurityGroup, name: str,
                          rules: List[Rule]) -> Result[SecurityGroup]:
    """
    Overwrite the name and rules of an existing security group.
    """
    cc.request("PUT", "/v2/security_groups/{}".format(group), json=_body(name, rules))
    LOG.debug("Updated security group: %r %r", name, group)
    return Result(State.success, group)


def bind_security_group(cc: CloudController, group: SecurityGroup,
                        lifecycle: Lifecycle) -> Result[None]:
    """
    Apply a security group to all applications in the given lifecycle phase.
    """
    cc.request("PUT", "{}/{}".format(lifecycle.path, group))
    LOG.debug("Bound security group: %r %s", group, lifecycle.name)
    return Result(State.success)


def delete_security_group(cc: CloudController, group: SecurityGroup) -> Result[None]:
    """
    Delete a security group, treating an already-missing group as deleted.
    """
    resp = cc.request("DELETE", "/v2/security_groups/{}".format(group), allow=(404,))
    if resp.status_code == 404:
        return Result(State.unchanged)
    LOG.debug("Deleted security group: %r", group)
    return Result(State.success)
