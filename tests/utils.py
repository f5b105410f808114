"""
Helpers for exercising API plumbing without a live Cloud Controller.

`FakeCloudController` is a `requests` session that serves a small in-memory model of the v2
security group endpoints, and records every call made against it.  Like the real API, its name
filter matches on substrings, so lookups must still pick out exact matches themselves.
"""

from itertools import count
import json
from typing import Any, Dict, List, Optional, Set, Tuple
from urllib.parse import parse_qsl, urlencode, urlsplit

from requests import Response, Session as RequestsSession

from credhub_setup.plumbing.cc import CloudController


ENDPOINT = "https://api.example.com"


def make_response(status: int, data: Any = None, url: Optional[str] = None) -> Response:
    """
    Build a real `Response` object, optionally with a JSON body.
    """
    resp = Response()
    resp.status_code = status
    resp.url = url
    if data is None:
        resp._content = b""
    else:
        resp._content = json.dumps(data).encode("utf-8")
        resp.headers["Content-Type"] = "application/json"
    resp.encoding = "utf-8"
    return resp


def _resource(guid: str, entity: Dict[str, Any]) -> Dict[str, Any]:
    return {"metadata": {"guid": guid, "url": "/v2/security_groups/{}".format(guid)},
            "entity": entity}


class FakeCloudController(RequestsSession):

    def __init__(self, page_size: int = 50):
        super().__init__()
        self.page_size = page_size
        self.groups: Dict[str, Dict[str, Any]] = {}
        self.bound: Dict[str, Set[str]] = {"staging": set(), "running": set()}
        self.calls: List[Tuple[str, str]] = []
        self.failures: Dict[Tuple[str, str], int] = {}
        self.errors: Dict[Tuple[str, str], Exception] = {}
        self._ids = count(1)

    def add(self, name: str, rules: Optional[List[Dict[str, str]]] = None) -> str:
        guid = "guid-{}".format(next(self._ids))
        self.groups[guid] = {"name": name, "rules": list(rules or ())}
        return guid

    def fail(self, method: str, path: str, status: int = 500) -> None:
        self.failures[(method, path)] = status

    def raise_on(self, method: str, path: str, exc: Exception) -> None:
        self.errors[(method, path)] = exc

    def client(self) -> CloudController:
        return CloudController(ENDPOINT, self, timeout=5)

    def request(self, method, url, params=None, json=None, **kwargs):
        parts = urlsplit(url)
        path = parts.path
        query = dict(parse_qsl(parts.query))
        query.update(params or {})
        self.calls.append((method, path))
        if (method, path) in self.errors:
            raise self.errors[(method, path)]
        if (method, path) in self.failures:
            return make_response(self.failures[(method, path)],
                                 {"code": 10001, "description": "Injected failure"}, url)
        segments = path.strip("/").split("/")
        if segments[:2] == ["v2", "security_groups"]:
            if len(segments) == 2:
                if method == "GET":
                    return self._list(query, url)
                elif method == "POST":
                    guid = self.add(json["name"], json.get("rules"))
                    return make_response(201, _resource(guid, self.groups[guid]), url)
            elif len(segments) == 3:
                guid = segments[2]
                if guid not in self.groups:
                    return make_response(404, {"code": 10010,
                                               "description": "The security group could not be "
                                                              "found: {}".format(guid)}, url)
                if method == "PUT":
                    self.groups[guid] = {"name": json["name"], "rules": list(json.get("rules"))}
                    return make_response(201, _resource(guid, self.groups[guid]), url)
                elif method == "DELETE":
                    del self.groups[guid]
                    for guids in self.bound.values():
                        guids.discard(guid)
                    return make_response(204, None, url)
        elif segments[:2] == ["v2", "config"] and len(segments) == 4 and method == "PUT":
            lifecycle = segments[2].replace("_security_groups", "")
            guid = segments[3]
            if lifecycle in self.bound and guid in self.groups:
                self.bound[lifecycle].add(guid)
                return make_response(200, _resource(guid, self.groups[guid]), url)
        return make_response(404, {"code": 10000, "description": "Unknown request"}, url)

    def _list(self, query: Dict[str, str], url: str) -> Response:
        matches = sorted(self.groups.items())
        if "q" in query:
            _, term = query["q"].split(":", 1)
            matches = [(guid, entity) for guid, entity in matches if term in entity["name"]]
        page = int(query.get("page", 1))
        start = (page - 1) * self.page_size
        chunk = matches[start:start + self.page_size]
        next_url = None
        if start + self.page_size < len(matches):
            next_query = dict(query, page=str(page + 1))
            next_url = "/v2/security_groups?{}".format(urlencode(next_query))
        return make_response(200, {"total_results": len(matches),
                                   "next_url": next_url,
                                   "resources": [_resource(guid, entity)
                                                 for guid, entity in chunk]}, url)

    def calls_to(self, method: str, path: Optional[str] = None) -> int:
        return sum(1 for call in self.calls
                   if call[0] == method and (path is None or call[1] == path))
