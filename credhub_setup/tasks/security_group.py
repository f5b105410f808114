"""
Security groups granting applications network access to internal services.
"""

from typing import Optional

from ..plumbing import cc
from ..plumbing.cc import CloudController, Lifecycle, Rule, SecurityGroup
from ..plumbing.common import Collect, Result


DEFAULT_DESCRIPTION = "Allow access to CredHub"


@Result.collect
def apply(client: CloudController, name: str, address: str, ports: str,
          description: Optional[str] = DEFAULT_DESCRIPTION) -> Collect[SecurityGroup]:
    """
    Create or update a security group allowing TCP access to the given address and ports, and bind
    it to both staging and running applications.
    """
    rules = [Rule(destination=address, ports=ports, description=description)]
    try:
        group = cc.get_security_group(client, name)
    except KeyError:
        res_create = yield from cc.create_security_group(client, name, rules)
        group = res_create.value
    else:
        yield cc.update_security_group(client, group, name, rules)
    for lifecycle in Lifecycle:
        yield cc.bind_security_group(client, group, lifecycle)
    return group


@Result.collect
def remove(client: CloudController, name: str) -> Collect[None]:
    """
    Delete a security group by name, if it exists.
    """
    try:
        group = cc.get_security_group(client, name)
    except KeyError:
        return
    yield cc.delete_security_group(client, group)
