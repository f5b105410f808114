"""
Scripts to manage the security group exposing CredHub to applications.
"""

from typing import Optional

from ..plumbing.cc import CloudController
from ..tasks import security_group
from .utils import entrypoint


@entrypoint
def apply(client: CloudController, name: str, address: str, ports: str,
          description: Optional[str]):
    """
    Create or update a security group allowing TCP access to an address, and bind it to both
    staging and running applications.

    Usage: {script} NAME ADDRESS PORTS [--description=TEXT]

    PORTS may be a single port, a comma-separated list, or a range (e.g. `8443,8844` or
    `8000-8999`).
    """
    return security_group.apply(client, name, address, ports,
                                description or security_group.DEFAULT_DESCRIPTION)


@entrypoint
def remove(client: CloudController, name: str):
    """
    Delete a security group, if it exists.

    Usage: {script} NAME
    """
    return security_group.remove(client, name)
