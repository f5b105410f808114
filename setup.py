import os.path

from setuptools import find_packages, setup

try:
    # Import all script providers so that ENTRYPOINTS gets populated.
    from credhub_setup.scripts import security_group  # noqa: F401
    from credhub_setup.scripts.utils import ENTRYPOINTS
except ImportError:
    # Avoid chicken-and-egg dependency requirements during initial installation.
    # This means you need to re-run setup in order to gain script entrypoints.
    ENTRYPOINTS = [
        "credhub-setup-security-group-apply=credhub_setup.scripts.security_group:apply",
        "credhub-setup-security-group-remove=credhub_setup.scripts.security_group:remove",
    ]


README = os.path.join(os.path.abspath(os.path.dirname(__file__)), "README.rst")


setup(name="credhub-setup",
      version="1.0.0",
      description="Cloud Controller security group setup for exposing CredHub to applications.",
      long_description=open(README).read(),
      long_description_content_type="text/x-rst",
      platforms=["Any"],
      python_requires=">=3.6",
      install_requires=["docopt", "requests"],
      packages=find_packages(exclude=["tests", "tests.*"]),
      test_suite="tests",
      entry_points={"console_scripts": ENTRYPOINTS})
