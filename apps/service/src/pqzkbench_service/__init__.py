"""Flask applications for the lattice and zk benchmark services."""

from .lattice import create_lattice_app
from .zk import create_zk_app

__all__ = ["create_lattice_app", "create_zk_app"]
