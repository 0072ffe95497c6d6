"""Command-line benchmark client for the lattice and zk services."""
