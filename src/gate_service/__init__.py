"""Quality Gate service -- HTTP API and command-line front ends."""
