"""Collection engine: orchestration, permissions, exit codes and utilities."""
