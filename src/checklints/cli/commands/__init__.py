"""Root commands (auto-discovered by the dispatcher)."""
