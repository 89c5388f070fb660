"""Entry-point adapters: CLIs and user interfaces."""
