from vaultpreview.runtime.runner import main, print_config, run_server

__all__ = [
    "main",
    "print_config",
    "run_server",
]
