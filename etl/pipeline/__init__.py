from .runner import run_import

__all__ = ["run_import"]
