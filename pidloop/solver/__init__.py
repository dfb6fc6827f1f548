from .loop import run_closed_loop, LoopResult  # noqa: F401

__all__ = ["run_closed_loop", "LoopResult"]
