"""Actor scheduling, script delays, GCL disassembly, stage loading and the rank screen."""

__version__ = "0.1.0"
__all__ = ["actors", "delay", "gcl", "fs", "loader", "rank_screen", "rank"]