from .reporter import Reporter, RunSummary

__all__ = ["Reporter", "RunSummary"]
