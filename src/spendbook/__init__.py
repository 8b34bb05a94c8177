"""Personal finance tracking with cashback normalization and people summaries."""

__version__ = "0.1.0"


# The CLI pulls in click and the record stores; load it only on demand
def __getattr__(name):
    if name == "main":
        from spendbook.cli.main import main
        return main
    raise AttributeError(f"module '{__name__}' has no attribute '{name}'")
