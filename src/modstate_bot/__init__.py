"""Discord bot that turns mod.io mod metadata into Insurgency: Sandstorm state.json files."""

__version__ = "0.1.0"

__all__ = ["__version__"]
