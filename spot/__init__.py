"""Response models, on-disk response cache and song batch loading for a music player."""

__version__ = "0.1.0"

__all__ = [
    "api",
    "api_models",
    "batch_loader",
    "cache",
    "cache_keys",
    "conversions",
    "labels",
]