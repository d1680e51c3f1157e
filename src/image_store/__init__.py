"""S3 image storage adapter with resized derivatives and local fallback."""

__version__ = "1.0.0"
__description__ = (
    "S3 image storage with multi-size derivatives, served through AWS Lambda"
)

__all__ = ["images", "infrastructure", "models", "repositories", "themes", "utils"]
