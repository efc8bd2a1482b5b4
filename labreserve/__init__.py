"""Laboratory equipment reservation service."""

__all__: list[str] = []
