from __future__ import annotations


class TileSystemError(ValueError):
    pass


class InvalidQuadKeyError(TileSystemError):
    pass


class InvalidLevelOfDetailError(TileSystemError):
    pass
