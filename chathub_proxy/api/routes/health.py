"""Liveness probe."""


async def health() -> dict:
    """GET /"""
    return {"message": "Hello world!"}
