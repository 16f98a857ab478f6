"""
Wrapper script for running the relay server.

Listens on HOST:PORT from the relay settings.
"""

if __name__ == "__main__":
    import uvicorn

    from relay.settings import app_settings

    uvicorn.run(
        "relay:application",
        factory=True,
        host=app_settings.HOST,
        port=app_settings.PORT,
    )
