"""Development server: ``python -m oauth_relay``."""

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "oauth_relay.api.app:app",
        host=os.getenv("HOST", "127.0.0.1"),
        port=int(os.getenv("PORT", "8787")),
        reload=os.getenv("RELOAD", "false").lower() == "true",
    )


if __name__ == "__main__":
    main()
