"""Start the translation API with uvicorn."""

import socket
import sys

from dotenv import load_dotenv

load_dotenv()

from llm_translate.api.config import settings


def is_port_in_use(port: int) -> bool:
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        return s.connect_ex(("localhost", port)) == 0


if __name__ == "__main__":
    if is_port_in_use(settings.api_port):
        print(f"Port {settings.api_port} is already in use; set API_PORT in .env")
        sys.exit(1)

    import uvicorn

    print("=" * 80)
    print(f"Starting server: http://{settings.api_host}:{settings.api_port}")
    print("=" * 80)

    uvicorn.run(
        "llm_translate.api.main:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )
