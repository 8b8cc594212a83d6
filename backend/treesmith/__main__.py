"""
Run the API server: python -m treesmith
"""
import uvicorn

from treesmith.config import get_settings


def main():
    settings = get_settings()
    uvicorn.run(
        "treesmith.main:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
