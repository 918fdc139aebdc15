"""Run the portal with uvicorn: python -m portal"""

import uvicorn

from portal.core.config import settings


def main() -> None:
    uvicorn.run("portal.main:app", host=settings.HOST, port=settings.PORT, reload=False)


if __name__ == "__main__":
    main()
