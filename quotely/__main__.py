"""
Run the Quotely API with uvicorn: ``python -m quotely``.
"""

from __future__ import annotations

import os

import uvicorn


def main() -> None:
    uvicorn.run(
        "quotely.app:app",
        host=os.environ.get("HOST", "0.0.0.0"),
        port=int(os.environ.get("PORT", "3000")),
    )


if __name__ == "__main__":
    main()
