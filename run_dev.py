"""
Local development launcher for FastAPI.
Equivalent to: `uvicorn contentforge.main:app --host 0.0.0.0 --port $PORT`
"""

import uvicorn

from contentforge.config import get_settings

if __name__ == "__main__":
    uvicorn.run(
        "contentforge.main:app",
        host="0.0.0.0",
        port=get_settings().port,
    )
