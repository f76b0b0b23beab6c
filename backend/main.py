"""
Local entry point: `python main.py` from the backend directory.
"""

from oneclick.core.config import SERVER_HOST, SERVER_PORT
from oneclick.main import app

if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=SERVER_HOST, port=SERVER_PORT)
