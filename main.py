"""
Entry point for deployment.
Imports the FastAPI app from the semdiff package.
"""

from semdiff.main import app

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
