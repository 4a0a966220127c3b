import uvicorn
from mindleaf_backend.settings import settings

if __name__ == "__main__":

    reload = settings.DEBUG_MODE != "production"

    uvicorn.run("mindleaf_backend.server:app", host="0.0.0.0", port=8000, log_level="debug" if reload else "info", reload=reload, workers=1)
