"""Run the API with uvicorn: ``python -m teachme``"""
import uvicorn

from teachme.config import settings

if __name__ == "__main__":
    uvicorn.run("teachme.main:app", host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
