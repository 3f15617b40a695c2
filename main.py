from typing import Dict

from app.config import get_settings
from fastapi import FastAPI
from recalls.routes import router as recalls_router


settings = get_settings()


app = FastAPI(title="openFDA Food Recall Search")
app.include_router(recalls_router)


@app.get("/health")
def health() -> Dict[str, str]:
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host=settings.host, port=settings.port, reload=True)
