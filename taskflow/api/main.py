from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskflow.api.routes.extraction import router as extraction_router
from taskflow.api.routes.tasks import router as tasks_router

app = FastAPI(
    title="Taskflow API",
    description="Natural-language and voice to structured task conversion",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:5173",
    ],
    allow_origin_regex=r"https://.*\.vercel\.app|http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(extraction_router)
app.include_router(tasks_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
