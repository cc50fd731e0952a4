from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from meeting_summary.api.routes.chat import router as chat_router
from meeting_summary.api.routes.summary import router as summary_router
from meeting_summary.api.routes.templates import router as templates_router
from meeting_summary.log import setup_logging

setup_logging()

app = FastAPI(
    title="Meeting Summary API",
    description="Adaptive LLM summarization of meeting transcripts into markdown reports",
    version="0.1.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:3000",
        "http://localhost:8501",
    ],
    allow_origin_regex=r"http://localhost:\d+",
    allow_credentials=False,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(summary_router)
app.include_router(templates_router)
app.include_router(chat_router)


@app.get("/health")
async def health() -> dict[str, str]:
    return {"status": "healthy"}
