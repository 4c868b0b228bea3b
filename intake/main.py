from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from intake.api.routes import router as api_router
from intake.config import CORS_ALLOW_ORIGINS
from starlette.responses import Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

app = FastAPI(
    title="Clinical Intake NLP",
    version="0.1.0",
    description="Rule-based chief-complaint parsing (symptom + duration) for intake forms.",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)



@app.get("/health")
def health():
    return {"status": "ok"}


@app.get("/metrics")
def metrics():
    data = generate_latest()  # default registry
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
app.include_router(api_router, prefix="/api")
