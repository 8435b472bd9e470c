from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from farmledger.api.v1.api import api_router
from farmledger.core.config import settings
from farmledger.db.mongo import close_mongo_connection, connect_to_mongo

app = FastAPI(
    title=settings.PROJECT_NAME,
    version=settings.PROJECT_VERSION,
    description=settings.DESCRIPTION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.add_event_handler("startup", connect_to_mongo)
app.add_event_handler("shutdown", close_mongo_connection)


@app.get("/")
async def root():
    return {"message": "Welcome to Farm Ledger API"}


app.include_router(api_router, prefix=settings.API_V1_STR)
