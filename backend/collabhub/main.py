import logging
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from datetime import datetime, timezone

from .core.errors import register_exception_handlers
from .core.settings import settings
from .routers import auth, projects, contents, versions
from .db.mongo import connect, close

logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="CollabHub API",
    version="0.1.0",
)

# Add security scheme to OpenAPI schema
app.openapi_schema = None

def custom_openapi():
    if app.openapi_schema:
        return app.openapi_schema
    from fastapi.openapi.utils import get_openapi
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description="Project collaboration API with role-based access and version approval",
        routes=app.routes,
    )
    openapi_schema.setdefault("components", {})["securitySchemes"] = {
        "bearerAuth": {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": "Access token from /auth/login (also sent as the accessToken cookie)"
        }
    }
    for path, path_item in openapi_schema["paths"].items():
        for method, operation in path_item.items():
            if method in ["post", "get", "put", "delete", "patch"]:
                # Skip endpoints that work without an access token
                if path in ("/auth/login", "/auth/register", "/auth/refresh-token", "/"):
                    continue
                if "security" not in operation:
                    operation["security"] = [{"bearerAuth": []}]

    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

app.include_router(auth.router)
app.include_router(projects.router)
app.include_router(contents.router)
app.include_router(versions.router)


@app.on_event("startup")
async def startup():
    await connect()

@app.on_event("shutdown")
async def shutdown():
    await close()

@app.get("/")
async def root():
    return {
        "message": "CollabHub API running",
        "timestamp": datetime.now(timezone.utc).isoformat()
    }
