import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from projecthub.config.security import SecurityConfig
from projecthub.errors import register_exception_handlers
from projecthub.routers import auth, user, project, task, comment
from projecthub.utils.security_logger import configure_security_logger

logging.basicConfig(
    level=SecurityConfig.MONITORING['log_level'],
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
configure_security_logger()

app = FastAPI(title="ProjectHub API")

app.add_middleware(
    CORSMiddleware,
    allow_origins=SecurityConfig.CORS['origins'],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# Route registration
app.include_router(auth.router, prefix="/auth", tags=["Authentication"])
app.include_router(user.router, prefix="/users", tags=["Users"])
app.include_router(project.router, prefix="/projects", tags=["Projects"])
app.include_router(task.router, tags=["Tasks"])
app.include_router(comment.router, tags=["Comments"])


@app.get("/")
def read_root():
    return {"message": "ProjectHub API"}


@app.get("/health")
def health():
    return {"status": "ok"}
