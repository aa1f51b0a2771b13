# crm/main.py
from typing import Optional
import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from crm.api.v1.activities import router as activities_router
from crm.api.v1.auth import router as auth_router
from crm.api.v1.communications import router as communications_router
from crm.api.v1.notes import router as notes_router
from crm.api.v1.students import router as students_router
from crm.config import settings
from crm.services.activities import ActivitiesService
from crm.services.auth import AuthService
from crm.services.communications import CommunicationsService
from crm.services.data_store import DataStore
from crm.services.latency import Latency
from crm.services.notes import NotesService
from crm.services.session_store import JsonFileKeyValueStore, KeyValueStore
from crm.services.students import StudentsService

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


def create_app(
    store: Optional[DataStore] = None,
    session_store: Optional[KeyValueStore] = None,
    latency: Optional[Latency] = None,
    auth_latency: Optional[Latency] = None,
) -> FastAPI:
    """
    组装应用：数据层、服务在这里创建一次，挂到 app.state 上供路由使用
    测试时传入新的 DataStore 和 0 延迟
    """
    app = FastAPI(
        title=settings.APP_NAME,
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    if store is None:
        store = DataStore.with_mock_data(
            seed=settings.MOCK_SEED,
            student_count=settings.MOCK_STUDENT_COUNT,
        )
    if latency is None:
        latency = Latency.from_ms(settings.MOCK_LATENCY_MS)
    if auth_latency is None:
        auth_latency = Latency.from_ms(settings.AUTH_LATENCY_MS)
    if session_store is None:
        session_store = JsonFileKeyValueStore(settings.SESSION_FILE)

    app.state.store = store
    app.state.students_service = StudentsService(store, latency)
    app.state.communications_service = CommunicationsService(store, latency)
    app.state.notes_service = NotesService(store, latency)
    app.state.activities_service = ActivitiesService(store, latency)
    app.state.auth_service = AuthService(
        session_store,
        admin_email=settings.ADMIN_EMAIL,
        admin_password=settings.ADMIN_PASSWORD,
        admin_name=settings.ADMIN_NAME,
        latency=auth_latency,
    )

    @app.get("/health")
    def health_check():
        return {"status": "ok"}

    # 注册路由
    app.include_router(auth_router)
    app.include_router(students_router)
    app.include_router(communications_router)
    app.include_router(notes_router)
    app.include_router(activities_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
