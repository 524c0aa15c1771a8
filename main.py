import logging
import mimetypes
import os
from contextlib import asynccontextmanager
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Optional

from bson import ObjectId
from fastapi import Body, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from pymongo.database import Database
from pymongo.errors import PyMongoError
from starlette.exceptions import HTTPException as StarletteHTTPException

from database import LessonStore, OrderStore, connect
from errors import ApiError, NotFoundError, StoreError
from logger import setup_logging
from validators import parse_lesson_id, validate_lesson_patch, validate_order

logger = logging.getLogger("lesson_api")

DEFAULT_IMAGES_DIR = Path(__file__).resolve().parent / "public" / "images"


# ----- Utilities -----

def serialize(doc: dict) -> dict:
    """Make a Mongo document JSON-safe; _id stays _id since lessons carry their own id."""
    if not doc:
        return doc
    d = doc.copy()
    for k, v in list(d.items()):
        if isinstance(v, ObjectId):
            d[k] = str(v)
        elif isinstance(v, datetime):
            d[k] = v.isoformat()
    return d


def resolve_image(images_dir: Path, file_name: str) -> Optional[Path]:
    if not file_name or file_name in (".", "..") or "\x00" in file_name:
        return None
    if "/" in file_name or "\\" in file_name:
        return None
    path = images_dir / file_name
    if not path.is_file():
        return None
    return path


# ----- Dependencies -----

def get_lesson_store(request: Request) -> LessonStore:
    return request.app.state.lessons


def get_order_store(request: Request) -> OrderStore:
    return request.app.state.orders


def create_app(database: Optional[Database] = None, images_dir: Optional[Path] = None) -> FastAPI:
    setup_logging()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if app.state.database is None:
            # any failure here aborts startup; never serve against a missing store
            try:
                db = connect()
            except Exception:
                logger.exception("Failed to connect to MongoDB")
                raise
            attach(db)
            logger.info("Connected to MongoDB, DB: %s", db.name)
            try:
                yield
            finally:
                db.client.close()
                logger.info("MongoDB connection closed")
        else:
            yield

    app = FastAPI(title="Lesson Booking API", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.database = None
    app.state.images_dir = Path(images_dir or os.getenv("IMAGES_DIR") or DEFAULT_IMAGES_DIR)

    def attach(db: Database) -> None:
        app.state.database = db
        app.state.lessons = LessonStore(db)
        app.state.orders = OrderStore(db)

    if database is not None:
        attach(database)

    # ----- Middleware -----

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        logger.info("%s %s", request.method, request.url.path + (f"?{request.url.query}" if request.url.query else ""))
        body = await request.body()
        if body:
            logger.info("  Body: %s", body.decode("utf-8", errors="replace"))
        return await call_next(request)

    # ----- Error handlers -----

    @app.exception_handler(ApiError)
    async def api_error_handler(request: Request, exc: ApiError):
        return JSONResponse(status_code=exc.status_code, content={"error": exc.message})

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code in (404, 405):
            return JSONResponse(status_code=404, content={"error": "Route not found"})
        return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})

    @app.exception_handler(RequestValidationError)
    async def request_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=400, content={"error": "Invalid request body"})

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.error("Unhandled server error", exc_info=exc)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})

    # ----- Health -----

    @app.get("/test")
    def test_database():
        db = app.state.database
        response = {
            "backend": "✅ Running",
            "database": "❌ Not Available" if db is None else "✅ Connected",
        }
        if db is not None:
            try:
                response["collections"] = db.list_collection_names()
            except PyMongoError as e:
                response["database"] = f"⚠️ Connected but Error: {str(e)[:80]}"
        return response

    # ----- Images -----

    @app.get("/images/{file_name}")
    def get_image(file_name: str):
        path = resolve_image(app.state.images_dir, file_name)
        if path is None:
            raise NotFoundError("Image not found")
        media_type, _ = mimetypes.guess_type(path.name)
        return FileResponse(path, media_type=media_type or "application/octet-stream")

    # ----- Lessons -----

    @app.get("/lessons")
    def list_lessons(lessons: LessonStore = Depends(get_lesson_store)):
        try:
            docs = lessons.list_all()
        except PyMongoError:
            logger.exception("Error in GET /lessons")
            raise StoreError("Failed to fetch lessons")
        return [serialize(d) for d in docs]

    @app.get("/search")
    def search_lessons(q: str = "", lessons: LessonStore = Depends(get_lesson_store)):
        try:
            docs = lessons.search(q)
        except PyMongoError:
            logger.exception("Error in GET /search")
            raise StoreError("Search failed")
        return [serialize(d) for d in docs]

    @app.put("/lessons/{lesson_id}")
    def update_lesson(
        lesson_id: str,
        patch: Dict[str, Any] = Body(...),
        lessons: LessonStore = Depends(get_lesson_store),
    ):
        lid = parse_lesson_id(lesson_id)
        fields = validate_lesson_patch(patch)
        try:
            matched = lessons.update_by_id(lid, fields)
        except PyMongoError:
            logger.exception("Error in PUT /lessons/%s", lesson_id)
            raise StoreError("Failed to update lesson")
        if not matched:
            raise NotFoundError("Lesson not found")
        return {"message": "Lesson updated"}

    # ----- Orders -----

    def create_order(
        payload: Dict[str, Any] = Body(...),
        orders: OrderStore = Depends(get_order_store),
    ):
        doc = validate_order(payload)
        try:
            order_id = orders.insert(doc)
        except PyMongoError:
            logger.exception("Error in POST /orders")
            raise StoreError("Failed to save order")
        return JSONResponse(status_code=201, content={"message": "Order saved", "orderId": order_id})

    app.post("/orders")(create_order)
    app.post("/order")(create_order)

    @app.get("/orders")
    def list_orders(orders: OrderStore = Depends(get_order_store)):
        try:
            docs = orders.list_all()
        except PyMongoError:
            logger.exception("Error in GET /orders")
            raise StoreError("Failed to fetch orders")
        return [serialize(d) for d in docs]

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)
