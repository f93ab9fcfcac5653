"""
FastAPIメインアプリケーション
"""
import logging
import sys
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from .config import get_settings
from .models.evaluation import InvalidRequestError
from .services.llm_client import EvaluationError
from . import routes

logger = logging.getLogger(__name__)

def configure_logging(level: str) -> None:
    """ルートロガーに標準出力ハンドラを設定する"""
    root_logger = logging.getLogger()
    root_logger.setLevel(level.upper())

    # 既存のハンドラをクリア
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
    root_logger.addHandler(console_handler)

def create_app() -> FastAPI:
    settings = get_settings()
    configure_logging("DEBUG" if settings.DEBUG else settings.LOG_LEVEL)

    app = FastAPI(title=settings.APP_NAME)

    # CORSミドルウェアの設定
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=settings.CORS_CREDENTIALS,
        allow_methods=settings.CORS_METHODS,
        allow_headers=settings.CORS_HEADERS,
    )

    # ルーターの登録
    app.include_router(routes.router, prefix="/api")

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        detail = "; ".join(
            f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
            for error in exc.errors()
        )
        logger.warning(f"Validation error: {detail}")
        return JSONResponse(
            status_code=422,
            content={"detail": detail, "type": "RequestValidationError"}
        )

    @app.exception_handler(InvalidRequestError)
    async def invalid_request_handler(request: Request, exc: InvalidRequestError):
        logger.warning(f"Invalid evaluation request: {str(exc)}")
        return JSONResponse(
            status_code=422,
            content={"detail": str(exc), "type": type(exc).__name__}
        )

    @app.exception_handler(EvaluationError)
    async def evaluation_error_handler(request: Request, exc: EvaluationError):
        logger.error(f"=== 評価エラー === {exc.error_type}: {exc.message} ({exc.details})")
        return JSONResponse(
            status_code=502,
            content={"detail": f"{exc.message}: {exc.details}", "type": exc.error_type}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """
        グローバル例外ハンドラー
        """
        logger.error(f"Global error handler caught: {str(exc)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": str(exc), "type": type(exc).__name__}
        )

    return app

app = create_app()

def run() -> None:  # pragma: no cover
    """開発用サーバーを起動する"""
    import uvicorn

    uvicorn.run("response_evaluator.main:app", host="0.0.0.0", port=8001)
