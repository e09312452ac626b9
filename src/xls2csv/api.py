"""FastAPI application for workbook-to-CSV conversion."""

import uuid
from datetime import UTC, datetime
from typing import Annotated, Any

from fastapi import (
    FastAPI,
    File,
    Form,
    HTTPException,
    Request,
    UploadFile,
    status,
)
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from xls2csv import __version__
from xls2csv.config import settings, validate_settings_on_startup
from xls2csv.models import (
    ConversionResponse,
    ErrorDetail,
    HealthResponse,
    SheetResult,
    SheetSelection,
)
from xls2csv.services.workbook_dispatcher import ConversionResult, convert_document
from xls2csv.utils.exceptions import (
    ConfigurationError,
    ErrorCode,
    FileTooLargeError,
    Xls2CsvError,
)
from xls2csv.utils.logging import (
    clear_context,
    configure_logging,
    get_logger,
    get_request_id,
    set_request_id,
)

# Configure structured logging using settings
configure_logging(
    level=settings.log_level_int,
    use_structured_formatter=True,
)
logger = get_logger(__name__)


def build_response(result: ConversionResult) -> ConversionResponse:
    """Map a ConversionResult onto the API response model."""
    return ConversionResponse(
        filename=result.filename,
        source_format=result.source_format,
        sheet_count=len(result.outcomes),
        failed_count=len(result.failed),
        sheets=[SheetResult(**outcome.to_dict()) for outcome in result.outcomes],
    )


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    app = FastAPI(
        title="xls2csv API",
        description="Convert spreadsheet workbooks into one CSV document per sheet.",
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    validate_settings_on_startup(settings)

    @app.middleware("http")
    async def request_id_middleware(request: Request, call_next: Any) -> Any:
        """Assign a request ID, expose it to logging and echo it back."""
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        set_request_id(request_id)
        request.state.request_id = request_id

        try:
            response = await call_next(request)
            response.headers["X-Request-ID"] = request_id
            return response
        finally:
            clear_context()

    @app.exception_handler(Xls2CsvError)
    async def xls2csv_exception_handler(
        request: Request, exc: Xls2CsvError
    ) -> JSONResponse:
        """Return structured error responses for application errors."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.error(
            f"Conversion error: {exc.message}",
            error_code=exc.error_code.value,
            http_status=exc.get_http_status(),
        )
        return JSONResponse(
            status_code=exc.get_http_status(),
            content=ErrorDetail(
                detail=exc.message,
                error_code=exc.error_code.value,
                details=exc.details if exc.details else None,
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(
        request: Request, exc: HTTPException
    ) -> JSONResponse:
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.warning(f"HTTP Error: {exc.detail}", status_code=exc.status_code)
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorDetail(
                detail=str(exc.detail),
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.exception_handler(Exception)
    async def general_exception_handler(
        request: Request, exc: Exception
    ) -> JSONResponse:
        """Catch-all handler; hides internals unless debug is enabled."""
        request_id = getattr(request.state, "request_id", get_request_id())
        logger.exception(
            f"Unexpected error: {type(exc).__name__}",
            error_type=type(exc).__name__,
        )
        if settings.debug:
            detail = f"Internal server error: {type(exc).__name__}: {exc}"
        else:
            detail = "Internal server error. Please try again later."

        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content=ErrorDetail(
                detail=detail,
                error_code=ErrorCode.INTERNAL_ERROR.value,
                request_id=request_id,
            ).model_dump(exclude_none=True),
        )

    @app.get("/health", response_model=HealthResponse, tags=["Health"])
    async def health_check() -> dict[str, Any]:
        """Check the health status of the service."""
        logger.debug("Health check requested")
        return {
            "status": "healthy",
            "timestamp": datetime.now(UTC).isoformat(),
            "version": __version__,
        }

    @app.post(
        "/convert",
        response_model=ConversionResponse,
        tags=["Conversion"],
        responses={
            400: {"model": ErrorDetail, "description": "Invalid options or sheet"},
            413: {"model": ErrorDetail, "description": "File too large"},
            415: {"model": ErrorDetail, "description": "Not a workbook"},
            422: {"model": ErrorDetail, "description": "Workbook cannot be decoded"},
        },
    )
    async def convert_workbook(
        file: Annotated[UploadFile, File(description="Workbook to convert")],
        sheet_selection: Annotated[SheetSelection | None, Form()] = None,
        target_sheet_index: Annotated[int | None, Form()] = None,
        row_offset: Annotated[int | None, Form()] = None,
        column_offset: Annotated[int | None, Form()] = None,
        separator: Annotated[str | None, Form()] = None,
    ) -> ConversionResponse:
        """Convert an uploaded workbook and return one CSV document per sheet.

        Options not supplied fall back to the configured defaults. A sheet
        whose output cannot be written is reported with status "failure"
        while the other sheets are still returned.

        Raises:
            ConfigurationError: 400 if an option is invalid.
            SheetIndexOutOfRangeError: 400 if the target sheet does not exist.
            FileTooLargeError: 413 if the upload exceeds the size limit.
            UnsupportedFormatError: 415 if the upload is not a workbook.
            WorkbookDecodeError: 422 if the workbook cannot be parsed.
        """
        if not file.filename:
            raise ConfigurationError(
                message="A workbook file must be provided", field="file"
            )

        request = settings.default_request(
            sheet_selection=sheet_selection,
            target_sheet_index=target_sheet_index,
            row_offset=row_offset,
            column_offset=column_offset,
            separator=separator,
        )

        content = await file.read()
        if len(content) > settings.max_file_size_bytes:
            logger.warning(
                "File too large",
                file_size=len(content),
                max_size=settings.max_file_size_bytes,
            )
            raise FileTooLargeError(
                file_size=len(content),
                max_size=settings.max_file_size_bytes,
                file_path=file.filename,
            )

        logger.info("Workbook received", filename=file.filename, file_size=len(content))
        result = await run_in_threadpool(
            convert_document, content, file.filename, request
        )
        return build_response(result)

    return app


app = create_app()
