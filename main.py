from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.encoders import jsonable_encoder
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from db.database import SessionLocal, create_tables
from Endpoints.Auth.normal_register import ensure_admin
from functions.settings import get_settings
from routes import auth, blog, invoices, orders, payments, products, search
from services.payment_gateway import PaymentGatewayError, build_payment_gateway

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    create_tables()
    if settings.admin_email and settings.admin_password:
        db = SessionLocal()
        try:
            ensure_admin(db, settings.admin_email, settings.admin_password)
        finally:
            db.close()
    else:
        logger.warning("ADMIN_EMAIL/ADMIN_PASSWORD not set; no admin account seeded")

    app.state.payment_gateway = build_payment_gateway(settings)
    logger.info("Catalog API started")
    yield


app = FastAPI(
    title="GL Catalog API",
    description="""
    Catalog backend for stationery, machinery and property listings with a
    natural-language smart search, a blog, orders, invoices and online payments.
    """,
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = [
        f"{'.'.join(str(part) for part in error['loc'] if part != 'body')}: {error['msg']}"
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"success": False, "message": "Validation failed", "errors": errors}),
    )


@app.exception_handler(PaymentGatewayError)
async def payment_gateway_exception_handler(request: Request, exc: PaymentGatewayError):
    logger.error(f"Payment gateway failure on {request.url.path}: {exc.message}")
    return JSONResponse(
        status_code=502,
        content={"success": False, "message": f"Payment gateway error: {exc.message}"},
    )


# Include routers; fixed search paths must be registered before /api/products/{product_id}
app.include_router(search.router)
app.include_router(products.router)
app.include_router(auth.router)
app.include_router(blog.router)
app.include_router(orders.router)
app.include_router(payments.router)
app.include_router(invoices.router)


@app.get("/health")
def health():
    return {"success": True, "status": "ok"}


@app.get("/", response_class=HTMLResponse)
async def read_root():
    html_content = """
<!DOCTYPE html>
<html lang="en">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>GL Catalog API</title>
    <link href="https://cdn.jsdelivr.net/npm/tailwindcss@2.2.19/dist/tailwind.min.css" rel="stylesheet">
</head>
<body class="bg-gray-900 text-gray-100">
    <div class="container mx-auto py-12 px-4 text-center">
        <h1 class="text-5xl font-bold mb-4">GL Catalog API</h1>
        <p class="text-xl text-gray-300 mb-8">Stationery, machinery and property listings with smart search</p>
        <a href="/docs" class="px-6 py-3 bg-blue-600 hover:bg-blue-700 text-white rounded-lg">Interactive Docs</a>
        <a href="/redoc" class="ml-4 px-6 py-3 bg-indigo-600 hover:bg-indigo-700 text-white rounded-lg">ReDoc</a>
    </div>
</body>
</html>
    """
    return HTMLResponse(content=html_content)
