import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from crud_template.core import config
from crud_template.migrations import ensure_user_schema
from crud_template.routes import user_routes

logging.basicConfig(
    level=config.LOG_LEVEL,
    format='%(asctime)s | %(levelname)s | %(name)s | %(message)s',
)
logger = logging.getLogger(__name__)

app = FastAPI(title='CRUD Template API')

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ALLOW_ORIGINS,
    allow_credentials=True,
    allow_methods=['*'],
    allow_headers=['*'],
)


def format_validation_errors(errors) -> str:
    messages = []
    for error in errors:
        location = '.'.join(str(part) for part in error.get('loc', ()) if part != 'body')
        messages.append(f"{location}: {error.get('msg')}" if location else str(error.get('msg')))
    return '; '.join(messages) or 'Invalid request.'


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={'message': exc.detail},
        headers=getattr(exc, 'headers', None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={'message': format_validation_errors(exc.errors())},
    )


@app.on_event('startup')
def initialize_database() -> None:
    config.validate_runtime_config()
    try:
        ensure_user_schema()
    except SQLAlchemyError:
        logger.exception('Database initialization failed. Check DATABASE_URL and database credentials.')


@app.get('/')
def root():
    return {'status': 'CRUD Template API Running'}


app.include_router(user_routes.router, prefix='/api')


if __name__ == '__main__':
    import uvicorn
    uvicorn.run('crud_template.main:app', host='0.0.0.0', port=8000, reload=True)
