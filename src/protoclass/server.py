"""
FastAPI surface for protoclass.
"""

from __future__ import annotations

from typing import Dict, List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from .config import ConverterConfig, load_config
from .errors import ProtoclassError
from .migration import convert_source
from .syntax import is_valid_source
from .version import __version__


class ConvertRequest(BaseModel):
    source: str
    path: Optional[str] = None
    example: bool = False


class ConvertSummary(BaseModel):
    classes_converted: List[str] = []
    superclasses: Dict[str, str] = {}
    methods_moved: int = 0
    static_methods_moved: int = 0
    properties_reattached: int = 0
    statements_removed: int = 0
    changed: bool = False


class ConvertResponse(BaseModel):
    source: str
    changes_summary: ConvertSummary


class ValidateRequest(BaseModel):
    source: str


class ValidateResponse(BaseModel):
    valid: bool


def create_app(config: ConverterConfig | None = None) -> FastAPI:
    """Create the FastAPI app."""

    config = config or load_config()
    is_class_name = config.class_name_predicate()
    app = FastAPI(title="protoclass", version=__version__)

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "ok", "version": __version__}

    @app.post("/api/convert", response_model=ConvertResponse)
    def api_convert(payload: ConvertRequest) -> ConvertResponse:
        try:
            result = convert_source(
                payload.source,
                path=payload.path,
                is_example=payload.example or (payload.path is not None and config.is_example(payload.path)),
                is_class_name=is_class_name,
            )
        except ProtoclassError as exc:
            raise HTTPException(status_code=400, detail=exc.to_diagnostic().to_dict()) from exc
        return ConvertResponse(source=result.source, changes_summary=ConvertSummary(**result.summary()))

    @app.post("/api/validate", response_model=ValidateResponse)
    def api_validate(payload: ValidateRequest) -> ValidateResponse:
        return ValidateResponse(valid=is_valid_source(payload.source))

    return app
