from __future__ import annotations

import logging
from typing import List, Optional, Type, Union

from fastapi import APIRouter, Depends, HTTPException, Path, Request, status
from fastapi.responses import HTMLResponse
from jinja2 import TemplateNotFound
from pydantic import BaseModel

from ..app import AppState
from ..components import ComponentError
from ..models.config import PreviewConfigResponse
from ..previews import ExampleNotFoundError, Preview, PreviewError, PreviewTemplateError
from .dependencies import previews_enabled

LOGGER = logging.getLogger(__name__)

router = APIRouter(tags=["previews"], dependencies=[Depends(previews_enabled)])
api_router = APIRouter(prefix="/api", tags=["previews"], dependencies=[Depends(previews_enabled)])


class PreviewInfo(BaseModel):
    name: str
    examples: List[str]
    layout: Union[str, bool, None] = None


class PreviewListResponse(BaseModel):
    previews: List[PreviewInfo]


class PreviewSourceResponse(BaseModel):
    preview: str
    example: str
    source: str


def _find_preview(name: str) -> Optional[Type[Preview]]:
    try:
        return Preview.find(name)
    except PreviewError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc


def _describe(state: AppState) -> List[PreviewInfo]:
    try:
        return [PreviewInfo(**item) for item in state.describe_previews()]
    except PreviewError as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc


@router.get("", response_class=HTMLResponse)
def preview_index(request: Request, state: AppState = Depends(previews_enabled)) -> HTMLResponse:
    return state.templates.TemplateResponse(
        request,
        "component_preview/index.html",
        {
            "previews": _describe(state),
            "route": state.route,
            "preview_paths": [str(path) for path in state.preview_config.preview_paths],
        },
    )


@router.get("/{path:path}", response_class=HTMLResponse)
def show_preview(
    request: Request,
    path: str,
    state: AppState = Depends(previews_enabled),
) -> HTMLResponse:
    path = path.strip("/")
    preview = _find_preview(path)
    if preview is not None:
        info = PreviewInfo(name=preview.preview_name(), examples=preview.examples(), layout=preview.layout_name())
        return state.templates.TemplateResponse(
            request,
            "component_preview/previews.html",
            {"preview": info, "route": state.route},
        )

    name, _, example = path.rpartition("/")
    preview = _find_preview(name) if name else None
    if preview is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Preview not found: {path}")

    try:
        rendered = state.renderer.render(preview, example, params=dict(request.query_params))
    except ExampleNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    except PreviewTemplateError as exc:
        LOGGER.warning("Missing template for %s/%s", name, example)
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    except TemplateNotFound as exc:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=f"Template not found: {exc.name}"
        ) from exc
    except (ComponentError, PreviewError) as exc:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc)) from exc
    return HTMLResponse(rendered.html)


@api_router.get("/previews", response_model=PreviewListResponse)
def list_previews(state: AppState = Depends(previews_enabled)) -> PreviewListResponse:
    return PreviewListResponse(previews=_describe(state))


@api_router.get("/previews/{name:path}/examples/{example}/source", response_model=PreviewSourceResponse)
def example_source(
    name: str,
    example: str = Path(..., description="Example method name"),
) -> PreviewSourceResponse:
    preview = _find_preview(name)
    if preview is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Preview not found: {name}")
    try:
        source = preview.preview_source(example)
    except ExampleNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc)) from exc
    return PreviewSourceResponse(preview=name, example=example, source=source)


@api_router.get("/config", response_model=PreviewConfigResponse)
def get_config(state: AppState = Depends(previews_enabled)) -> PreviewConfigResponse:
    return PreviewConfigResponse(config=state.preview_config)
