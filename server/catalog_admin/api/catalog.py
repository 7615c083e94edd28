"""Product admin screen endpoints: list, search, paginate, edit and delete."""
from __future__ import annotations

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, Query, Request, UploadFile, status
from pydantic import ValidationError

from catalog_admin.schemas.catalog import (
    CatalogStateResponse,
    ImageUrlRequest,
    NotificationResponse,
    PaginationResponse,
    SearchRequest,
)
from catalog_admin.schemas.product import ProductDraft, ProductDraftUpdate, ProductRecord
from catalog_admin.services.catalog_screen import CatalogScreen
from catalog_admin.services.query_controller import Idle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/catalog", tags=["catalog"])


def get_catalog(request: Request) -> CatalogScreen:
    """Dependency returning the screen created at application startup."""
    screen = getattr(request.app.state, "catalog", None)
    if screen is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Catalog is not initialized",
        )
    return screen


def build_state_response(screen: CatalogScreen) -> CatalogStateResponse:
    """Snapshot the screen and drain its pending notifications."""
    query = screen.query
    pagination = query.pagination
    editing = screen.mutation.editing_target
    return CatalogStateResponse(
        state=query.state.kind,
        error=getattr(query.state, "reason", None),
        search_text=query.search_text,
        pagination=PaginationResponse(
            page=pagination.page,
            total_pages=pagination.total_pages,
            total_count=pagination.total_count,
            has_prev=pagination.has_prev,
            has_next=pagination.has_next,
            show_controls=pagination.show_controls,
        ),
        products=query.products,
        empty_message=query.empty_message,
        draft=screen.mutation.draft,
        editing_product_id=editing.product_id if editing else None,
        notifications=[
            NotificationResponse(kind=n.kind.value, message=n.message, created_at=n.created_at)
            for n in screen.notifier.drain()
        ],
    )


def _displayed_product(screen: CatalogScreen, product_id: UUID) -> ProductRecord:
    product = screen.query.find_displayed(product_id)
    if product is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Product with ID {product_id} is not on the displayed page",
        )
    return product


@router.get(
    "",
    response_model=CatalogStateResponse,
    summary="Current screen state",
    description=(
        "Displayed products, pagination, draft and pending notifications. "
        "The first call loads the first page."
    ),
)
async def get_state(screen: CatalogScreen = Depends(get_catalog)) -> CatalogStateResponse:
    if isinstance(screen.query.state, Idle):
        await screen.query.refresh()
    return build_state_response(screen)


@router.post("/refresh", response_model=CatalogStateResponse, summary="Reload the current page")
async def refresh(screen: CatalogScreen = Depends(get_catalog)) -> CatalogStateResponse:
    await screen.query.refresh()
    return build_state_response(screen)


@router.put(
    "/search",
    response_model=CatalogStateResponse,
    summary="Search products by name",
    description="Sets the search text and reloads from the first page.",
)
async def search(
    payload: SearchRequest,
    screen: CatalogScreen = Depends(get_catalog),
) -> CatalogStateResponse:
    await screen.query.set_search(payload.text)
    return build_state_response(screen)


@router.post("/pages/next", response_model=CatalogStateResponse, summary="Go to the next page")
async def next_page(screen: CatalogScreen = Depends(get_catalog)) -> CatalogStateResponse:
    await screen.query.next_page()
    return build_state_response(screen)


@router.post("/pages/prev", response_model=CatalogStateResponse, summary="Go to the previous page")
async def prev_page(screen: CatalogScreen = Depends(get_catalog)) -> CatalogStateResponse:
    await screen.query.prev_page()
    return build_state_response(screen)


@router.post("/pages/{page}", response_model=CatalogStateResponse, summary="Jump to a page")
async def go_to_page(page: int, screen: CatalogScreen = Depends(get_catalog)) -> CatalogStateResponse:
    await screen.query.go_to_page(page)
    return build_state_response(screen)


@router.get("/draft", response_model=ProductDraft, summary="Current form draft")
async def get_draft(screen: CatalogScreen = Depends(get_catalog)) -> ProductDraft:
    return screen.mutation.draft


@router.patch(
    "/draft",
    response_model=ProductDraft,
    summary="Edit the form draft",
    description="Applies the provided fields to the draft. Slug and stock flag are derived and cannot be set.",
)
async def update_draft(
    changes: ProductDraftUpdate,
    screen: CatalogScreen = Depends(get_catalog),
) -> ProductDraft:
    try:
        return screen.mutation.update_draft(**changes.model_dump(exclude_unset=True, exclude_none=True))
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=e.errors(include_url=False),
        ) from e


@router.post("/draft/reset", response_model=CatalogStateResponse, summary="Start a new product")
async def reset_draft(screen: CatalogScreen = Depends(get_catalog)) -> CatalogStateResponse:
    screen.mutation.begin_create()
    return build_state_response(screen)


@router.post(
    "/draft/submit",
    response_model=CatalogStateResponse,
    summary="Save the draft",
    description="Creates a new product or updates the product being edited, then reloads the list.",
)
async def submit_draft(screen: CatalogScreen = Depends(get_catalog)) -> CatalogStateResponse:
    await screen.mutation.submit()
    return build_state_response(screen)


@router.put("/draft/image", response_model=ProductDraft, summary="Attach an image URL to the draft")
async def attach_image(
    payload: ImageUrlRequest,
    screen: CatalogScreen = Depends(get_catalog),
) -> ProductDraft:
    screen.mutation.attach_uploaded_image(payload.url)
    return screen.mutation.draft


@router.post(
    "/draft/image",
    response_model=CatalogStateResponse,
    summary="Upload an image for the draft",
    description="Stores the image in object storage and attaches its public URL to the draft.",
)
async def upload_image(
    file: UploadFile = File(..., description="Product image"),
    screen: CatalogScreen = Depends(get_catalog),
) -> CatalogStateResponse:
    try:
        content = await file.read()
        await screen.mutation.upload_image(file.filename or "image", content, file.content_type or "")
    finally:
        await file.close()
    return build_state_response(screen)


@router.post(
    "/products/{product_id}/edit",
    response_model=CatalogStateResponse,
    summary="Edit a displayed product",
    description="Seeds the draft from a product on the displayed page. No fetch is made.",
)
async def edit_product(
    product_id: UUID,
    screen: CatalogScreen = Depends(get_catalog),
) -> CatalogStateResponse:
    screen.mutation.begin_edit(_displayed_product(screen, product_id))
    return build_state_response(screen)


@router.delete(
    "/products/{product_id}",
    response_model=CatalogStateResponse,
    summary="Delete a displayed product",
    description="Irreversible. Only proceeds when confirm=true.",
)
async def delete_product(
    product_id: UUID,
    confirm: bool = Query(default=False, description="Operator confirmed the deletion"),
    screen: CatalogScreen = Depends(get_catalog),
) -> CatalogStateResponse:
    product = _displayed_product(screen, product_id)
    await screen.mutation.delete(product, lambda _: confirm)
    return build_state_response(screen)
