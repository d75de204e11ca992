from uuid import UUID

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile, status
from pydantic import TypeAdapter, ValidationError

from listing_wizard.api.dependencies import (
    get_complete_listing_use_case,
    get_current_seller_id,
    get_delete_listing_use_case,
    get_draft_workflow,
    get_list_listings_use_case,
    get_listing_use_case,
    get_update_listing_use_case,
    get_update_status_use_case,
)
from listing_wizard.api.schemas.listing_requests import (
    CompleteListingRequest,
    DescriptionRequest,
    KeywordsRequest,
    ListingDetailsRequest,
    OfferRequest,
    StatusPatchRequest,
    UpdateListingRequest,
    VariationItem,
    VariationTypesRequest,
)
from listing_wizard.api.schemas.listing_responses import (
    DeleteListingResponse,
    GalleryStepResponse,
    ListingDetailResponse,
    ListingImageResponse,
    ListingResponse,
    ListingSummaryResponse,
    PaginatedListingsResponse,
    StatusChangeResponse,
    UpdateListingResponse,
    VariationResponse,
    VariationStepResponse,
)
from listing_wizard.application.interfaces.asset_store import UploadedFile
from listing_wizard.application.use_cases.complete_listing_in_one_shot import (
    CompleteListingInOneShot,
    CompleteListingInput,
)
from listing_wizard.application.use_cases.delete_listing import DeleteListing
from listing_wizard.application.use_cases.get_listing import GetListing
from listing_wizard.application.use_cases.list_listings import ListListings, ListListingsInput
from listing_wizard.application.use_cases.listing_draft_workflow import ListingDraftWorkflow
from listing_wizard.application.use_cases.update_listing import (
    UpdateListing,
    UpdateListingInput,
    UpdateListingStatus,
)
from listing_wizard.domain.enums.listing_status import ListingStatus
from listing_wizard.domain.exceptions import ListingValidationError

router = APIRouter(prefix="/listings", tags=["listings"])

_variation_items = TypeAdapter(list[VariationItem])


async def _read_uploads(files: list[UploadFile]) -> list[UploadedFile]:
    uploads = []
    for file in files:
        uploads.append(
            UploadedFile(
                filename=file.filename or "",
                content_type=file.content_type or "",
                data=await file.read(),
            )
        )
    return uploads


def _parse_json_field(raw: str, model, field_name: str):
    """Validate a JSON form field, reporting failures like any other listing validation error."""
    try:
        if isinstance(model, TypeAdapter):
            return model.validate_json(raw)
        return model.model_validate_json(raw)
    except ValidationError as exc:
        fields = sorted({".".join(str(p) for p in err["loc"]) or field_name for err in exc.errors()})
        raise ListingValidationError(f"Invalid {field_name}: {exc.error_count()} error(s)", fields=fields) from exc


# ---- Wizard steps -----------------------------------------------------------

@router.post("/steps/1", response_model=ListingResponse, status_code=status.HTTP_201_CREATED)
async def create_draft(
    body: ListingDetailsRequest,
    seller_id: UUID = Depends(get_current_seller_id),
    workflow: ListingDraftWorkflow = Depends(get_draft_workflow),
) -> ListingResponse:
    listing = await workflow.create_draft(seller_id, body.to_domain())
    return ListingResponse.from_domain(listing)


@router.post("/{listing_id}/steps/2", response_model=ListingResponse)
async def set_variation_types(
    listing_id: UUID,
    body: VariationTypesRequest,
    seller_id: UUID = Depends(get_current_seller_id),
    workflow: ListingDraftWorkflow = Depends(get_draft_workflow),
) -> ListingResponse:
    listing = await workflow.set_variation_types(
        listing_id,
        seller_id,
        body.variation_types,
        colors=body.colors,
        sizes=body.sizes,
        editions=body.editions,
    )
    return ListingResponse.from_domain(listing)


@router.post("/{listing_id}/steps/3", response_model=VariationStepResponse)
async def set_variations(
    listing_id: UUID,
    variations: str = Form(...),
    images: list[UploadFile] = File(default=[]),
    seller_id: UUID = Depends(get_current_seller_id),
    workflow: ListingDraftWorkflow = Depends(get_draft_workflow),
) -> VariationStepResponse:
    """Replace the whole variation set. `variations` is a JSON array; images pair by position."""
    items = _parse_json_field(variations, _variation_items, "variations")
    output = await workflow.set_variations(
        listing_id,
        seller_id,
        [item.to_domain() for item in items],
        await _read_uploads(images),
    )
    return VariationStepResponse(
        listing=ListingResponse.from_domain(output.listing),
        variations=[VariationResponse.from_domain(v) for v in output.result.variations],
        removed_count=output.result.removed_count,
        total=output.result.total,
    )


@router.post("/{listing_id}/steps/4", response_model=ListingResponse)
async def set_offer(
    listing_id: UUID,
    body: OfferRequest,
    seller_id: UUID = Depends(get_current_seller_id),
    workflow: ListingDraftWorkflow = Depends(get_draft_workflow),
) -> ListingResponse:
    listing = await workflow.set_offer(listing_id, seller_id, body.to_domain())
    return ListingResponse.from_domain(listing)


@router.post("/{listing_id}/steps/5", response_model=GalleryStepResponse)
async def set_gallery(
    listing_id: UUID,
    images: list[UploadFile] = File(default=[]),
    seller_id: UUID = Depends(get_current_seller_id),
    workflow: ListingDraftWorkflow = Depends(get_draft_workflow),
) -> GalleryStepResponse:
    output = await workflow.set_gallery(listing_id, seller_id, await _read_uploads(images))
    return GalleryStepResponse(
        listing=ListingResponse.from_domain(output.listing),
        images=[ListingImageResponse.from_domain(i) for i in output.images],
    )


@router.post("/{listing_id}/steps/6", response_model=ListingResponse)
async def set_description(
    listing_id: UUID,
    body: DescriptionRequest,
    seller_id: UUID = Depends(get_current_seller_id),
    workflow: ListingDraftWorkflow = Depends(get_draft_workflow),
) -> ListingResponse:
    listing = await workflow.set_description(
        listing_id, seller_id, body.description or "", body.bullet_points
    )
    return ListingResponse.from_domain(listing)


@router.post("/{listing_id}/steps/7", response_model=ListingResponse)
async def set_keywords_and_publish(
    listing_id: UUID,
    body: KeywordsRequest,
    seller_id: UUID = Depends(get_current_seller_id),
    workflow: ListingDraftWorkflow = Depends(get_draft_workflow),
) -> ListingResponse:
    listing = await workflow.set_keywords_and_publish(listing_id, seller_id, body.keywords)
    return ListingResponse.from_domain(listing)


@router.post("/complete", response_model=ListingDetailResponse, status_code=status.HTTP_201_CREATED)
async def complete_listing(
    listing_data: str = Form(...),
    images: list[UploadFile] = File(default=[]),
    variation_images: list[UploadFile] = File(default=[]),
    seller_id: UUID = Depends(get_current_seller_id),
    use_case: CompleteListingInOneShot = Depends(get_complete_listing_use_case),
) -> ListingDetailResponse:
    """Create and publish a listing in one request."""
    body = _parse_json_field(listing_data, CompleteListingRequest, "listing_data")
    output = await use_case.execute(
        CompleteListingInput(
            owner_id=seller_id,
            details=body.details.to_domain(),
            offer=body.offer.to_domain(),
            description=body.description,
            bullet_points=body.bullet_points,
            keywords=body.keywords,
            variation_types=body.variation_types,
            colors=body.colors,
            sizes=body.sizes,
            editions=body.editions,
            variations=[item.to_domain() for item in body.variations],
            variation_uploads=await _read_uploads(variation_images),
            gallery_uploads=await _read_uploads(images),
        )
    )
    return ListingDetailResponse(
        listing=ListingResponse.from_domain(output.listing),
        variations=[VariationResponse.from_domain(v) for v in output.variations],
        images=[ListingImageResponse.from_domain(i) for i in output.images],
    )


# ---- Management --------------------------------------------------------------

@router.get("", response_model=PaginatedListingsResponse)
async def list_listings(
    status_filter: ListingStatus | None = Query(default=None, alias="status"),
    category: str | None = Query(default=None),
    search: str | None = Query(default=None),
    sort_by: str = Query(default="created_at"),
    order: str = Query(default="desc"),
    page: int = Query(default=1, ge=1),
    limit: int = Query(default=10, ge=1, le=100),
    seller_id: UUID = Depends(get_current_seller_id),
    use_case: ListListings = Depends(get_list_listings_use_case),
) -> PaginatedListingsResponse:
    """List the calling seller's listings."""
    result = await use_case.execute(
        ListListingsInput(
            owner_id=seller_id,
            status=status_filter,
            category=category,
            search=search,
            sort_by=sort_by,
            order=order,
            page=page,
            limit=limit,
        )
    )
    return PaginatedListingsResponse(
        listings=[
            ListingSummaryResponse(
                listing=ListingResponse.from_domain(item.listing),
                primary_image_url=item.primary_image_url,
            )
            for item in result.items
        ],
        total=result.total,
        page=result.page,
        limit=result.limit,
        total_pages=result.total_pages,
        has_next=result.has_next,
        has_prev=result.has_prev,
    )


@router.get("/{listing_id}", response_model=ListingDetailResponse)
async def get_listing(
    listing_id: UUID,
    use_case: GetListing = Depends(get_listing_use_case),
) -> ListingDetailResponse:
    view = await use_case.execute(listing_id)
    return ListingDetailResponse(
        listing=ListingResponse.from_domain(view.listing),
        variations=[VariationResponse.from_domain(v) for v in view.variations],
        images=[ListingImageResponse.from_domain(i) for i in view.images],
    )


@router.put("/{listing_id}", response_model=UpdateListingResponse)
async def update_listing(
    listing_id: UUID,
    listing_data: str = Form(default="{}"),
    images: list[UploadFile] = File(default=[]),
    seller_id: UUID = Depends(get_current_seller_id),
    use_case: UpdateListing = Depends(get_update_listing_use_case),
) -> UpdateListingResponse:
    """Edit the allow-listed fields; any uploaded images are appended to the gallery."""
    body = _parse_json_field(listing_data, UpdateListingRequest, "listing_data")
    output = await use_case.execute(
        UpdateListingInput(
            listing_id=listing_id,
            owner_id=seller_id,
            changes=body.model_dump(exclude_unset=True),
            uploads=await _read_uploads(images),
        )
    )
    return UpdateListingResponse(
        listing=ListingResponse.from_domain(output.listing),
        applied_fields=output.applied_fields,
        added_images=[ListingImageResponse.from_domain(i) for i in output.added_images],
    )


@router.patch("/{listing_id}/status", response_model=StatusChangeResponse)
async def update_listing_status(
    listing_id: UUID,
    body: StatusPatchRequest,
    seller_id: UUID = Depends(get_current_seller_id),
    use_case: UpdateListingStatus = Depends(get_update_status_use_case),
) -> StatusChangeResponse:
    try:
        new_status = ListingStatus(body.status)
    except ValueError:
        raise ListingValidationError(f"Invalid status: {body.status}", fields=["status"]) from None
    output = await use_case.execute(listing_id, seller_id, new_status)
    return StatusChangeResponse(
        listing_id=output.listing_id,
        from_status=output.from_status,
        to_status=output.to_status,
    )


@router.delete("/{listing_id}", response_model=DeleteListingResponse)
async def delete_listing(
    listing_id: UUID,
    seller_id: UUID = Depends(get_current_seller_id),
    use_case: DeleteListing = Depends(get_delete_listing_use_case),
) -> DeleteListingResponse:
    output = await use_case.execute(listing_id, seller_id)
    return DeleteListingResponse(
        listing_id=output.listing_id,
        media_cleanup_failures=output.media_cleanup_failures,
    )
