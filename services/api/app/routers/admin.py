from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException, Response
from services.api.app.db.deps import get_db
from services.api.app.models.catalog import (
    DefaultImageRequest,
    DeliveryOptionCreate,
    DeliveryOptionOut,
    DeliveryOptionUpdate,
    HeightCreate,
    HeightOut,
    HeightUpdate,
    SpeciesCreate,
    SpeciesOut,
    SpeciesUpdate,
    StandCreate,
    StandOut,
    StandUpdate,
    VariantOut,
    VariantUpdate,
    WreathCreate,
    WreathOut,
    WreathUpdate,
)
from services.api.app.services import catalog_admin
from services.api.app.services.catalog_admin import (
    CatalogConflictError,
    CatalogError,
    CatalogNotFoundError,
)
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/admin")


def _raise_catalog_http_error(e: Exception) -> None:
    if isinstance(e, CatalogNotFoundError):
        raise HTTPException(status_code=404, detail=str(e)) from e

    if isinstance(e, CatalogConflictError):
        raise HTTPException(status_code=409, detail=str(e)) from e

    if isinstance(e, CatalogError):
        raise HTTPException(status_code=400, detail=str(e)) from e

    logger.exception("Unexpected admin error", exc_info=e)
    raise HTTPException(status_code=500, detail="Internal Server Error") from e


# Species


@router.get("/species", response_model=list[SpeciesOut])
def list_species(db: Session = Depends(get_db)) -> list[SpeciesOut]:
    return [SpeciesOut.model_validate(s) for s in catalog_admin.list_species(db)]


@router.post("/species", response_model=SpeciesOut, status_code=201)
def create_species(payload: SpeciesCreate, db: Session = Depends(get_db)) -> SpeciesOut:
    try:
        species = catalog_admin.create_species(db, payload)
    except Exception as e:
        _raise_catalog_http_error(e)
    return SpeciesOut.model_validate(species)


@router.patch("/species/{species_id}", response_model=SpeciesOut)
def update_species(
    species_id: str, payload: SpeciesUpdate, db: Session = Depends(get_db)
) -> SpeciesOut:
    try:
        species = catalog_admin.update_species(db, species_id, payload)
    except Exception as e:
        _raise_catalog_http_error(e)
    return SpeciesOut.model_validate(species)


@router.get("/species/{species_id}/variants", response_model=list[VariantOut])
def list_variants(species_id: str, db: Session = Depends(get_db)) -> list[VariantOut]:
    try:
        variants = catalog_admin.list_variants(db, species_id)
    except Exception as e:
        _raise_catalog_http_error(e)
    return [VariantOut.model_validate(v) for v in variants]


@router.put("/species/{species_id}/default-image", response_model=VariantOut)
def set_default_image(
    species_id: str, payload: DefaultImageRequest, db: Session = Depends(get_db)
) -> VariantOut:
    try:
        variant = catalog_admin.set_default_image(db, species_id, payload.image_url)
    except Exception as e:
        _raise_catalog_http_error(e)
    return VariantOut.model_validate(variant)


@router.patch("/variants/{variant_id}", response_model=VariantOut)
def update_variant(
    variant_id: str, payload: VariantUpdate, db: Session = Depends(get_db)
) -> VariantOut:
    try:
        variant = catalog_admin.update_variant(db, variant_id, payload)
    except Exception as e:
        _raise_catalog_http_error(e)
    return VariantOut.model_validate(variant)


# Heights


@router.get("/species/{species_id}/heights", response_model=list[HeightOut])
def list_heights(species_id: str, db: Session = Depends(get_db)) -> list[HeightOut]:
    try:
        heights = catalog_admin.list_heights(db, species_id)
    except Exception as e:
        _raise_catalog_http_error(e)
    return [HeightOut.model_validate(h) for h in heights]


@router.post("/species/{species_id}/heights", response_model=HeightOut, status_code=201)
def add_height(
    species_id: str, payload: HeightCreate, db: Session = Depends(get_db)
) -> HeightOut:
    try:
        height = catalog_admin.add_height(db, species_id, payload)
    except Exception as e:
        _raise_catalog_http_error(e)
    return HeightOut.model_validate(height)


@router.patch("/heights/{height_id}", response_model=HeightOut)
def update_height(height_id: str, payload: HeightUpdate, db: Session = Depends(get_db)) -> HeightOut:
    try:
        height = catalog_admin.update_height(db, height_id, payload)
    except Exception as e:
        _raise_catalog_http_error(e)
    return HeightOut.model_validate(height)


@router.delete("/heights/{height_id}", status_code=204)
def delete_height(height_id: str, db: Session = Depends(get_db)) -> Response:
    try:
        catalog_admin.delete_height(db, height_id)
    except Exception as e:
        _raise_catalog_http_error(e)
    return Response(status_code=204)


# Stands


@router.get("/stands", response_model=list[StandOut])
def list_stands(db: Session = Depends(get_db)) -> list[StandOut]:
    return [StandOut.model_validate(s) for s in catalog_admin.list_stands(db)]


@router.post("/stands", response_model=StandOut, status_code=201)
def create_stand(payload: StandCreate, db: Session = Depends(get_db)) -> StandOut:
    try:
        stand = catalog_admin.create_stand(db, payload)
    except Exception as e:
        _raise_catalog_http_error(e)
    return StandOut.model_validate(stand)


@router.patch("/stands/{stand_id}", response_model=StandOut)
def update_stand(stand_id: str, payload: StandUpdate, db: Session = Depends(get_db)) -> StandOut:
    try:
        stand = catalog_admin.update_stand(db, stand_id, payload)
    except Exception as e:
        _raise_catalog_http_error(e)
    return StandOut.model_validate(stand)


# Wreaths


@router.get("/wreaths", response_model=list[WreathOut])
def list_wreaths(db: Session = Depends(get_db)) -> list[WreathOut]:
    return [WreathOut.model_validate(w) for w in catalog_admin.list_wreaths(db)]


@router.post("/wreaths", response_model=WreathOut, status_code=201)
def create_wreath(payload: WreathCreate, db: Session = Depends(get_db)) -> WreathOut:
    try:
        wreath = catalog_admin.create_wreath(db, payload)
    except Exception as e:
        _raise_catalog_http_error(e)
    return WreathOut.model_validate(wreath)


@router.patch("/wreaths/{wreath_id}", response_model=WreathOut)
def update_wreath(wreath_id: str, payload: WreathUpdate, db: Session = Depends(get_db)) -> WreathOut:
    try:
        wreath = catalog_admin.update_wreath(db, wreath_id, payload)
    except Exception as e:
        _raise_catalog_http_error(e)
    return WreathOut.model_validate(wreath)


# Delivery options


@router.get("/delivery-options", response_model=list[DeliveryOptionOut])
def list_delivery_options(db: Session = Depends(get_db)) -> list[DeliveryOptionOut]:
    return [DeliveryOptionOut.model_validate(o) for o in catalog_admin.list_delivery_options(db)]


@router.post("/delivery-options", response_model=DeliveryOptionOut, status_code=201)
def create_delivery_option(
    payload: DeliveryOptionCreate, db: Session = Depends(get_db)
) -> DeliveryOptionOut:
    try:
        option = catalog_admin.create_delivery_option(db, payload)
    except Exception as e:
        _raise_catalog_http_error(e)
    return DeliveryOptionOut.model_validate(option)


@router.patch("/delivery-options/{option_id}", response_model=DeliveryOptionOut)
def update_delivery_option(
    option_id: str, payload: DeliveryOptionUpdate, db: Session = Depends(get_db)
) -> DeliveryOptionOut:
    try:
        option = catalog_admin.update_delivery_option(db, option_id, payload)
    except Exception as e:
        _raise_catalog_http_error(e)
    return DeliveryOptionOut.model_validate(option)
