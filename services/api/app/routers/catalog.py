from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException
from services.api.app.db.deps import get_db
from services.api.app.models.catalog import (
    DeliveryOptionOut,
    HeightOut,
    ScheduleWindowsOut,
    SpeciesOptionsOut,
    SpeciesOut,
    StandOut,
    VariantOut,
    WreathOut,
)
from services.api.app.services.catalog import (
    SCHEDULE_TIME_WINDOWS,
    CatalogItemUnavailableError,
    earliest_delivery_date,
    get_species_options,
    list_visible_delivery_options,
    list_visible_species,
    list_visible_stands,
    list_visible_wreaths,
)
from sqlalchemy.orm import Session

router = APIRouter()


@router.get("/v1/catalog/species", response_model=list[SpeciesOut])
def list_species(db: Session = Depends(get_db)) -> list[SpeciesOut]:
    return [SpeciesOut.model_validate(s) for s in list_visible_species(db)]


@router.get("/v1/catalog/species/{species_id}/options", response_model=SpeciesOptionsOut)
def species_options(species_id: str, db: Session = Depends(get_db)) -> SpeciesOptionsOut:
    try:
        options = get_species_options(db, species_id)
    except CatalogItemUnavailableError as e:
        raise HTTPException(status_code=404, detail=str(e)) from e

    return SpeciesOptionsOut(
        species=SpeciesOut.model_validate(options.species),
        variants=[VariantOut.model_validate(v) for v in options.variants],
        heights=[HeightOut.model_validate(h) for h in options.heights],
        default_fullness=options.default_fullness,
        default_height_feet=options.default_height_feet,
    )


@router.get("/v1/catalog/stands", response_model=list[StandOut])
def list_stands(db: Session = Depends(get_db)) -> list[StandOut]:
    return [StandOut.model_validate(s) for s in list_visible_stands(db)]


@router.get("/v1/catalog/wreaths", response_model=list[WreathOut])
def list_wreaths(db: Session = Depends(get_db)) -> list[WreathOut]:
    return [WreathOut.model_validate(w) for w in list_visible_wreaths(db)]


@router.get("/v1/catalog/delivery-options", response_model=list[DeliveryOptionOut])
def list_delivery_options(db: Session = Depends(get_db)) -> list[DeliveryOptionOut]:
    return [DeliveryOptionOut.model_validate(o) for o in list_visible_delivery_options(db)]


@router.get("/v1/catalog/schedule-windows", response_model=ScheduleWindowsOut)
def schedule_windows() -> ScheduleWindowsOut:
    return ScheduleWindowsOut(
        time_windows=list(SCHEDULE_TIME_WINDOWS),
        earliest_date=earliest_delivery_date(),
    )
